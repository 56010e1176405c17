"""Shared test fixtures for SQL CSV."""

import datetime
import sqlite3
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from sql_csv.converter import Converter
from sql_csv.core.models import ColumnMeta, QueryResult
from sql_csv.sources.memory import ResultRowSource


@pytest.fixture
def people_columns():
    return [
        ColumnMeta(name="name", type_name="text", type_code=25),
        ColumnMeta(name="age", type_name="int4", type_code=23),
        ColumnMeta(name="bdate", type_name="timestamptz", type_code=1184),
    ]


@pytest.fixture
def people_source(people_columns):
    """One row: Alice, 1, 1973-11-29 21:33:09 UTC."""
    bdate = datetime.datetime.fromtimestamp(123456789, tz=datetime.UTC)
    rows = [("Alice", 1, bdate)]
    return ResultRowSource(QueryResult(columns=people_columns, rows=rows))


@pytest.fixture
def converter(people_source):
    return Converter(people_source)


@pytest.fixture
def temp_dir():
    """Temporary directory for output files."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sqlite_conn():
    """In-memory SQLite database with a populated people table."""
    conn = sqlite3.connect(":memory:")
    conn.execute(
        "CREATE TABLE people (name TEXT, nickname TEXT, age INTEGER, photo BLOB)"
    )
    conn.execute(
        "INSERT INTO people VALUES (?, ?, ?, ?)", ("Alice", None, 1, b"\x89PNG")
    )
    conn.execute("INSERT INTO people VALUES (?, ?, ?, ?)", ("Bob", "bobby", 2, None))
    conn.commit()
    yield conn
    conn.close()
