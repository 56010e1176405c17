"""Tests for Converter: headers, delimiter, time format, post-processing."""

import datetime
import io
import uuid
from unittest.mock import patch

import pytest

from sql_csv import write, write_file, write_string
from sql_csv.converter import Converter
from sql_csv.core.config import ConverterOptions
from sql_csv.core.exceptions import ConfigError
from sql_csv.core.models import ColumnMeta, QueryResult
from sql_csv.sources.memory import ResultRowSource

BIRTHDAY = datetime.datetime.fromtimestamp(123456789, tz=datetime.UTC)
BIRTHDAY_TEXT = "1973-11-29 21:33:09+00:00"
PEOPLE_CSV = f"name,age,bdate\nAlice,1,{BIRTHDAY_TEXT}\n"


def _source(rows, columns):
    return ResultRowSource(QueryResult(columns=columns, rows=rows))


# -- Defaults --


@pytest.mark.unit
def test_defaults(converter):
    assert converter.write_headers is True
    assert converter.delimiter == ","
    assert converter.headers == []
    assert converter.time_format == ""
    assert converter.row_post_processor is None


@pytest.mark.unit
def test_write_string(converter):
    assert converter.write_string() == PEOPLE_CSV


@pytest.mark.unit
def test_str_renders_csv(converter):
    assert str(converter) == PEOPLE_CSV


@pytest.mark.unit
def test_write_to_stream(converter):
    buf = io.StringIO()
    converter.write(buf)
    assert buf.getvalue() == PEOPLE_CSV


@pytest.mark.unit
def test_module_shortcuts(people_columns, temp_dir):
    rows = [("Alice", 1, BIRTHDAY)]
    assert write_string(_source(rows, people_columns)) == PEOPLE_CSV

    buf = io.StringIO()
    write(buf, _source(rows, people_columns))
    assert buf.getvalue() == PEOPLE_CSV

    path = temp_dir / "people.csv"
    write_file(path, _source(rows, people_columns))
    assert path.read_text() == PEOPLE_CSV


# -- Headers --


@pytest.mark.unit
def test_headers_from_column_names(people_columns):
    rows = [("Alice", 1, BIRTHDAY), ("Bob", 2, None)]
    lines = Converter(_source(rows, people_columns)).write_string().splitlines()
    assert lines[0] == "name,age,bdate"
    assert len(lines) == 3


@pytest.mark.unit
def test_disable_headers(converter):
    converter.write_headers = False
    assert converter.write_string() == f"Alice,1,{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
def test_disable_headers_keeps_row_count(people_columns):
    rows = [("Alice", 1, None), ("Bob", 2, None), ("Carol", 3, None)]
    converter = Converter(_source(rows, people_columns))
    converter.set_write_headers(False)
    assert converter.write_string() == "Alice,1,\nBob,2,\nCarol,3,\n"


@pytest.mark.unit
def test_explicit_headers(converter):
    converter.set_headers(["Name", "Age", "Birthday"])
    assert converter.write_string() == f"Name,Age,Birthday\nAlice,1,{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
def test_explicit_headers_length_not_checked(converter):
    converter.headers = ["only"]
    assert converter.write_string() == f"only\nAlice,1,{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
def test_explicit_headers_ignored_when_headers_disabled(converter):
    converter.headers = ["Name", "Age", "Birthday"]
    converter.write_headers = False
    assert converter.write_string() == f"Alice,1,{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
def test_empty_result_writes_header_only(people_columns):
    assert Converter(_source([], people_columns)).write_string() == "name,age,bdate\n"


# -- Values --


@pytest.mark.unit
def test_null_value_is_empty_field():
    columns = [
        ColumnMeta(name="name", type_name="text"),
        ColumnMeta(name="nickname", type_name="text"),
        ColumnMeta(name="age", type_name="int4"),
    ]
    converter = Converter(_source([("Alice", None, 1)], columns))
    assert converter.write_string() == "name,nickname,age\nAlice,,1\n"


@pytest.mark.unit
def test_time_format(converter):
    converter.set_time_format("%H:%M")
    assert converter.write_string() == "name,age,bdate\nAlice,1,21:33\n"


@pytest.mark.unit
def test_identifier_column():
    value = uuid.UUID("0f8fad5b-d9cb-469f-a165-70867728950e")
    columns = [ColumnMeta(name="id", type_name="UNIQUEIDENTIFIER")]
    converter = Converter(_source([(value.bytes,)], columns))
    assert converter.write_string() == f"id\n{value}\n"


@pytest.mark.unit
def test_fields_are_quoted_when_needed():
    columns = [ColumnMeta(name="a"), ColumnMeta(name="b")]
    converter = Converter(_source([("last, first", 'say "hi"')], columns))
    assert converter.write_string() == 'a,b\n"last, first","say ""hi"""\n'


# -- Delimiter --


@pytest.mark.unit
def test_alternate_delimiter(converter):
    converter.set_delimiter("|")
    assert converter.write_string() == f"name|age|bdate\nAlice|1|{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
def test_tab_delimiter(converter):
    converter.delimiter = "\t"
    assert converter.write_string() == f"name\tage\tbdate\nAlice\t1\t{BIRTHDAY_TEXT}\n"


@pytest.mark.unit
@pytest.mark.parametrize("unset", ["", "\x00", None])
def test_unset_delimiter_falls_back_to_comma(converter, unset):
    converter.delimiter = unset
    assert converter.delimiter == ","
    assert converter.write_string() == PEOPLE_CSV


@pytest.mark.unit
@pytest.mark.parametrize("bad", [";;", '"', "\n"])
def test_invalid_delimiter_raises_config_error(converter, bad):
    with pytest.raises(ConfigError):
        converter.set_delimiter(bad)


@pytest.mark.unit
def test_options_are_copied(people_source):
    options = ConverterOptions(delimiter=";")
    converter = Converter(people_source, options)
    converter.delimiter = "|"
    assert options.delimiter == ";"
    assert converter.delimiter == "|"


# -- Row post-processor --


@pytest.mark.unit
def test_post_processor_rewrites_rows(converter):
    converter.set_row_post_processor(lambda row, columns: (True, [row[0], "X", "X"]))
    assert converter.write_string() == "name,age,bdate\nAlice,X,X\n"


@pytest.mark.unit
def test_post_processor_omits_rows(converter):
    converter.set_row_post_processor(lambda row, columns: (False, []))
    assert converter.write_string() == "name,age,bdate\n"


@pytest.mark.unit
def test_post_processor_discarded_row_content_not_written(converter):
    converter.set_row_post_processor(lambda row, columns: (False, ["leak"]))
    assert "leak" not in converter.write_string()


@pytest.mark.unit
def test_post_processor_may_change_width_and_order(converter):
    converter.set_row_post_processor(
        lambda row, columns: (True, [row[1], row[0], "extra", "fields"])
    )
    assert converter.write_string() == "name,age,bdate\n1,Alice,extra,fields\n"


@pytest.mark.unit
def test_post_processor_called_in_order_with_metadata(people_columns):
    rows = [("Alice", 1, None), ("Bob", 2, None), ("Carol", 3, None)]
    converter = Converter(_source(rows, people_columns))
    calls = []

    def processor(row, columns):
        calls.append((list(row), [c.name for c in columns]))
        return row[0] != "Bob", row

    converter.set_row_post_processor(processor)
    assert converter.write_string() == "name,age,bdate\nAlice,1,\nCarol,3,\n"
    assert [c[0] for c in calls] == [
        ["Alice", "1", ""],
        ["Bob", "2", ""],
        ["Carol", "3", ""],
    ]
    assert all(c[1] == ["name", "age", "bdate"] for c in calls)


@pytest.mark.unit
def test_post_processor_can_be_removed(converter):
    converter.set_row_post_processor(lambda row, columns: (False, row))
    converter.set_row_post_processor(None)
    assert converter.write_string() == PEOPLE_CSV


@pytest.mark.unit
def test_post_processor_error_propagates(converter):
    def processor(row, columns):
        raise RuntimeError("boom")

    converter.set_row_post_processor(processor)
    with pytest.raises(RuntimeError, match="boom"):
        converter.write_string()


# -- Files --


@pytest.mark.unit
def test_write_file(converter, temp_dir):
    path = temp_dir / "out.csv"
    converter.write_file(path)
    assert path.read_text() == PEOPLE_CSV


@pytest.mark.unit
def test_write_file_truncates_existing(converter, temp_dir):
    path = temp_dir / "out.csv"
    path.write_text("old content that is much longer than the new one\n" * 10)
    converter.write_file(str(path))
    assert path.read_text() == PEOPLE_CSV


@pytest.mark.unit
def test_file_and_string_output_are_identical(people_columns, temp_dir):
    rows = [
        ("Alice", 1, BIRTHDAY),
        ("Bob, Jr.", 2, None),
        ('Say "hi"', 3, BIRTHDAY),
        (b"caf\xc3\xa9 \xff", 4, None),
        ("multi\nline", 5, None),
    ]
    path = temp_dir / "out.csv"
    Converter(_source(rows, people_columns)).write_file(path)
    text = Converter(_source(rows, people_columns)).write_string()
    assert path.read_bytes() == text.encode("utf-8", errors="surrogateescape")


# -- Monitoring --


@pytest.mark.unit
def test_write_runs_inside_named_span(converter):
    with patch("sql_csv.converter.converter.sentry_sdk.start_span") as start_span:
        converter.write_string()
    kwargs = start_span.call_args.kwargs
    assert kwargs["op"] == "csv.write"
    assert kwargs["name"] == "csv conversion"
    assert "description" not in kwargs
