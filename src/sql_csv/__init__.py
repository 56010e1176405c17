"""SQL CSV - turn database query results into CSV."""

from sql_csv.__about__ import __version__
from sql_csv.converter import (
    Converter,
    RowPostProcessor,
    write,
    write_file,
    write_string,
)
from sql_csv.core.config import ConverterOptions, resolve_options
from sql_csv.core.exceptions import (
    ConfigError,
    ConversionError,
    IdentifierDecodeError,
    OutputError,
    RowSourceError,
    SqlCsvError,
)
from sql_csv.core.logging import get_logger, setup_logging
from sql_csv.core.models import ColumnMeta, QueryResult
from sql_csv.core.monitoring import setup_sentry
from sql_csv.sources import (
    CursorRowSource,
    PgCursorRowSource,
    ResultRowSource,
    RowSource,
)

__all__ = [
    "ColumnMeta",
    "ConfigError",
    "ConversionError",
    "Converter",
    "ConverterOptions",
    "CursorRowSource",
    "IdentifierDecodeError",
    "OutputError",
    "PgCursorRowSource",
    "QueryResult",
    "ResultRowSource",
    "RowPostProcessor",
    "RowSource",
    "RowSourceError",
    "SqlCsvError",
    "__version__",
    "get_logger",
    "resolve_options",
    "setup_logging",
    "setup_sentry",
    "write",
    "write_file",
    "write_string",
]
