"""CSV conversion of query results."""

from sql_csv.converter.converter import (
    Converter,
    RowPostProcessor,
    write,
    write_file,
    write_string,
)
from sql_csv.converter.headers import resolve_headers
from sql_csv.converter.sink import CsvSink
from sql_csv.converter.values import CellKind, classify, stringify
