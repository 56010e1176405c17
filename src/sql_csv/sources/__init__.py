"""Row sources feeding the converter."""

from sql_csv.sources.base import RowSource
from sql_csv.sources.cursor import CursorRowSource
from sql_csv.sources.memory import ResultRowSource
from sql_csv.sources.postgres import PgCursorRowSource
