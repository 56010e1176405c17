"""DB-API 2.0 cursor adapter.

Wraps a cursor on which execute() has already been called. Rows are
fetched one at a time so at most one row is held in memory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sql_csv.core.exceptions import RowSourceError
from sql_csv.core.models import ColumnMeta

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence


def _driver_error(cursor: Any) -> type[Exception]:
    # PEP 249 optional extension: Connection.Error exposes the driver's base class.
    connection = getattr(cursor, "connection", None)
    error = getattr(connection, "Error", None)
    if isinstance(error, type) and issubclass(error, Exception):
        return error
    return Exception


class CursorRowSource:
    """Row source over any DB-API 2.0 cursor.

    Declared type names come from ``type_names`` (keyed by the driver's
    type code) when given; otherwise string type codes are used as-is and
    anything else maps to an empty type name.
    """

    def __init__(
        self,
        cursor: Any,
        type_names: Mapping[Any, str] | None = None,
        driver_error: type[Exception] | None = None,
    ) -> None:
        self.cursor = cursor
        self.type_names = dict(type_names or {})
        self.driver_error = driver_error or _driver_error(cursor)

    def type_name(self, type_code: Any) -> str:
        if type_code in self.type_names:
            return self.type_names[type_code]
        if isinstance(type_code, str):
            return type_code
        return ""

    def column_metadata(self) -> Sequence[ColumnMeta]:
        try:
            description = self.cursor.description
        except self.driver_error as e:
            raise RowSourceError(f"Failed to read column metadata: {e}") from e

        if description is None:
            msg = "Cursor has no result set. Execute a query that returns rows."
            raise RowSourceError(msg)

        return [
            ColumnMeta(
                name=desc[0],
                type_name=self.type_name(desc[1]),
                type_code=desc[1],
            )
            for desc in description
        ]

    def __iter__(self) -> Iterator[Sequence[Any]]:
        while True:
            try:
                row = self.cursor.fetchone()
            except self.driver_error as e:
                raise RowSourceError(f"Failed to fetch row: {e}") from e
            if row is None:
                return
            yield row
