"""RowSource protocol consumed by the converter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sql_csv.core.models import ColumnMeta


@runtime_checkable
class RowSource(Protocol):
    """Forward-only cursor over a query result.

    The converter borrows a source for one write: it reads the column
    metadata once, then iterates the rows exactly once. It never closes,
    rewinds or reconfigures the source. Any exception raised while
    iterating is treated as the source's scan/iteration error.
    """

    def column_metadata(self) -> Sequence[ColumnMeta]:
        """Return one ColumnMeta per result column, in column order."""
        ...

    def __iter__(self) -> Iterator[Sequence[Any]]:
        """Yield raw row values, one row per step."""
        ...
