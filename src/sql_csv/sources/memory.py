"""In-memory row source over a materialised QueryResult."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sql_csv.core.models import ColumnMeta, QueryResult


class ResultRowSource:
    def __init__(self, result: QueryResult) -> None:
        self.result = result

    def column_metadata(self) -> Sequence[ColumnMeta]:
        return self.result.columns

    def __iter__(self) -> Iterator[Sequence[Any]]:
        return iter(self.result.rows)
