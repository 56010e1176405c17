"""Header row resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sql_csv.core.config import ConverterOptions
    from sql_csv.core.models import ColumnMeta


def resolve_headers(
    options: ConverterOptions, columns: Sequence[ColumnMeta]
) -> list[str] | None:
    """Return the header row to write, or None when headers are disabled.

    Explicit headers win over column names. Their length is not checked
    against the column count.
    """
    if not options.write_headers:
        return None
    if options.headers:
        return list(options.headers)
    return [col.name for col in columns]
