"""CSV text sink wrapping the stdlib csv writer."""

from __future__ import annotations

import csv
from typing import TYPE_CHECKING, Any

from sql_csv.core.exceptions import OutputError

if TYPE_CHECKING:
    from collections.abc import Sequence

LINE_TERMINATOR = "\n"


class CsvSink:
    """Writes rows of strings to a text stream.

    Quoting is minimal: only fields containing the delimiter, a quote or a
    line break are quoted, and embedded quotes are doubled.
    """

    def __init__(self, stream: Any, delimiter: str = ",") -> None:
        self.stream = stream
        self.rows_written = 0
        self._writer = csv.writer(
            stream,
            delimiter=delimiter,
            lineterminator=LINE_TERMINATOR,
            quoting=csv.QUOTE_MINIMAL,
        )

    def write_row(self, row: Sequence[str]) -> None:
        try:
            self._writer.writerow(row)
        except (csv.Error, OSError, ValueError) as e:
            raise OutputError(f"Failed to write CSV row: {e}") from e
        self.rows_written += 1

    def flush(self) -> None:
        flush = getattr(self.stream, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except (OSError, ValueError) as e:
            raise OutputError(f"Failed to flush CSV output: {e}") from e
