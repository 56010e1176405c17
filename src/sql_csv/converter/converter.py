"""Converter: streams a RowSource into delimited text.

A Converter is bound to one row source and is meant for exactly one
terminal write (write, write_file, write_string or str()). Settings may be
changed freely before that write.
"""

from __future__ import annotations

import contextlib
import io
import time
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import sentry_sdk
from pydantic import ValidationError

from sql_csv.converter.headers import resolve_headers
from sql_csv.converter.sink import CsvSink
from sql_csv.converter.values import stringify
from sql_csv.core.config import ConverterOptions
from sql_csv.core.exceptions import (
    ConfigError,
    ConversionError,
    OutputError,
    RowSourceError,
)
from sql_csv.core.logging import get_logger
from sql_csv.core.models import ColumnMeta

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sql_csv.sources.base import RowSource

# Receives the stringified row and the column metadata. Returns whether to
# write the row, and the row to write.
RowPostProcessor = Callable[
    [list[str], Sequence[ColumnMeta]], tuple[bool, list[str]]
]


class Converter:
    """Converts the rows of a RowSource to CSV.

    Defaults: headers written from column names, comma delimiter, no time
    format, no row post-processor.
    """

    def __init__(
        self, source: RowSource, options: ConverterOptions | None = None
    ) -> None:
        self.source = source
        self.options = (
            options.model_copy(deep=True) if options is not None else ConverterOptions()
        )
        self.row_post_processor: RowPostProcessor | None = None

    # -- Settings --

    def _set_option(self, name: str, value: Any) -> None:
        try:
            setattr(self.options, name, value)
        except ValidationError as e:
            raise ConfigError(f"Invalid value for {name}: {e}") from e

    @property
    def headers(self) -> list[str]:
        return self.options.headers

    @headers.setter
    def headers(self, value: Sequence[str]) -> None:
        self._set_option("headers", list(value))

    @property
    def write_headers(self) -> bool:
        return self.options.write_headers

    @write_headers.setter
    def write_headers(self, value: bool) -> None:
        self._set_option("write_headers", value)

    @property
    def time_format(self) -> str:
        return self.options.time_format

    @time_format.setter
    def time_format(self, value: str) -> None:
        self._set_option("time_format", value)

    @property
    def delimiter(self) -> str:
        return self.options.delimiter

    @delimiter.setter
    def delimiter(self, value: str | None) -> None:
        self._set_option("delimiter", value)

    def set_headers(self, headers: Sequence[str]) -> None:
        self.headers = headers

    def set_write_headers(self, write_headers: bool) -> None:
        self.write_headers = write_headers

    def set_time_format(self, time_format: str) -> None:
        """Set a strftime pattern for date/time values ("" for the default)."""
        self.time_format = time_format

    def set_delimiter(self, delimiter: str | None) -> None:
        """Set the field delimiter. "", "\\x00" and None mean comma."""
        self.delimiter = delimiter

    def set_row_post_processor(self, processor: RowPostProcessor | None) -> None:
        """Install a hook run on every stringified row before it is written.

        The hook returns ``(emit, row)``. When ``emit`` is False the row is
        dropped; otherwise the returned row is written as-is. Pass None to
        remove the hook.
        """
        self.row_post_processor = processor

    # -- Conversion --

    def _column_metadata(self) -> Sequence[ColumnMeta]:
        try:
            return self.source.column_metadata()
        except ConversionError:
            raise
        except Exception as e:
            raise RowSourceError(f"Failed to read column metadata: {e}") from e

    def _scan_rows(self, width: int) -> Iterator[Sequence[Any]]:
        rows = iter(self.source)
        while True:
            try:
                raw = next(rows)
            except StopIteration:
                return
            except ConversionError:
                raise
            except Exception as e:
                raise RowSourceError(f"Row source failed: {e}") from e
            if len(raw) != width:
                msg = f"Row has {len(raw)} values but the result has {width} columns"
                raise RowSourceError(msg)
            yield raw

    def _write_rows(self, sink: CsvSink, columns: Sequence[ColumnMeta]) -> int:
        headers = resolve_headers(self.options, columns)
        if headers is not None:
            sink.write_row(headers)

        time_format = self.options.time_format
        encoding = self.options.encoding
        processor = self.row_post_processor
        skipped = 0

        for raw in self._scan_rows(len(columns)):
            row = [
                stringify(value, col, time_format, encoding)
                for value, col in zip(raw, columns)
            ]
            emit = True
            if processor is not None:
                emit, row = processor(row, columns)
            if not emit:
                skipped += 1
                continue
            sink.write_row(row)

        return skipped

    def write(self, stream: Any) -> None:
        """Write CSV to a text stream.

        Rows written before a failure stay in the stream and are flushed.
        Flushing is best-effort; a flush failure is not raised.
        """
        log = get_logger("sql_csv.converter")
        columns = self._column_metadata()
        delimiter = self.options.delimiter
        sink = CsvSink(stream, delimiter)

        log.debug(
            "csv conversion started",
            columns=len(columns),
            delimiter=delimiter,
            write_headers=self.options.write_headers,
        )
        with sentry_sdk.start_span(op="csv.write", name="csv conversion") as span:
            start_time = time.monotonic()
            try:
                skipped = self._write_rows(sink, columns)
            except Exception:
                span.set_status("internal_error")
                raise
            finally:
                # Best-effort: a flush failure is never reported.
                with contextlib.suppress(OutputError):
                    sink.flush()

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("rows_written", sink.rows_written)
            span.set_data("rows_skipped", skipped)
            log.debug(
                "csv conversion complete",
                rows_written=sink.rows_written,
                rows_skipped=skipped,
                duration_ms=f"{duration_ms:.1f}",
            )

    def write_file(self, path: str | Path) -> None:
        """Write CSV to ``path``, creating or truncating the file.

        The file is always closed. If writing failed, that error is raised
        even when closing fails too.
        """
        path = Path(path)
        try:
            f = open(  # noqa: SIM115
                path,
                "w",
                encoding=self.options.encoding,
                errors="surrogateescape",
                newline="",
            )
        except OSError as e:
            raise OutputError(f"Cannot create output file {path}: {e}") from e

        try:
            self.write(f)
        except BaseException:
            with contextlib.suppress(OSError):
                f.close()
            raise

        try:
            f.close()
        except OSError as e:
            raise OutputError(f"Failed to close output file {path}: {e}") from e

    def write_string(self) -> str:
        """Return the CSV as a string.

        Only suitable for small results. On failure the raised
        ConversionError carries the text produced so far in
        ``partial_output``.
        """
        buffer = io.StringIO()
        try:
            self.write(buffer)
        except ConversionError as e:
            e.partial_output = buffer.getvalue()
            raise
        return buffer.getvalue()

    def to_string_or_empty(self) -> str:
        """Return the CSV as a string, or "" if anything goes wrong.

        Errors are discarded. Use this for display only, never where a
        failed conversion must be noticed.
        """
        try:
            return self.write_string()
        except Exception:
            return ""

    def __str__(self) -> str:
        return self.to_string_or_empty()


def write(stream: Any, source: RowSource) -> None:
    """Write ``source`` as CSV with headers to a text stream."""
    Converter(source).write(stream)


def write_file(path: str | Path, source: RowSource) -> None:
    """Write ``source`` as CSV with headers to a file."""
    Converter(source).write_file(path)


def write_string(source: RowSource) -> str:
    """Return ``source`` as a CSV string with headers."""
    return Converter(source).write_string()
