"""Exception hierarchy for SQL CSV.

Every error raised by a terminal write derives from ConversionError so
callers can catch a single type. Driver and I/O errors are chained.
"""


class SqlCsvError(Exception):
    """Base exception for all SQL CSV errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(SqlCsvError):
    """Invalid converter option or environment value."""


class ConversionError(SqlCsvError):
    """Conversion aborted.

    ``partial_output`` holds the text written before the failure when the
    conversion targeted an in-memory string.
    """

    partial_output: str | None = None


class RowSourceError(ConversionError):
    """Column metadata, row scan or iteration failure in the row source."""


class IdentifierDecodeError(ConversionError):
    """Malformed binary unique-identifier value."""


class OutputError(ConversionError):
    """Header or row emission, file creation, flush or close failure."""
