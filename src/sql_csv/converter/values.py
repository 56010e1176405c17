"""Value stringification: raw typed cells to canonical CSV text."""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from sql_csv.core.exceptions import IdentifierDecodeError

if TYPE_CHECKING:
    from sql_csv.core.models import ColumnMeta

# Declared type names (upper-cased) whose binary values are 16-byte UUIDs.
IDENTIFIER_TYPE_NAMES = frozenset({"UNIQUEIDENTIFIER", "UUID"})


class CellKind(Enum):
    BYTES = "bytes"
    NUMBER = "number"
    TEXT = "text"
    TIME = "time"
    NULL = "null"
    OTHER = "other"


def classify(value: Any) -> CellKind:
    """Return the kind of a raw cell value as scanned from a row source."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return CellKind.BYTES
    if value is None:
        return CellKind.NULL
    # datetime.datetime is a subclass of datetime.date
    if isinstance(value, (datetime.date, datetime.time)):
        return CellKind.TIME
    if isinstance(value, (bool, int, float, Decimal)):
        return CellKind.NUMBER
    if isinstance(value, str):
        return CellKind.TEXT
    return CellKind.OTHER


def is_identifier_column(column: ColumnMeta) -> bool:
    return column.type_name.upper() in IDENTIFIER_TYPE_NAMES


def decode_identifier(raw: bytes, column: ColumnMeta) -> str:
    """Render 16 raw bytes as a hyphenated hex UUID string."""
    try:
        return str(uuid.UUID(bytes=raw))
    except ValueError as e:
        msg = (
            f"Cannot decode {len(raw)}-byte value in column '{column.name}' "
            f"({column.type_name}) as a unique identifier: {e}"
        )
        raise IdentifierDecodeError(msg) from e


def stringify(
    value: Any,
    column: ColumnMeta,
    time_format: str = "",
    encoding: str = "utf-8",
) -> str:
    """Convert one raw cell to its CSV text form.

    Rules, first match wins:

    1. Binary values in identifier columns become UUID text; other binary
       values are decoded as text, with undecodable bytes kept as
       surrogate escapes so they are written back out unchanged.
    2. Date/time values use ``time_format`` (strftime) when one is set.
    3. NULL becomes the empty string.
    4. Everything else uses ``str()``.

    The binary check comes before the NULL check so that driver-specific
    encodings such as empty byte strings never reach the generic path.
    """
    kind = classify(value)

    if kind is CellKind.BYTES:
        raw = bytes(value)
        if is_identifier_column(column):
            return decode_identifier(raw, column)
        return raw.decode(encoding, errors="surrogateescape")

    if kind is CellKind.TIME and time_format:
        return value.strftime(time_format)

    if kind is CellKind.NULL:
        return ""

    return str(value)
