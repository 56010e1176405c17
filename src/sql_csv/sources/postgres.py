"""psycopg v3 cursor adapter.

Resolves PostgreSQL type OIDs to type names through the cursor's type
registry so that identifier columns can be recognised.
"""

from __future__ import annotations

from typing import Any

import psycopg

from sql_csv.sources.cursor import CursorRowSource

# Mapping from PostgreSQL type OIDs to names, used when the cursor's
# adapters registry does not know the OID.
_TYPE_NAMES: dict[int, str] = {
    16: "bool",
    17: "bytea",
    20: "int8",
    21: "int2",
    23: "int4",
    25: "text",
    26: "oid",
    114: "json",
    142: "xml",
    700: "float4",
    701: "float8",
    790: "money",
    1042: "bpchar",
    1043: "varchar",
    1082: "date",
    1083: "time",
    1114: "timestamp",
    1184: "timestamptz",
    1186: "interval",
    1700: "numeric",
    2950: "uuid",
    3802: "jsonb",
}


class PgCursorRowSource(CursorRowSource):
    """Row source over an executed psycopg cursor."""

    def __init__(self, cursor: psycopg.Cursor[Any]) -> None:
        super().__init__(cursor, type_names=_TYPE_NAMES, driver_error=psycopg.Error)

    def type_name(self, type_code: Any) -> str:
        adapters = getattr(self.cursor, "adapters", None)
        if adapters is not None:
            info = adapters.types.get(type_code)
            if info is not None:
                return info.name
        return self.type_names.get(type_code, "unknown")
