"""Converter configuration for SQL CSV.

Precedence order (highest to lowest):
1. Explicit overrides (keyword arguments / converter setters)
2. Environment variables (SQL_CSV_DELIMITER, SQL_CSV_TIME_FORMAT, ...)
3. Built-in defaults
"""

from __future__ import annotations

import codecs
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from sql_csv.core.exceptions import ConfigError

DEFAULT_DELIMITER = ","

# NUL is the "unset" delimiter; it resolves to the default.
_UNSET_DELIMITERS = frozenset({"", "\x00"})
_FORBIDDEN_DELIMITERS = frozenset({'"', "\r", "\n"})

_ENV_VARS: dict[str, str] = {
    "SQL_CSV_DELIMITER": "delimiter",
    "SQL_CSV_TIME_FORMAT": "time_format",
    "SQL_CSV_NO_HEADER": "write_headers",
    "SQL_CSV_ENCODING": "encoding",
}

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ConverterOptions(BaseModel):
    """Settings read by a Converter during a single write."""

    model_config = ConfigDict(validate_assignment=True)

    headers: list[str] = []
    write_headers: bool = True
    time_format: str = ""
    delimiter: str = DEFAULT_DELIMITER
    encoding: str = "utf-8"

    @field_validator("delimiter", mode="before")
    @classmethod
    def validate_delimiter(cls, v: Any) -> Any:
        if v is None or v in _UNSET_DELIMITERS:
            return DEFAULT_DELIMITER
        if not isinstance(v, str) or len(v) != 1:
            msg = f"Invalid delimiter: {v!r}. Must be a single character"
            raise ValueError(msg)
        if v in _FORBIDDEN_DELIMITERS:
            msg = f"Invalid delimiter: {v!r}. Quote and line break characters are reserved"
            raise ValueError(msg)
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError:
            msg = f"Unknown encoding: {v!r}"
            raise ValueError(msg) from None
        return v


def build_options(**fields: Any) -> ConverterOptions:
    """Validate fields into ConverterOptions, raising ConfigError on failure."""
    try:
        return ConverterOptions(**fields)
    except ValidationError as e:
        raise ConfigError(f"Invalid converter options: {e}") from e


def _parse_no_header(env_var: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return False
    if lowered in _FALSY:
        return True
    msg = f"Invalid {env_var} value: '{value}'. Must be a boolean"
    raise ConfigError(msg)


def resolve_options(**overrides: Any) -> ConverterOptions:
    """Resolve converter options using the precedence chain.

    Overrides whose value is None are ignored so callers can pass
    optional settings straight through.
    """
    resolved: dict[str, Any] = {}

    for env_var, field_name in _ENV_VARS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        if field_name == "write_headers":
            resolved[field_name] = _parse_no_header(env_var, value)
        else:
            resolved[field_name] = value

    for key, value in overrides.items():
        if key not in ConverterOptions.model_fields:
            raise ConfigError(f"Unknown converter option: '{key}'")
        if value is not None:
            resolved[key] = value

    return build_options(**resolved)
