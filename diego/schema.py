"""Flag schemas as read from JSON (with comments and trailing commas allowed)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class SchemaError(ValueError):
    """Raised when a schema file cannot be read or understood."""


@dataclass
class Flag:
    """A single command-line flag.

    The flag is --{name} on the command line and {PREFIX}_{NAME} in the
    environment; type is one of bool, int or string.
    """

    name: str = ""
    type: str = ""
    description: str = ""


@dataclass
class Schema:
    """The top-level configuration object for a set of flags."""

    environment_prefix: str = ""
    flags: list[Flag] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Schema:
        """Build a schema from decoded JSON; keys match case-insensitively."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise SchemaError(f"schema must be an object, not {_kind(data)}")
        prefix = _string_field(data, "environmentPrefix", "")
        raw_flags = _lookup(data, "flags")
        if raw_flags is None:
            return cls(environment_prefix=prefix)
        if not isinstance(raw_flags, list):
            raise SchemaError(f"field 'flags' must be an array, not {_kind(raw_flags)}")
        return cls(environment_prefix=prefix, flags=[_flag_from(item) for item in raw_flags])


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return "null"


def _lookup(data: dict, key: str) -> Any:
    """Return the last value whose key equals `key` ignoring case."""
    folded = key.casefold()
    found = None
    for candidate, value in data.items():
        if candidate.casefold() == folded:
            found = value
    return found


def _string_field(data: dict, key: str, default: str) -> str:
    value = _lookup(data, key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise SchemaError(f"field '{key}' must be a string, not {_kind(value)}")
    return value


def _flag_from(item: Any) -> Flag:
    if item is None:
        return Flag()
    if not isinstance(item, dict):
        raise SchemaError(f"flag must be an object, not {_kind(item)}")
    return Flag(
        name=_string_field(item, "name", ""),
        type=_string_field(item, "type", ""),
        description=_string_field(item, "description", ""),
    )


def standardize_jsonc(text: str) -> str:
    """Turn JSON with comments and trailing commas into standard JSON.

    Comments become whitespace so offsets are kept; trailing commas before a
    closing brace or bracket become a space.
    """
    out: list[str] = []
    pending_comma: int | None = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            j = i + 1
            while j < n and text[j] != '"':
                j += 2 if text[j] == "\\" else 1
            if j >= n:
                raise SchemaError("unterminated string literal")
            out.append(text[i : j + 1])
            pending_comma = None
            i = j + 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            if end == -1:
                end = n
            out.append(" " * (end - i))
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise SchemaError("unterminated block comment")
            comment = text[i : end + 2]
            out.append("".join(c if c in "\r\n" else " " for c in comment))
            i = end + 2
        elif ch in " \t\r\n":
            out.append(ch)
            i += 1
        else:
            if ch in "}]" and pending_comma is not None:
                out[pending_comma] = " "
            pending_comma = len(out) if ch == "," else None
            out.append(ch)
            i += 1
    return "".join(out)


def load_schema(path: str | Path) -> Schema:
    """Read a JSON-with-comments schema file."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SchemaError(f"error reading source file: {exc}") from exc
    try:
        standardized = standardize_jsonc(raw)
    except SchemaError as exc:
        raise SchemaError(f"error standardizing source JSON: {exc}") from exc
    try:
        return Schema.from_dict(json.loads(standardized))
    except (json.JSONDecodeError, SchemaError) as exc:
        raise SchemaError(f"error unmarshaling source JSON: {exc}") from exc