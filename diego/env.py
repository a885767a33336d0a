"""Environment lookups with the semantics the generated parsers use."""

from __future__ import annotations

import os
import re

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class EnvParseError(ValueError):
    """Raised when an environment variable cannot be parsed as its type."""


def lookup_string(name: str, default: str) -> str:
    """Return the variable if it is set (even to ""), else the default."""
    return os.environ.get(name, default)


def _parse_int(raw: str) -> int:
    if _INT_PATTERN.fullmatch(raw) is None:
        raise ValueError(f'parsing "{raw}": invalid syntax')
    value = int(raw)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f'parsing "{raw}": value out of range')
    return value


def lookup_int(name: str, default: int) -> int:
    """Return the variable as a decimal int if it is set, else the default."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return _parse_int(raw)
    except ValueError as exc:
        raise EnvParseError(
            f"error parsing int environment variable '{name}': {exc}"
        ) from exc


def lookup_bool(name: str, default: bool) -> bool:
    """Return whether the variable is truthy if it is set, else the default.

    Any value other than "" or a case-insensitive "false" counts as true.
    """
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw != "" and raw.lower() != "false"