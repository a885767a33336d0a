"""Naming rules for environment prefixes, environment variables and Go identifiers."""

from __future__ import annotations

import re

VALID_PREFIX_REGEX = r"^[\dA-z_]*$"

_PREFIX_PATTERN = re.compile(r"[\dA-z_]*", re.ASCII)


class InvalidPrefixError(ValueError):
    """Raised when an environment prefix contains disallowed characters."""


def validate_prefix(schema_prefix: str) -> str:
    """Check that a prefix is alphanumeric and `_`-delimited; return it upper-cased."""
    if _PREFIX_PATTERN.fullmatch(schema_prefix) is None:
        raise InvalidPrefixError(
            f"invalid environment prefix '{schema_prefix}'; should match {VALID_PREFIX_REGEX}"
        )
    return schema_prefix.upper()


def build_env_var(prefix: str, name: str) -> str:
    """Join a prefix and a flag name: prefix FOO and name bar-baz give FOO_BAR_BAZ."""
    return f"{prefix}_{name.replace('-', '_').upper()}"


def build_go_name(name: str) -> str:
    """Turn a dash-separated flag name into a Go identifier: bar-baz gives BarBaz."""
    return "".join(_title(part.lower()) for part in name.split("-"))


def _is_separator(ch: str) -> bool:
    if ord(ch) <= 0x7F:
        return not (ch.isascii() and (ch.isalnum() or ch == "_"))
    if ch.isalpha() or ch.isdecimal():
        return False
    return ch.isspace()


def _title_char(ch: str) -> str:
    titled = ch.title()
    return titled if len(titled) == 1 else ch


def _title(word: str) -> str:
    """Capitalise the first letter of every word, words being split by separators."""
    result = []
    previous = " "
    for ch in word:
        result.append(_title_char(ch) if _is_separator(previous) else ch)
        previous = ch
    return "".join(result)