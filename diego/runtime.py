"""Parse flags and environment variables for a schema at run time."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from diego.env import EnvParseError
from diego.template import TemplateSchema

_DECIMAL = re.compile(r"[+-]?[0-9]+")
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}
_ZERO: dict[str, Any] = {"string": "", "int": 0, "bool": False}


class ArgsParseError(ValueError):
    """Raised when environment or command-line values cannot be parsed.

    `values` holds whatever was parsed before and despite the errors.
    """

    def __init__(self, message: str, values: dict[str, Any]):
        super().__init__(message)
        self.values = values


def _env_value(go_type: str, name: str, current: Any, environ: Mapping[str, str]) -> Any:
    raw = environ.get(name)
    if raw is None:
        return current
    if go_type == "string":
        return raw
    if go_type == "bool":
        return raw != "" and raw.lower() != "false"
    if _DECIMAL.fullmatch(raw) is None:
        raise EnvParseError(
            f"error parsing int environment variable '{name}': "
            f'parsing "{raw}": invalid syntax'
        )
    return int(raw)


def _parse_go_int(text: str) -> int:
    body = text.lstrip("+-")
    sign = -1 if text.startswith("-") else 1
    if text[: len(text) - len(body)] not in ("", "+", "-") or not body:
        raise ValueError(text)
    lowered = body.lower()
    if lowered.startswith(("0x", "0o", "0b")):
        value = int(body, 0)
    elif len(body) > 1 and body.startswith("0"):
        value = int(body[1:].replace("_", ""), 8)
    else:
        if "_" in body:
            raise ValueError(text)
        value = int(body, 10)
    return sign * value


def _convert(go_type: str, text: str) -> Any:
    if go_type == "string":
        return text
    if go_type == "bool":
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ValueError(text)
    return _parse_go_int(text)


def _usage(schema: TemplateSchema) -> str:
    lines = [f"Usage of {schema.prefix}:"]
    for flag in schema.flags:
        lines.append(f"  -{flag.name}")
        lines.append(f"    \t{flag.description} [{flag.env_var()}]")
    return "\n".join(lines)


def _fold_args(schema: TemplateSchema, args: Sequence[str], values: dict[str, Any]) -> None:
    types = {flag.name: flag.go_type for flag in schema.flags}
    remaining = list(args)
    while remaining:
        arg = remaining[0]
        if len(arg) < 2 or not arg.startswith("-"):
            return
        dashes = 2 if arg.startswith("--") else 1
        if dashes == 2 and len(arg) == 2:
            return
        remaining.pop(0)
        body = arg[dashes:]
        if not body or body.startswith("-") or body.startswith("="):
            raise ValueError(f"bad flag syntax: {arg}")
        name, has_value, value = body.partition("=")
        if name not in types:
            if name in ("h", "help"):
                print(_usage(schema), file=sys.stderr)
                raise SystemExit(0)
            raise ValueError(f"flag provided but not defined: -{name}")
        go_type = types[name]
        if not has_value:
            if go_type == "bool":
                values[name] = True
                continue
            if not remaining:
                raise ValueError(f"flag needs an argument: -{name}")
            value = remaining.pop(0)
        try:
            values[name] = _convert(go_type, value)
        except ValueError:
            raise ValueError(
                f'invalid value "{value}" for flag -{name}: parse error'
            ) from None


def parse_vars(
    schema: TemplateSchema,
    args: Sequence[str] = (),
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Parse values for the schema's flags, keyed by flag name.

    Environment variables are read first; command-line flags override them.
    """
    env = os.environ if environ is None else environ
    for flag in schema.flags:
        flag.flag_var()
    values: dict[str, Any] = {flag.name: _ZERO[flag.go_type] for flag in schema.flags}
    errors: list[str] = []
    for flag in schema.flags:
        try:
            values[flag.name] = _env_value(flag.go_type, flag.env_var(), values[flag.name], env)
        except EnvParseError as exc:
            errors.append(str(exc))
    try:
        _fold_args(schema, args, values)
    except ValueError as exc:
        errors.append(f"failed to parse command line args: {exc}")
    if errors:
        raise ArgsParseError("\n".join(errors), values)
    return values