"""Render Go argument-parsing code for a flag schema."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from diego.names import build_env_var, build_go_name


class UnsupportedTypeError(ValueError):
    """Raised for a flag type other than string, int or bool."""


_FLAG_VARS = {"string": "StringVar", "int": "IntVar", "bool": "BoolVar"}


@dataclass
class TemplateFlag:
    """One flag, ready for rendering."""

    name: str
    description: str = ""
    go_type: str = ""
    prefix: str = ""

    def go_name(self) -> str:
        return build_go_name(self.name)

    def env_var(self) -> str:
        return build_env_var(self.prefix, self.name)

    def env_lookup(self, err_name: str) -> str:
        """The Go statement that folds this flag's environment variable."""
        target = f'&base.{self.go_name()}, "{self.env_var()}"'
        if self.go_type == "string":
            return f"lookupString({target})"
        if self.go_type == "int":
            return f"{err_name} = errors.Join({err_name}, lookupInt({target}))"
        if self.go_type == "bool":
            return f"{err_name} = errors.Join({err_name}, lookupBool({target}))"
        raise UnsupportedTypeError(f"Unsupported go type '{self.go_type}'")

    def flag_var(self) -> str:
        """The flag.FlagSet method that registers this flag."""
        try:
            return _FLAG_VARS[self.go_type]
        except KeyError:
            raise UnsupportedTypeError(f"Unsupported go type '{self.go_type}'") from None


@dataclass
class TemplateSchema:
    """Everything needed to render a parser for one struct."""

    package: str
    struct_name: str
    source: str = ""
    flags: list[TemplateFlag] = field(default_factory=list)
    prefix: str = ""


def _go_quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


_IMPORTS = """import (
\t"errors"
\t"flag"
\t"fmt"
\t"os"
\t"strconv"
\t"strings"
)
"""

_ENV_HELPERS = """
// lookupString in environment; write to target if it's set.
func lookupString(target *string, name string) {
\tread, ok := os.LookupEnv(name)
\tif ok {
\t\t*target = read
\t}
}

// lookupInt in environment; write to target if it's set and parseable as a
// decimal int.
func lookupInt(target *int, name string) error {
\traw, ok := os.LookupEnv(name)
\tif !ok {
\t\treturn nil
\t}
\tparsed, err := strconv.Atoi(raw)
\tif err != nil {
\t\treturn fmt.Errorf("error parsing int environment variable '%s': %w", name, err)
\t}
\t*target = parsed
\treturn nil
}

// lookupBool in environment; write to target if it's set.
func lookupBool(target *bool, name string) error {
\traw, ok := os.LookupEnv(name)
\tif !ok {
\t\treturn nil
\t}
\ttruthiness := raw != "" && strings.ToLower(raw) != "false"
\t*target = truthiness
\treturn nil
}
"""


def _parse_method(struct: str) -> str:
    return (
        f"// Parse initializes the {struct} from command-line and environment\n"
        "// variables. Typically args should be os.Args[1:]; do not include the\n"
        "// executable name.\n"
        f"func (base *{struct}) Parse(args []string) error {{\n"
        "\treturn errors.Join(\n"
        "\t\tbase.foldEnv(),\n"
        "\t\tbase.foldArgs(args),\n"
        "\t)\n"
        "}\n"
    )


def _fold_env(schema: TemplateSchema) -> str:
    lines = [f"func (base *{schema.struct_name}) foldEnv() error {{", "\tvar err error"]
    lines.extend(f"\t{flag.env_lookup('err')}" for flag in schema.flags)
    lines.extend(["\treturn err", "}"])
    return "\n".join(lines) + "\n"


def _fold_args(schema: TemplateSchema) -> str:
    lines = [
        f"func (base *{schema.struct_name}) foldArgs(args []string) error {{",
        f"\tfs := flag.NewFlagSet({_go_quote(schema.prefix)}, flag.ExitOnError)",
    ]
    for flag in schema.flags:
        go_name = flag.go_name()
        usage = _go_quote(f"{flag.description} [{flag.env_var()}]")
        lines.append(
            f"\tfs.{flag.flag_var()}(&base.{go_name}, {_go_quote(flag.name)}, "
            f"base.{go_name}, {usage})"
        )
    lines.extend(
        [
            "\tif err := fs.Parse(args); err != nil {",
            '\t\treturn fmt.Errorf("failed to parse command line args: %w", err)',
            "\t}",
            "\treturn nil",
            "}",
        ]
    )
    return "\n".join(lines) + "\n"


def _struct_definition(schema: TemplateSchema) -> str:
    lines = [
        f"// {schema.struct_name} generated from {schema.source}.",
        f"type {schema.struct_name} struct {{",
    ]
    for flag in schema.flags:
        lines.append(f"\t// --{flag.name}: {flag.description}")
        lines.append(f'\t{flag.go_name()} {flag.go_type} `json:"{flag.name},omitempty"`')
    lines.append("}")
    return "\n".join(lines) + "\n"


def render(schema: TemplateSchema, include_struct: bool = False) -> str:
    """Render formatted Go source parsing the schema's flags.

    With include_struct the struct type itself is also defined, as needed
    when the schema came from JSON rather than from an existing struct.
    """
    parts = [
        "// Code generated by diego; DO NOT EDIT.\n",
        f"package {schema.package}\n",
        _IMPORTS,
        _parse_method(schema.struct_name),
        _fold_env(schema),
        _fold_args(schema) + _ENV_HELPERS,
    ]
    if include_struct:
        parts.append(_struct_definition(schema))
    return "\n".join(parts)