"""The diego command: generate Go argument parsers from JSON or a Go struct."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from diego.go_source import from_go_source
from diego.names import build_go_name, validate_prefix
from diego.runtime import ArgsParseError, parse_vars
from diego.schema import Schema, SchemaError, load_schema
from diego.template import TemplateFlag, TemplateSchema, render


@dataclass
class JSONSource:
    """Flags described by a JSON schema file."""

    filename: str
    schema: Schema
    include_struct = True

    def destination_filename(self) -> str:
        """args.json gives args.json.go."""
        return self.filename + ".go"

    def prepare_schema(self) -> TemplateSchema:
        prefix = validate_prefix(self.schema.environment_prefix)
        return TemplateSchema(
            package="main",
            struct_name=build_go_name(self.schema.environment_prefix) + "Vars",
            source=self.filename,
            flags=[
                TemplateFlag(f.name, f.description, f.type, prefix) for f in self.schema.flags
            ],
            prefix=prefix,
        )


@dataclass
class StructSource:
    """Flags described by a struct in the Go file being generated for."""

    go_file: str
    go_package: str
    struct_type: str
    include_struct = False

    def destination_filename(self) -> str:
        """main.go gives main_args.go."""
        return self.go_file.removesuffix(".go") + "_args.go"

    def prepare_schema(self) -> TemplateSchema:
        try:
            return from_go_source(self.go_file, self.struct_type)
        except (OSError, ValueError, LookupError) as exc:
            raise ValueError(f"error parsing gofile: {exc}") from exc


def load_json_source(filename: str) -> JSONSource:
    """Read a JSON schema file into a source."""
    return JSONSource(filename=filename, schema=load_schema(filename))


def load_struct_source(struct_type: str, environ: Mapping[str, str] | None = None) -> StructSource:
    """Build a struct source from GOFILE and GOPACKAGE, as set by go generate."""
    env = os.environ if environ is None else environ
    go_file = env.get("GOFILE", "")
    if not go_file:
        raise ValueError("GOFILE env var must be set in --struct-type mode")
    go_package = env.get("GOPACKAGE", "")
    if not go_package:
        raise ValueError("GOPACKAGE env var must be set in --struct-type mode")
    return StructSource(go_file=go_file, go_package=go_package, struct_type=struct_type)


def generate(dest_filename: str, prepared: TemplateSchema, include_struct: bool = False) -> None:
    """Render the parser and write it to dest_filename."""
    code = render(prepared, include_struct)
    try:
        Path(dest_filename).write_text(code, encoding="utf-8")
    except OSError as exc:
        raise OSError(f"error writing generated code to {dest_filename}: {exc}") from exc


def _own_schema() -> TemplateSchema:
    flags = [
        TemplateFlag(
            "json-file", "relative path of the JSON file specifying command line args",
            "string", "DIEGO",
        ),
        TemplateFlag(
            "struct-type", "name of the struct specifying command line args",
            "string", "DIEGO",
        ),
    ]
    return TemplateSchema("main", "DiegoVars", "", flags, "DIEGO")


def _fatal(message: str) -> SystemExit:
    print(message, file=sys.stderr)
    return SystemExit(1)


def main(argv: list[str] | None = None) -> int:
    """Run the command; exits with status 1 on any error."""
    args = sys.argv[1:] if argv is None else argv
    try:
        values = parse_vars(_own_schema(), args)
    except ArgsParseError as exc:
        raise _fatal(f"Error parsing args: {exc}") from exc
    json_file, struct_type = values["json-file"], values["struct-type"]
    if json_file and struct_type:
        raise _fatal("--json-file and --struct-type are mutually exclusive options")
    if not json_file and not struct_type:
        raise _fatal("Specify either --json-file or --struct-type")

    try:
        source = load_struct_source(struct_type) if struct_type else load_json_source(json_file)
    except (ValueError, SchemaError) as exc:
        raise _fatal(f"Error loading schema source: {exc}") from exc
    try:
        prepared = source.prepare_schema()
    except ValueError as exc:
        raise _fatal(f"Error transforming schema for template: {exc}") from exc
    try:
        generate(source.destination_filename(), prepared, source.include_struct)
    except (OSError, ValueError) as exc:
        raise _fatal(f"Error rendering template: {exc}") from exc
    return 0


if __name__ == "__main__":
    sys.exit(main())