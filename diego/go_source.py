"""Build a template schema from a struct declared in a Go source file."""

from __future__ import annotations

import json
import re
from pathlib import Path

from diego.names import InvalidPrefixError, validate_prefix
from diego.template import TemplateFlag, TemplateSchema

_PACKAGE = re.compile(r"^\s*package\s+(\w+)", re.MULTILINE)
_TAG_PAIR = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')
_NAMED_FIELD = re.compile(r"^(\w+(?:\s*,\s*\w+)*)\s+(.+)$")


class StructNotFoundError(LookupError):
    """Raised when the named struct type is not declared in the file."""


def _header_pattern(struct_name: str) -> re.Pattern[str]:
    return re.compile(
        rf"^[ \t]*(?:type\s+)?{re.escape(struct_name)}\s+struct\s*\{{", re.MULTILINE
    )


def _closing_brace(text: str, start: int) -> int:
    """Index of the brace closing the one that opens just before `start`."""
    depth = 1
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "\"'":
            i += 1
            while i < n and text[i] != ch:
                i += 2 if text[i] == "\\" else 1
        elif ch == "`":
            i = text.find("`", i + 1)
            if i == -1:
                break
        elif text.startswith("//", i):
            i = text.find("\n", i)
            if i == -1:
                break
        elif text.startswith("/*", i):
            i = text.find("*/", i + 2)
            if i == -1:
                break
            i += 1
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    raise ValueError("failed to parse source file: unterminated struct declaration")


def _comment_text(lines: list[str]) -> str:
    cleaned = []
    for line in lines:
        body = line[2:]
        if body.startswith(" "):
            body = body[1:]
        cleaned.append(body.rstrip())
    while cleaned and not cleaned[0]:
        cleaned.pop(0)
    while cleaned and not cleaned[-1]:
        cleaned.pop()
    return "\n".join(cleaned) + "\n" if cleaned else ""


def _tag_get(tag: str, key: str) -> str:
    for match in _TAG_PAIR.finditer(tag):
        if match.group(1) == key:
            return json.loads(f'"{match.group(2)}"')
    return ""


def _split_field(line: str) -> tuple[str, str | None]:
    """Split a field line into its declaration and its raw tag (without quotes)."""
    if line.endswith("`"):
        start = line.rfind("`", 0, len(line) - 1)
        if start != -1:
            return line[:start].strip(), line[start + 1 : -1]
    match = re.search(r'"((?:[^"\\]|\\.)*)"$', line)
    if match:
        return line[: match.start()].strip(), json.loads(match.group(0))
    comment = line.find("//")
    if comment != -1:
        line = line[:comment]
    return line.strip(), None


def _parse_fields(body: str) -> list[TemplateFlag]:
    flags: list[TemplateFlag] = []
    doc: list[str] = []
    for raw in body.split("\n"):
        line = raw.strip()
        if not line:
            doc = []
            continue
        if line.startswith("//"):
            doc.append(line)
            continue
        declaration, tag = _split_field(line)
        named = _NAMED_FIELD.match(declaration)
        go_type = named.group(2).strip() if named else declaration
        name = _tag_get(tag, "json").split(",")[0] if tag is not None else ""
        flags.append(
            TemplateFlag(
                name=name,
                description=parse_description(_comment_text(doc)),
                go_type=go_type,
            )
        )
        doc = []
    return flags


def from_go_source(go_filename: str, struct_name: str) -> TemplateSchema:
    """Read the flags of struct `struct_name` declared in a Go file.

    Each field's json tag names the flag; its doc comment, of the form
    `// --name: description`, gives the description.
    """
    text = Path(go_filename).read_text(encoding="utf-8")
    package = _PACKAGE.search(text)
    if package is None:
        raise ValueError("failed to parse source file: missing package clause")
    header = _header_pattern(struct_name).search(text)
    if header is None:
        raise StructNotFoundError(f"struct '{struct_name}' not found in {go_filename}")
    end = _closing_brace(text, header.end())
    flags = _parse_fields(text[header.end() : end])

    try:
        prefix = validate_prefix(struct_name.removesuffix("Vars"))
    except InvalidPrefixError as exc:
        print(f"Error validating prefix: {exc}")
        prefix = ""
    for flag in flags:
        flag.prefix = prefix
    return TemplateSchema(
        package=package.group(1),
        struct_name=struct_name,
        source=go_filename,
        flags=flags,
        prefix=prefix,
    )


def parse_description(doc: str) -> str:
    """Return the text after the first colon of a comment, or "" if there is none."""
    _, found, after = doc.strip().partition(":")
    return after.strip() if found else ""