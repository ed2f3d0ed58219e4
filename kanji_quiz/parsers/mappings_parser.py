"""Parse a level's mappings.csv into MappingRecord objects.

Expected header (case-insensitive, any order):
  path|filename, reading, meaning, additional_info, components

Fields may be wrapped in double quotes to embed commas. Quotes are dropped
and cannot be escaped, so a literal quote cannot appear inside a field.
Rows shorter than the header are padded with empty values.
"""
from __future__ import annotations

import re
from pathlib import Path

from kanji_quiz.models import MappingRecord

IDENTIFIER_FIELDS = ("path", "filename")


def parse_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)

    fields.append("".join(current))
    return fields


def header_index(line: str) -> dict[str, int]:
    """Map lower-cased, trimmed header names to their column index."""
    index: dict[str, int] = {}
    for i, name in enumerate(parse_line(line)):
        # First occurrence wins for duplicated header names
        index.setdefault(name.strip().lower(), i)
    return index


def identifier_field(index: dict[str, int]) -> str:
    for name in IDENTIFIER_FIELDS:
        if name in index:
            return name
    first = min(index.items(), key=lambda kv: kv[1], default=("", 0))
    return first[0]


def parse_mappings_text(text: str) -> list[MappingRecord]:
    lines = [line for line in re.split(r"\r?\n", text) if line]
    if not lines:
        return []

    index = header_index(lines[0])
    id_field = identifier_field(index)
    records: list[MappingRecord] = []

    for line in lines[1:]:
        cols = [c.strip() for c in parse_line(line)]

        def value(name: str) -> str:
            i = index.get(name)
            if i is None or i >= len(cols):
                return ""
            return cols[i]

        records.append(MappingRecord(
            identifier=value(id_field),
            reading=value("reading"),
            meaning=value("meaning"),
            additional_info=value("additional_info"),
            components=value("components"),
        ))

    return records


def parse_mappings_file(path: Path) -> list[MappingRecord]:
    return parse_mappings_text(path.read_text(encoding="utf-8-sig"))
