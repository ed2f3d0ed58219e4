"""Typed catalog of a level's entries, with genre filter and search."""
from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from kanji_quiz.models import Entry, MappingRecord
from kanji_quiz.reading import emphasized_text

ALL = "all"
NO_GENRE = "(no genre)"
NO_GENRE_ALIASES = (NO_GENRE, "ジャンルなし")

# Known genre labels as they appear in additional_info
GENRES = (
    "動物",
    "植物・藻類",
    "地名・建造物",
    "人名",
    "スラング",
    "飲食",
    "単位",
    "演目・外題",
    "則天文字",
    "チュノム",
    "元素",
    "嘘字",
    "簡体字",
    "文学の漢字",
    "字義未詳",
    "西夏文字",
)

TAG_OPTIONS = (ALL, NO_GENRE) + GENRES

SEARCH_READING = "reading"
SEARCH_COMPONENT = "component"
SEARCH_MODES = (SEARCH_READING, SEARCH_COMPONENT)

_ABSOLUTE_RE = re.compile(r"^(/|[a-zA-Z][a-zA-Z0-9+.-]*://)")


def image_reference(identifier: str, level_base: str) -> str:
    if _ABSOLUTE_RE.match(identifier):
        return identifier
    return f"{level_base.rstrip('/')}/{identifier}"


def has_known_genre(tags: str) -> bool:
    return any(genre in tags for genre in GENRES)


def _matches_reading(entry: Entry, query: str) -> bool:
    return query in emphasized_text(entry.reading).casefold()


def _matches_component(entry: Entry, query: str) -> bool:
    return any(query in token.casefold() for token in entry.components)


class Catalog:
    def __init__(self, entries: Iterable[Entry], level: int | None = None):
        self.entries: list[Entry] = list(entries)
        self.level = level
        self._by_key = {e.key: e for e in self.entries}

    @classmethod
    def from_records(
        cls,
        records: Iterable[MappingRecord],
        level_base: str,
        level: int | None = None,
    ) -> Catalog:
        entries = [
            Entry(
                key=f"{i}:{r.identifier}",
                id=r.identifier,
                reading=r.reading,
                image_reference=image_reference(r.identifier, level_base),
                meaning=r.meaning,
                tags=r.additional_info,
                components=tuple(r.components.split()),
            )
            for i, r in enumerate(records)
        ]
        return cls(entries, level=level)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def get(self, key: str) -> Entry | None:
        return self._by_key.get(key)

    def filter_by_tag(self, tag: str = ALL) -> list[Entry]:
        """Filter by genre label.

        "all" keeps everything, "(no genre)" keeps entries whose tags name
        none of GENRES; any other value is a case-sensitive substring test.
        """
        if tag == ALL:
            return list(self.entries)
        if tag in NO_GENRE_ALIASES:
            return [e for e in self.entries if not has_known_genre(e.tags)]
        return [e for e in self.entries if tag in e.tags]

    @staticmethod
    def search(entries: Iterable[Entry], mode: str, query: str) -> list[Entry]:
        """Search already-filtered entries by okurigana or by component."""
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode: {mode}")
        q = query.strip().casefold()
        if not q:
            return list(entries)
        match = _matches_reading if mode == SEARCH_READING else _matches_component
        return [e for e in entries if match(e, q)]

    def browse(self, tag: str = ALL, mode: str = SEARCH_READING, query: str = "") -> list[Entry]:
        return self.search(self.filter_by_tag(tag), mode, query)

    def genre_counts(self) -> dict[str, int]:
        """Entry count for every tag option, in TAG_OPTIONS order."""
        return {tag: len(self.filter_by_tag(tag)) for tag in TAG_OPTIONS}
