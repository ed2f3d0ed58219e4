"""Tests for catalog construction, genre filtering and search."""
from __future__ import annotations

import pytest

from kanji_quiz.catalog import (
    ALL,
    GENRES,
    NO_GENRE,
    SEARCH_COMPONENT,
    SEARCH_READING,
    TAG_OPTIONS,
    Catalog,
    has_known_genre,
    image_reference,
)
from kanji_quiz.models import Entry, MappingRecord


def _ids(entries):
    return [e.id for e in entries]


class TestFromRecords:
    def test_scenario_entry(self, sample_catalog):
        e = sample_catalog.entries[0]
        assert e.id == "img1.png"
        assert e.reading == "'てる'、ひかる"
        assert e.tags == "動物"
        assert e.components == ("日", "光")
        assert e.image_reference == "/kanji/level-7/img1.png"

    def test_absolute_path_verbatim(self, sample_catalog):
        assert sample_catalog.entries[3].image_reference == "/shared/004.png"

    def test_relative_subdirectory(self, sample_catalog):
        assert sample_catalog.entries[1].image_reference == "/kanji/level-7/images/002.png"

    def test_level_recorded(self, sample_catalog):
        assert sample_catalog.level == 7
        assert len(sample_catalog) == 5

    def test_keys_unique_for_duplicate_ids(self):
        records = [MappingRecord("same.png", "あ"), MappingRecord("same.png", "い")]
        catalog = Catalog.from_records(records, "/kanji/level-8")
        keys = [e.key for e in catalog]
        assert len(set(keys)) == 2
        assert catalog.get(keys[1]).reading == "い"

    def test_get_missing(self, sample_catalog):
        assert sample_catalog.get("nope") is None


class TestImageReference:
    def test_relative(self):
        assert image_reference("a.png", "/kanji/level-7") == "/kanji/level-7/a.png"

    def test_trailing_slash_base(self):
        assert image_reference("a.png", "/kanji/level-7/") == "/kanji/level-7/a.png"

    def test_url_verbatim(self):
        url = "https://cdn.example.com/a.png"
        assert image_reference(url, "/kanji/level-7") == url


class TestFilterByTag:
    def test_all(self, sample_catalog):
        assert len(sample_catalog.filter_by_tag(ALL)) == 5

    def test_concrete_genre(self, sample_catalog):
        assert _ids(sample_catalog.filter_by_tag("動物")) == ["img1.png", "/shared/004.png"]

    def test_genre_excludes_others(self):
        catalog = Catalog([
            Entry("0:a", "a", "あ", "/a", tags="動物"),
            Entry("1:b", "b", "い", "/b", tags="植物・藻類"),
        ])
        assert _ids(catalog.filter_by_tag("動物")) == ["a"]

    def test_no_genre(self, sample_catalog):
        assert _ids(sample_catalog.filter_by_tag(NO_GENRE)) == ["images/003.png", "images/005.png"]

    def test_no_genre_japanese_label(self, sample_catalog):
        assert sample_catalog.filter_by_tag("ジャンルなし") == sample_catalog.filter_by_tag(NO_GENRE)

    def test_case_sensitive(self):
        catalog = Catalog([Entry("0:a", "a", "あ", "/a", tags="Slang")])
        assert catalog.filter_by_tag("slang") == []

    def test_no_genre_disjoint_from_every_genre(self, sample_catalog):
        unlabeled = {e.key for e in sample_catalog.filter_by_tag(NO_GENRE)}
        for genre in GENRES:
            assert unlabeled.isdisjoint(e.key for e in sample_catalog.filter_by_tag(genre))

    def test_multi_genre_entry_in_each(self, sample_catalog):
        assert "/shared/004.png" in _ids(sample_catalog.filter_by_tag("人名"))
        assert "/shared/004.png" in _ids(sample_catalog.filter_by_tag("動物"))

    def test_has_known_genre(self):
        assert has_known_genre("地名・建造物（旧）")
        assert not has_known_genre("")
        assert not has_known_genre("その他")


class TestSearch:
    def test_reading_matches_okurigana_only(self, sample_catalog):
        assert _ids(sample_catalog.browse(ALL, SEARCH_READING, "く")) == ["images/002.png"]

    def test_reading_concatenates_spans(self, sample_catalog):
        assert _ids(sample_catalog.browse(ALL, SEARCH_READING, "いい")) == ["/shared/004.png"]

    def test_reading_ignores_plain_text(self, sample_catalog):
        assert sample_catalog.browse(ALL, SEARCH_READING, "ひかる") == []

    def test_component(self, sample_catalog):
        assert _ids(sample_catalog.browse(ALL, SEARCH_COMPONENT, "光")) == ["img1.png", "images/002.png"]

    def test_component_casefold(self):
        catalog = Catalog([Entry("0:a", "a", "あ", "/a", components=("Fire", "Water"))])
        assert len(Catalog.search(catalog, SEARCH_COMPONENT, " FIRE ")) == 1
        assert len(Catalog.search(catalog, SEARCH_COMPONENT, "ate")) == 1

    def test_empty_query_passthrough(self, sample_catalog):
        entries = sample_catalog.filter_by_tag("動物")
        assert Catalog.search(entries, SEARCH_COMPONENT, "   ") == entries

    def test_search_applies_after_tag_filter(self, sample_catalog):
        assert _ids(sample_catalog.browse("植物・藻類", SEARCH_COMPONENT, "光")) == ["images/002.png"]

    def test_unknown_mode(self, sample_catalog):
        with pytest.raises(ValueError):
            sample_catalog.browse(ALL, "meaning", "x")


class TestGenreCounts:
    def test_counts(self, sample_catalog):
        counts = sample_catalog.genre_counts()
        assert list(counts) == list(TAG_OPTIONS)
        assert counts[ALL] == 5
        assert counts[NO_GENRE] == 2
        assert counts["動物"] == 2
        assert counts["人名"] == 1
        assert counts["西夏文字"] == 0
