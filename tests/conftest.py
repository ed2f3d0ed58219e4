"""Shared test fixtures."""
from __future__ import annotations

import pytest

from kanji_quiz.catalog import Catalog
from kanji_quiz.config import Settings
from kanji_quiz.models import Entry
from kanji_quiz.parsers.mappings_parser import parse_mappings_text


class FixedRandom:
    """Deterministic rng: shuffle keeps order, randrange returns a fixed slot."""

    def __init__(self, slot: int = 0):
        self.slot = slot
        self.shuffle_calls = 0

    def shuffle(self, x: list) -> None:
        self.shuffle_calls += 1

    def randrange(self, stop: int) -> int:
        return self.slot % stop


@pytest.fixture
def fixed_rng():
    return FixedRandom(slot=2)


@pytest.fixture
def mappings_csv_content():
    """Minimal level mappings.csv covering quoting, genres and short rows."""
    return """\
path,reading,meaning,additional_info,components
img1.png,'てる'、ひかる,,動物,日 光
images/002.png,かがや'く',"shine, glitter",植物・藻類,光 軍
images/003.png,"ほのお",flame,,火 火
/shared/004.png,あやう'い'、あぶな'い',,人名・動物,危
images/005.png,しずく
"""


@pytest.fixture
def sample_catalog(mappings_csv_content):
    records = parse_mappings_text(mappings_csv_content)
    return Catalog.from_records(records, "/kanji/level-7", level=7)


@pytest.fixture
def sample_entry():
    return Entry(
        key="0:img1.png",
        id="img1.png",
        reading="'てる'、ひかる",
        image_reference="/kanji/level-7/img1.png",
        tags="動物",
        components=("日", "光"),
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_origin="http://data.test",
        data_dir=str(tmp_path / "data"),
    )
