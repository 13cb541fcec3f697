from __future__ import annotations

import sys
from pathlib import Path
from typing import List

import pytest

# Ensure the package is importable when running tests from the repo root.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from duafinder.catalog.store import CatalogStore  # noqa: E402  (import after sys.path mutation)
from duafinder.records import Record  # noqa: E402


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def corpus() -> List[Record]:
    return [
        Record(
            id="1",
            chapter_title_en="When travelling",
            category="Travel",
            english="Glory is to Him who has subjected this to us",
            keywords_en="travel dua, journey dua, safar dua",
            keywords_roman="safar ki dua",
            tags="travel, journey",
        ),
        Record(
            id="2",
            chapter_title_en="Before sleeping",
            category="Sleep",
            english="In Your name O Allah, I die and I live",
            keywords_en="sleep dua, before sleep",
            keywords_roman="sone ki dua, neend ki dua",
            tags="sleep, night",
        ),
        Record(
            id="3",
            chapter_title_en="Morning remembrance",
            category="Morning",
            english="We have reached the morning and the dominion belongs to Allah",
            keywords_en="morning dua, morning adhkar",
            keywords_roman="subah ki dua",
            tags="morning, adhkar",
        ),
        Record(
            id="4",
            chapter_title_en="Evening remembrance",
            category="Evening",
            english="We have reached the evening and the dominion belongs to Allah",
            keywords_en="evening dua, evening adhkar",
            keywords_roman="shaam ki dua",
            tags="evening, adhkar",
        ),
        Record(
            id="5",
            chapter_title_en="Seeking provision",
            category="General",
            english="O Allah, suffice me with what You have allowed",
            keywords_en="rizq dua, dua for wealth",
            keywords_roman="rizq ki dua, rozi ki dua",
            tags="rizq, provision",
        ),
    ]


@pytest.fixture
def catalog(tmp_path: Path) -> CatalogStore:
    return CatalogStore(tmp_path / "duas.duckdb")
