"""Weighted field scoring for the primary search stage."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List

from ..patterns import normalize_text, tokenize_words
from ..records import Record
from ..synonyms import QueryTokens

logger = logging.getLogger(__name__)

# Whole-query containment bonuses.
BLOB_CONTAINS = 36.0
KEYWORDS_CONTAINS = 28.0
TITLE_CONTAINS = 20.0
RAW_CONTAINS = 16.0

# Per expanded-token hits.
KEYWORD_TOKEN = 11.0
TITLE_TOKEN = 9.0
TEXT_TOKEN = 7.0
BLOB_TOKEN = 4.0
RAW_TOKEN = 3.0

COVERAGE_WEIGHT = 18.0


@dataclass
class ScoredMatch:
    record: Record
    score: float
    exact: bool = False
    overlap: float = 0.0

    @property
    def record_id(self) -> str:
        return self.record.id


def _token_set(text: str) -> FrozenSet[str]:
    return frozenset(tokenize_words(text))


def _join(*parts: str) -> str:
    return " ".join(parts)


@dataclass(frozen=True)
class FieldView:
    """Normalised fields and token sets of a single record."""

    chapter: str
    category: str
    arabic: str
    english: str
    keywords: str
    blob: str
    raw: str
    chapter_tokens: FrozenSet[str]
    category_tokens: FrozenSet[str]
    text_tokens: FrozenSet[str]
    keyword_tokens: FrozenSet[str]
    blob_tokens: FrozenSet[str]
    raw_tokens: FrozenSet[str]

    @classmethod
    def build(cls, record: Record) -> "FieldView":
        chapter = normalize_text(record.chapter_title_en)
        category = normalize_text(record.category)
        arabic = normalize_text(record.arabic)
        english = normalize_text(record.english)
        raw = normalize_text(record.raw_text)
        keywords = normalize_text(
            _join(
                record.keywords_en,
                record.keywords_ur,
                record.keywords_roman,
                record.keywords_ar,
                record.tags,
            )
        )
        blob_source = record.search_blob or _join(
            record.chapter_title_en,
            record.category,
            record.english,
            record.arabic,
            record.keywords_en,
            record.keywords_ur,
            record.keywords_roman,
            record.keywords_ar,
            record.tags,
        )
        blob = normalize_text(blob_source)
        return cls(
            chapter=chapter,
            category=category,
            arabic=arabic,
            english=english,
            keywords=keywords,
            blob=blob,
            raw=raw,
            chapter_tokens=_token_set(chapter),
            category_tokens=_token_set(category),
            text_tokens=_token_set(arabic) | _token_set(english),
            keyword_tokens=_token_set(keywords),
            blob_tokens=_token_set(blob),
            raw_tokens=_token_set(raw),
        )


def score_record(query: QueryTokens, record: Record) -> ScoredMatch:
    """Score ``record`` against ``query`` using the weighted field rules."""
    view = FieldView.build(record)
    phrase = query.normalized
    score = 0.0
    exact = False

    if phrase:
        if phrase in view.blob:
            score += BLOB_CONTAINS
            exact = True
        if phrase in view.keywords:
            score += KEYWORDS_CONTAINS
            exact = True
        if phrase in view.chapter or phrase in view.category:
            score += TITLE_CONTAINS
            exact = True
        if phrase in view.raw:
            score += RAW_CONTAINS
            exact = True

    matched = 0
    for token in query.expanded:
        hit = False
        if token in view.keyword_tokens:
            score += KEYWORD_TOKEN
            hit = True
        if token in view.category_tokens or token in view.chapter_tokens:
            score += TITLE_TOKEN
            hit = True
        if token in view.text_tokens:
            score += TEXT_TOKEN
            hit = True
        if token in view.blob_tokens:
            score += BLOB_TOKEN
            hit = True
        if token in view.raw_tokens:
            score += RAW_TOKEN
            hit = True
        if hit:
            matched += 1

    overlap = matched / len(query.expanded) if query.expanded else 0.0
    score += overlap * COVERAGE_WEIGHT
    return ScoredMatch(record=record, score=score, exact=exact, overlap=overlap)


def score_candidates(query: QueryTokens, records: Iterable[Record]) -> List[ScoredMatch]:
    """Return every record whose primary score is positive."""
    if query.empty:
        return []
    kept: List[ScoredMatch] = []
    for record in records:
        match = score_record(query, record)
        if match.score <= 0:
            continue
        kept.append(match)
    logger.debug("primary stage kept %d candidates", len(kept))
    return kept
