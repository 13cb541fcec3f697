"""Relaxed matching used when the weighted scorer finds nothing."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from ..patterns import normalize_text, tokenize_words
from ..records import Record
from ..synonyms import QueryTokens
from .scorer import ScoredMatch

logger = logging.getLogger(__name__)

LITERAL_HIT = 5.0
NEAR_HIT = 2.5
LONG_TOKEN_LENGTH = 7

_HAYSTACK_FIELDS = (
    "chapter_title_en",
    "category",
    "arabic",
    "english",
    "urdu",
    "keywords_en",
    "keywords_ur",
    "keywords_roman",
    "keywords_ar",
    "tags",
    "search_blob",
    "raw_text",
)


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance with unit insert, delete and substitute costs."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            insert_cost = current[j - 1] + 1
            delete_cost = previous[j] + 1
            replace_cost = previous[j - 1] + (ca != cb)
            current.append(min(insert_cost, delete_cost, replace_cost))
        previous = current
    return previous[-1]


def max_distance(query_token: str) -> int:
    return 2 if len(query_token) >= LONG_TOKEN_LENGTH else 1


def is_near_match(query_token: str, candidate_token: str) -> bool:
    """Return True when two tokens are equal, prefix-related or a small edit apart."""
    if not query_token or not candidate_token:
        return False
    if query_token == candidate_token:
        return True
    if candidate_token.startswith(query_token) or query_token.startswith(candidate_token):
        return True
    allowed = max_distance(query_token)
    if abs(len(query_token) - len(candidate_token)) > allowed:
        return False
    return levenshtein(query_token, candidate_token) <= allowed


def build_haystack(record: Record) -> str:
    return normalize_text(" ".join(getattr(record, name) for name in _HAYSTACK_FIELDS))


def relaxed_score(tokens: Sequence[str], haystack: str, hay_tokens: Sequence[str]) -> float:
    score = 0.0
    for token in tokens:
        if token in haystack:
            score += LITERAL_HIT
            continue
        if any(is_near_match(token, candidate) for candidate in hay_tokens):
            score += NEAR_HIT
    return score


def relaxed_matches(query: QueryTokens, records: Iterable[Record]) -> List[ScoredMatch]:
    """Score records by literal or approximate token presence anywhere in the entry."""
    if query.empty:
        return []
    kept: List[ScoredMatch] = []
    for record in records:
        haystack = build_haystack(record)
        if not haystack:
            continue
        hay_tokens = tokenize_words(haystack)
        score = relaxed_score(query.expanded, haystack, hay_tokens)
        if score <= 0:
            continue
        literal = sum(1 for token in query.expanded if token in haystack)
        kept.append(
            ScoredMatch(
                record=record,
                score=score,
                exact=query.normalized in haystack,
                overlap=literal / len(query.expanded),
            )
        )
    logger.debug("relaxed stage kept %d candidates", len(kept))
    return kept
