"""Dua search engine: weighted scoring with a relaxed fallback stage."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List

from ..records import Record, coerce_records
from ..synonyms import DEFAULT_SYNONYMS, SynonymBundle, expand_query
from .fuzzy import is_near_match, levenshtein, relaxed_matches
from .ranker import DEFAULT_LIMIT, rank
from .scorer import ScoredMatch, score_candidates

__all__ = [
    "ScoredMatch",
    "is_near_match",
    "levenshtein",
    "search",
    "search_matches",
]

logger = logging.getLogger(__name__)


def search_matches(
    query_text: object,
    candidates: Iterable[Any],
    limit: object = DEFAULT_LIMIT,
    *,
    synonyms: SynonymBundle = DEFAULT_SYNONYMS,
) -> List[ScoredMatch]:
    """Rank ``candidates`` for ``query_text`` and keep the scoring details."""
    query = expand_query(query_text, synonyms)
    if query.empty:
        return []
    records = coerce_records(candidates)
    if not records:
        return []

    logger.debug("search query=%r tokens=%s", query.normalized, list(query.expanded))
    matches = score_candidates(query, records)
    if matches:
        logger.debug("primary result count=%d", len(matches))
        return rank(matches, limit)

    relaxed = relaxed_matches(query, records)
    logger.debug("relaxed result count=%d", len(relaxed))
    return rank(relaxed, limit)


def search(
    query_text: object,
    candidates: Iterable[Any],
    limit: object = DEFAULT_LIMIT,
    *,
    synonyms: SynonymBundle = DEFAULT_SYNONYMS,
) -> List[Record]:
    """Return the best matching records for ``query_text``, best first."""
    return [match.record for match in search_matches(query_text, candidates, limit, synonyms=synonyms)]
