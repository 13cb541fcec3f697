"""Deterministic ordering of scored matches."""
from __future__ import annotations

from typing import Iterable, List

from .scorer import ScoredMatch

DEFAULT_LIMIT = 3


def coerce_limit(limit: object) -> int:
    if isinstance(limit, float) and limit.is_integer():
        limit = int(limit)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        return DEFAULT_LIMIT
    return limit


def rank(matches: Iterable[ScoredMatch], limit: object = DEFAULT_LIMIT) -> List[ScoredMatch]:
    """Sort by score descending, then record id ascending, and truncate."""
    ordered = sorted(matches, key=lambda match: (-match.score, str(match.record.id)))
    return ordered[: coerce_limit(limit)]
