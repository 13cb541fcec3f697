"""Stop words and transliteration aliases used to expand search queries."""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Tuple

from .patterns import normalize_text, tokenize_words


@dataclass(frozen=True)
class SynonymBundle:
    stop_words: FrozenSet[str]
    aliases: Mapping[str, Tuple[str, ...]]


@dataclass(frozen=True)
class QueryTokens:
    """Normalised query plus the token lists derived from it."""

    normalized: str
    base_tokens: Tuple[str, ...]
    expanded: Tuple[str, ...]

    @property
    def empty(self) -> bool:
        return not self.normalized or not self.expanded


def _build_stop_words() -> FrozenSet[str]:
    return frozenset({"ki", "ka", "ke", "dua", "duaon", "for", "the", "a", "an"})


def _build_aliases() -> Dict[str, Tuple[str, ...]]:
    mapping = {
        "safar": ("travel", "journey", "trip"),
        "travel": ("safar", "journey"),
        "sone": ("sleep", "night"),
        "neend": ("sleep", "night"),
        "subah": ("morning",),
        "shaam": ("evening",),
        "evening": ("shaam",),
        "morning": ("subah",),
        "rizq": ("rozi", "provision", "money", "wealth"),
        "rozi": ("rizq", "provision", "money"),
        "riza": ("rizq", "rozi", "provision"),
        "astagfar": ("astaghfar", "istighfar", "forgiveness"),
        "astaghfar": ("istighfar", "forgiveness"),
        "istigfar": ("istighfar", "forgiveness"),
        "anxiety": ("stress", "worry", "distress"),
        "pareshani": ("anxiety", "stress", "worry"),
        "udasi": ("sadness", "grief"),
        "khauf": ("fear", "afraid"),
        "gussa": ("anger",),
        "hifazat": ("protection", "safety"),
        "shifa": ("health", "healing"),
    }
    return mapping


def load_synonyms() -> SynonymBundle:
    return SynonymBundle(
        stop_words=_build_stop_words(),
        aliases=MappingProxyType(_build_aliases()),
    )


DEFAULT_SYNONYMS = load_synonyms()


def strip_stop_words(tokens: List[str], bundle: SynonymBundle = DEFAULT_SYNONYMS) -> List[str]:
    """Drop stop words, keeping the original tokens if nothing would remain."""
    kept = [token for token in tokens if token not in bundle.stop_words]
    return kept if kept else list(tokens)


def aliases_for(token: str, bundle: SynonymBundle = DEFAULT_SYNONYMS) -> List[str]:
    aliases: List[str] = []
    for alias in bundle.aliases.get(token, ()):
        normalized = normalize_text(alias)
        if normalized:
            aliases.append(normalized)
    return aliases


def expand_query(query_text: object, bundle: SynonymBundle = DEFAULT_SYNONYMS) -> QueryTokens:
    """Normalise ``query_text`` and widen its tokens with known aliases.

    Base tokens come first in the expanded tuple, followed by aliases in the
    order they are declared; duplicates are dropped.
    """
    normalized = normalize_text(query_text)
    base = strip_stop_words(tokenize_words(normalized), bundle)
    expanded: List[str] = []
    seen = set()
    for token in base:
        if token not in seen:
            seen.add(token)
            expanded.append(token)
    for token in base:
        for alias in aliases_for(token, bundle):
            if alias in seen:
                continue
            seen.add(alias)
            expanded.append(alias)
    return QueryTokens(normalized=normalized, base_tokens=tuple(base), expanded=tuple(expanded))
