"""Text canonicalisation and reply parsing for dua search conversations.

This module holds the text normaliser shared by every matching stage and the
small regex helpers used to interpret user replies (numbered selections and
bot commands).
"""
from __future__ import annotations

import re
import unicodedata
from typing import List, Optional

_WHITESPACE_RE = re.compile(r"\s+")
_SELECTION_RE = re.compile(r"^\s*([+-]?\d+)")


def _strip_marks(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _is_word_char(ch: str) -> bool:
    if ch.isspace():
        return True
    return unicodedata.category(ch)[0] in ("L", "N")


def normalize_text(value: object) -> str:
    """Return the canonical comparison form of ``value``.

    The text is compatibility-decomposed, stripped of combining marks and
    lower-cased; anything that is not a letter, digit or whitespace becomes a
    space and whitespace runs collapse to one space. ``None`` yields ``""``.

    Examples:
        >>> normalize_text("  Du'ā  for TRAVEL! ")
        'du a for travel'
        >>> normalize_text(None)
        ''
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    if not text:
        return ""
    # Lower-casing can reintroduce combining marks (e.g. U+0130), so fold twice.
    folded = _strip_marks(_strip_marks(text).lower())
    cleaned = "".join(ch if _is_word_char(ch) else " " for ch in folded)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def tokenize_words(value: object) -> List[str]:
    """Split the normalised form of ``value`` into non-empty word tokens."""
    normalized = normalize_text(value)
    if not normalized:
        return []
    return [token for token in normalized.split(" ") if token]


def parse_selection(text: str) -> Optional[int]:
    """
    Extract the leading integer from a selection reply.

    Returns:
        The parsed number, or None when the reply does not start with digits.

    Examples:
        "2" -> 2
        " 3 please" -> 3
        "second" -> None
    """
    if not text:
        return None
    match = _SELECTION_RE.match(text)
    if not match:
        return None
    return int(match.group(1))


def is_command(text: str) -> bool:
    """True for any bot command text, i.e. a message starting with ``/``."""
    return bool(text) and text.lstrip().startswith("/")
