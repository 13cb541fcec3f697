"""Multilingual dua search with typo-tolerant ranking and search sessions."""

from .records import Record
from .search import is_near_match, search, search_matches
from .session import SessionManager, SessionStage

__all__ = [
    "Record",
    "SessionManager",
    "SessionStage",
    "is_near_match",
    "search",
    "search_matches",
]
