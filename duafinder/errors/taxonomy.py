"""Error taxonomy used by telemetry logging and the conversation host."""
from __future__ import annotations

from enum import Enum


class ErrorType(str, Enum):
    """Standard error taxonomy for dua search telemetry."""

    SUPPLIER_FAILURE = "supplier_failure"
    NO_MATCH = "no_match"
    INVALID_SELECTION = "invalid_selection"
    UNKNOWN = "unknown"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Return True if *value* matches one of the enum members."""

        try:
            cls(value)
        except ValueError:
            return False
        return True


class CandidateSupplyError(Exception):
    """Raised when the record supplier cannot produce the candidate list."""

    def __init__(self, message: str, *, source: str | None = None):
        super().__init__(message)
        self.source = source
