"""Error types raised or reported by duafinder."""

from .taxonomy import CandidateSupplyError, ErrorType

__all__ = ["CandidateSupplyError", "ErrorType"]
