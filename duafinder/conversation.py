"""Turn handling for the multi-step dua search conversation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from . import formatter
from .errors.taxonomy import CandidateSupplyError, ErrorType
from .patterns import is_command, parse_selection
from .records import Record
from .search import search
from .search.ranker import DEFAULT_LIMIT
from .session import MAX_OPTIONS, SearchSession, SessionManager, SessionStage

logger = logging.getLogger(__name__)

Supplier = Callable[[], Sequence[Record]]


class OutcomeKind(str, Enum):
    IDLE = "idle"
    NO_RESULTS = "no_results"
    SINGLE = "single"
    OPTIONS = "options"
    RESOLVED = "resolved"
    INVALID_SELECTION = "invalid_selection"
    SUPPLIER_ERROR = "supplier_error"


@dataclass
class TurnOutcome:
    kind: OutcomeKind
    records: List[Record] = field(default_factory=list)
    stage: Optional[SessionStage] = None
    error_type: Optional[ErrorType] = None
    error: Optional[BaseException] = None

    @property
    def record_ids(self) -> List[str]:
        return [record.id for record in self.records]

    def message(self, *, use_html: bool = False) -> Optional[str]:
        """Render the user-facing reply, or None when nothing should be sent."""
        if self.kind is OutcomeKind.IDLE:
            return None
        if self.kind is OutcomeKind.NO_RESULTS:
            return formatter.NO_RESULTS_MESSAGE
        if self.kind is OutcomeKind.SUPPLIER_ERROR:
            return formatter.SUPPLIER_ERROR_MESSAGE
        if self.kind is OutcomeKind.INVALID_SELECTION:
            return formatter.INVALID_SELECTION_MESSAGE
        if self.kind is OutcomeKind.OPTIONS:
            return formatter.format_options(self.records, use_html=use_html)
        return formatter.format_entry(self.records[0], use_html=use_html)


class DuaConversation:
    """Drive search and session transitions for one inbound message at a time."""

    def __init__(
        self,
        sessions: SessionManager,
        supplier: Supplier,
        *,
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self._sessions = sessions
        self._supplier = supplier
        self._limit = limit

    @property
    def sessions(self) -> SessionManager:
        return self._sessions

    def begin(self, chat_id: object, user_id: object = None) -> SearchSession:
        return self._sessions.begin(chat_id, user_id)

    def cancel(self, chat_id: object, user_id: object = None) -> bool:
        existed = self._sessions.get(chat_id, user_id) is not None
        self._sessions.clear(chat_id, user_id)
        return existed

    def handle_message(self, chat_id: object, user_id: object, text: str) -> TurnOutcome:
        """Apply one user message to the session for ``(chat_id, user_id)``."""
        cleaned = (text or "").strip()
        if not cleaned or is_command(cleaned):
            return TurnOutcome(kind=OutcomeKind.IDLE)

        session = self._sessions.get(chat_id, user_id)
        if session is None:
            return TurnOutcome(kind=OutcomeKind.IDLE)
        if session.stage is SessionStage.AWAITING_SELECTION:
            return self._handle_selection(chat_id, user_id, session, cleaned)
        return self._handle_query(chat_id, user_id, cleaned)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _load_candidates(self) -> Sequence[Record]:
        try:
            return self._supplier()
        except CandidateSupplyError:
            raise
        except Exception as exc:
            raise CandidateSupplyError("Candidate supplier failed") from exc

    def _handle_query(self, chat_id: object, user_id: object, query: str) -> TurnOutcome:
        try:
            candidates = self._load_candidates()
        except CandidateSupplyError as exc:
            logger.warning("Dua search supplier failed for chat %s: %s", chat_id, exc)
            return TurnOutcome(
                kind=OutcomeKind.SUPPLIER_ERROR,
                stage=SessionStage.AWAITING_QUERY,
                error_type=ErrorType.SUPPLIER_FAILURE,
                error=exc,
            )

        matches = search(query, candidates, self._limit)
        if not matches:
            return TurnOutcome(
                kind=OutcomeKind.NO_RESULTS,
                stage=SessionStage.AWAITING_QUERY,
                error_type=ErrorType.NO_MATCH,
            )
        if len(matches) == 1:
            self._sessions.clear(chat_id, user_id)
            return TurnOutcome(kind=OutcomeKind.SINGLE, records=list(matches))

        options = list(matches[:MAX_OPTIONS])
        self._sessions.record_options(chat_id, user_id, options)
        return TurnOutcome(
            kind=OutcomeKind.OPTIONS,
            records=options,
            stage=SessionStage.AWAITING_SELECTION,
        )

    def _handle_selection(
        self, chat_id: object, user_id: object, session: SearchSession, reply: str
    ) -> TurnOutcome:
        number = parse_selection(reply)
        selected = session.option(number) if number is not None else None
        if selected is None:
            return TurnOutcome(
                kind=OutcomeKind.INVALID_SELECTION,
                records=list(session.options),
                stage=SessionStage.AWAITING_SELECTION,
                error_type=ErrorType.INVALID_SELECTION,
            )
        self._sessions.clear(chat_id, user_id)
        return TurnOutcome(kind=OutcomeKind.RESOLVED, records=[selected])
