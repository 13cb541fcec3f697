"""Per-user dua search session state."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from typing import Callable, Dict, Iterable, Optional, Protocol, Tuple

from .records import Record

SESSION_TTL_SECONDS = 15 * 60
MAX_OPTIONS = 3


class SessionStage(str, Enum):
    AWAITING_QUERY = "awaiting_query"
    AWAITING_SELECTION = "awaiting_selection"


@dataclass(frozen=True)
class SearchSession:
    stage: SessionStage
    options: Tuple[Record, ...] = field(default_factory=tuple)
    updated_at: float = 0.0

    def option(self, number: int) -> Optional[Record]:
        """Return the 1-based option ``number`` or None when out of range."""
        if number < 1 or number > len(self.options):
            return None
        return self.options[number - 1]


class SessionStore(Protocol):
    """Storage backend for sessions; each call must be atomic."""

    def get(self, key: str) -> Optional[SearchSession]:
        ...

    def put(self, key: str, session: SearchSession) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemorySessionStore:
    """Process-local session registry guarded by a re-entrant lock."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._sessions: Dict[str, SearchSession] = {}

    def get(self, key: str) -> Optional[SearchSession]:
        with self._lock:
            return self._sessions.get(key)

    def put(self, key: str, session: SearchSession) -> None:
        with self._lock:
            self._sessions[key] = session

    def delete(self, key: str) -> None:
        with self._lock:
            self._sessions.pop(key, None)

    def delete_if(self, key: str, session: SearchSession) -> None:
        """Remove ``key`` only while it still maps to ``session``."""
        with self._lock:
            if self._sessions.get(key) is session:
                del self._sessions[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def make_session_key(chat_id: object, user_id: object = None) -> str:
    owner = user_id if user_id not in (None, "") else chat_id
    return f"{chat_id}:{owner}"


class SessionManager:
    """Two-stage search session state machine with lazy TTL eviction."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        *,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store if store is not None else InMemorySessionStore()
        self._ttl = float(ttl_seconds)
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def begin(self, chat_id: object, user_id: object = None) -> SearchSession:
        session = SearchSession(stage=SessionStage.AWAITING_QUERY, options=(), updated_at=self._clock())
        self._store.put(make_session_key(chat_id, user_id), session)
        return session

    def record_options(
        self, chat_id: object, user_id: object, options: Iterable[Record]
    ) -> SearchSession:
        kept = tuple(options or ())[:MAX_OPTIONS]
        session = SearchSession(
            stage=SessionStage.AWAITING_SELECTION,
            options=kept,
            updated_at=self._clock(),
        )
        self._store.put(make_session_key(chat_id, user_id), session)
        return session

    def get(self, chat_id: object, user_id: object = None) -> Optional[SearchSession]:
        key = make_session_key(chat_id, user_id)
        session = self._store.get(key)
        if session is None:
            return None
        if self._clock() - session.updated_at > self._ttl:
            delete_if = getattr(self._store, "delete_if", None)
            if delete_if is not None:
                delete_if(key, session)
            else:
                self._store.delete(key)
            return None
        return session

    def clear(self, chat_id: object, user_id: object = None) -> None:
        self._store.delete(make_session_key(chat_id, user_id))
