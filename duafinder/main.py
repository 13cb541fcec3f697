"""FastAPI host for the dua search conversation."""
from __future__ import annotations

import logging
import sys
import uuid
from typing import Any, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator

from . import formatter
from .catalog import CachedSupplier, CatalogStore, CatalogWatcher, import_csv
from .catalog.importer import find_csv
from .config import Settings, load_settings
from .conversation import DuaConversation, OutcomeKind, TurnOutcome
from .errors.taxonomy import CandidateSupplyError, ErrorType
from .records import Record
from .search import search_matches
from .session import SessionManager
from .telemetry import events

ChatId = Union[int, str]


class SearchRequest(BaseModel):
    query: str
    limit: Optional[int] = None


class BeginRequest(BaseModel):
    chat_id: ChatId
    user_id: Optional[ChatId] = None


class MessageRequest(BaseModel):
    chat_id: ChatId
    user_id: Optional[ChatId] = None
    text: str
    html: bool = False

    @field_validator("text", mode="before")
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)


package_logger = logging.getLogger("duafinder")
package_logger.setLevel(logging.DEBUG)

handler = logging.StreamHandler(sys.stdout)
handler.setLevel(logging.INFO)
handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

package_logger.handlers.clear()        # avoid duplicate logs if reloading
package_logger.addHandler(handler)
package_logger.propagate = False       # don't let Uvicorn re-handle it

logger = logging.getLogger(__name__)

app = FastAPI(title="Dua Finder")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

_state: Dict[str, Any] = {}


def build_state(settings: Settings) -> Dict[str, Any]:
    store = CatalogStore(settings.db_path, table=settings.catalog_table)
    if store.count() == 0:
        csv_path = find_csv(settings.db_path.parent)
        if csv_path is not None:
            import_csv(store, csv_path)
    supplier = CachedSupplier(store.load_records, ttl_seconds=settings.cache_ttl_seconds)
    watcher = CatalogWatcher(store, supplier, interval=settings.watch_interval_seconds)
    sessions = SessionManager(ttl_seconds=settings.session_ttl_seconds)
    conversation = DuaConversation(sessions, supplier, limit=settings.search_limit)
    return {
        "settings": settings,
        "store": store,
        "supplier": supplier,
        "watcher": watcher,
        "conversation": conversation,
    }


@app.on_event("startup")
def startup_event() -> None:
    settings = load_settings()
    _state.update(build_state(settings))
    _state["watcher"].start()
    logger.info(
        "Dua catalog ready at %s (%d records)",
        settings.db_path,
        _state["store"].count(),
    )


@app.on_event("shutdown")
def shutdown_event() -> None:
    watcher: Optional[CatalogWatcher] = _state.get("watcher")
    if watcher:
        watcher.stop()


def _conversation() -> DuaConversation:
    conversation = _state.get("conversation")
    if conversation is None:
        raise HTTPException(status_code=503, detail="Service is not initialised.")
    return conversation


def _new_request_id() -> str:
    return uuid.uuid4().hex


def _summarise(record: Record, *, use_html: bool = False) -> Dict[str, Any]:
    return {
        "id": record.id,
        "category": record.category,
        "preview": formatter.preview(record),
        "text": formatter.format_entry(record, use_html=use_html),
    }


def _log_outcome(request_id: str, query: str, outcome: TurnOutcome) -> None:
    if outcome.kind is OutcomeKind.SUPPLIER_ERROR:
        events.log_error(
            request_id,
            ErrorType.SUPPLIER_FAILURE,
            {"query": query, "message": str(outcome.error or "")},
        )
        return
    if outcome.kind in (OutcomeKind.NO_RESULTS, OutcomeKind.SINGLE, OutcomeKind.OPTIONS):
        events.log_search(request_id, query, outcome.record_ids, outcome=outcome.kind.value)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.post("/search")
def search_endpoint(payload: SearchRequest) -> Dict[str, Any]:
    query = payload.query.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Query cannot be empty.")
    supplier: CachedSupplier = _state["supplier"]
    settings: Settings = _state["settings"]
    request_id = _new_request_id()
    try:
        candidates = supplier.get()
    except CandidateSupplyError as exc:
        events.log_error(request_id, ErrorType.SUPPLIER_FAILURE, {"query": query, "message": str(exc)})
        raise HTTPException(status_code=503, detail=formatter.SUPPLIER_ERROR_MESSAGE) from exc

    limit = payload.limit or settings.search_limit
    matches = search_matches(query, candidates, limit)
    events.log_search(request_id, query, [match.record_id for match in matches])
    return {
        "request_id": request_id,
        "results": [
            dict(_summarise(match.record), score=round(match.score, 3), exact=match.exact)
            for match in matches
        ],
    }


@app.post("/dua/begin")
def begin_search(payload: BeginRequest) -> Dict[str, Any]:
    session = _conversation().begin(payload.chat_id, payload.user_id)
    return {"stage": session.stage.value, "message": formatter.format_search_prompt()}


@app.post("/dua/message")
def dua_message(payload: MessageRequest) -> Dict[str, Any]:
    conversation = _conversation()
    request_id = _new_request_id()
    outcome = conversation.handle_message(payload.chat_id, payload.user_id, payload.text)
    _log_outcome(request_id, payload.text, outcome)
    session = conversation.sessions.get(payload.chat_id, payload.user_id)
    return {
        "request_id": request_id,
        "kind": outcome.kind.value,
        "stage": session.stage.value if session else None,
        "message": outcome.message(use_html=payload.html),
        "results": [_summarise(record, use_html=payload.html) for record in outcome.records],
    }


@app.post("/dua/cancel")
def cancel_search(payload: BeginRequest) -> Dict[str, Any]:
    cancelled = _conversation().cancel(payload.chat_id, payload.user_id)
    return {"cancelled": cancelled, "message": formatter.CANCELLED_MESSAGE if cancelled else None}


@app.get("/dua/session")
def session_state(chat_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
    session = _conversation().sessions.get(chat_id, user_id)
    if session is None:
        return {"has_session": False, "stage": None, "option_ids": []}
    return {
        "has_session": True,
        "stage": session.stage.value,
        "option_ids": [record.id for record in session.options],
    }


@app.get("/debug/recent-searches")
def recent_searches(limit: int = 20) -> Dict[str, List[str]]:
    return {"queries": events.recent_queries(limit)}
