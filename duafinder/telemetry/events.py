"""NDJSON event log for dua searches and search failures.

Each line is one JSON object with a ``type`` of ``search`` or ``error``. The
log lives at ``TELEMETRY_LOG_PATH`` when set, otherwise under ``var/log`` in
the repository root.
"""
from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from ..errors.taxonomy import ErrorType

__all__ = ["log_error", "log_search", "iter_events", "recent_queries"]

DEFAULT_LOG_PATH = Path(__file__).resolve().parents[2] / "var" / "log" / "telemetry.ndjson"

Event = Dict[str, object]


def current_log_path() -> Path:
    configured = os.getenv("TELEMETRY_LOG_PATH")
    return Path(configured).expanduser() if configured else DEFAULT_LOG_PATH


def _utc_stamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _event(kind: str, request_id: str, **body: object) -> Event:
    if not isinstance(request_id, str) or not request_id:
        raise ValueError("request_id must be a non-empty string")
    return {"type": kind, "timestamp": _utc_stamp(), "request_id": request_id, **body}


def _write(event: Event) -> Event:
    try:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except TypeError as exc:
        raise TypeError(f"{event['type']} event is not JSON serialisable") from exc
    path = current_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as stream:
        stream.write(line + "\n")
    return event


def log_search(
    request_id: str,
    query: str,
    result_ids: Sequence[str],
    *,
    outcome: Optional[str] = None,
) -> Event:
    """Record a query and the ids it returned, best first."""
    event = _event("search", request_id, query=query, result_ids=[str(item) for item in result_ids])
    if outcome:
        event["outcome"] = outcome
    return _write(event)


def log_error(request_id: str, err_type: ErrorType | str, details: Dict[str, object]) -> Event:
    """Record a failed search turn; ``err_type`` must name an ``ErrorType``."""
    if not ErrorType.has_value(err_type):
        raise ValueError(f"Unknown error type: {err_type}")
    if not isinstance(details, dict):
        raise TypeError("details must be a dict")
    return _write(_event("error", request_id, error_type=ErrorType(err_type).value, details=details))


def iter_events(event_type: Optional[str] = None) -> Iterator[Event]:
    path = current_log_path()
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as stream:
        for raw in stream:
            try:
                event = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if isinstance(event, dict) and event_type in (None, event.get("type")):
                yield event


def recent_queries(limit: int = 20) -> List[str]:
    queries = [str(event.get("query", "")) for event in iter_events("search")]
    return queries[-limit:]
