from __future__ import annotations

import json

import pytest

from duafinder.errors.taxonomy import ErrorType
from duafinder.telemetry import events


@pytest.fixture
def log_path(tmp_path, monkeypatch):
    path = tmp_path / "telemetry.ndjson"
    monkeypatch.setenv("TELEMETRY_LOG_PATH", str(path))
    return path


def test_log_search_appends_ndjson(log_path):
    events.log_search("req-1", "safar", ["1", 2], outcome="options")
    events.log_search("req-2", "neend", [])

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["type"] == "search"
    assert first["result_ids"] == ["1", "2"]
    assert first["outcome"] == "options"
    assert first["timestamp"].endswith("Z")
    assert "outcome" not in json.loads(lines[1])


def test_log_error_coerces_type(log_path):
    payload = events.log_error("req-3", "supplier_failure", {"query": "rizq"})
    assert payload["error_type"] == ErrorType.SUPPLIER_FAILURE.value
    [event] = list(events.iter_events("error"))
    assert event["details"] == {"query": "rizq"}


def test_log_error_rejects_unknown_type(log_path):
    with pytest.raises(ValueError):
        events.log_error("req-4", "not-a-type", {})


def test_log_error_requires_serialisable_details(log_path):
    with pytest.raises(TypeError):
        events.log_error("req-5", ErrorType.UNKNOWN, {"bad": object()})


def test_request_id_is_required(log_path):
    with pytest.raises(ValueError):
        events.log_search("", "query", [])


def test_recent_queries_skips_corrupt_lines(log_path):
    events.log_search("a", "first", [])
    with log_path.open("a", encoding="utf-8") as stream:
        stream.write("not json\n\n")
    events.log_error("b", ErrorType.NO_MATCH, {})
    events.log_search("c", "second", [])
    events.log_search("d", "third", [])

    assert events.recent_queries() == ["first", "second", "third"]
    assert events.recent_queries(limit=2) == ["second", "third"]


def test_iter_events_without_log_file(log_path):
    assert list(events.iter_events()) == []


def test_error_type_has_value():
    assert ErrorType.has_value("no_match")
    assert not ErrorType.has_value("session_expired")


def test_log_error_accepts_enum_and_requires_dict_details(log_path):
    assert events.log_error("req-6", ErrorType.NO_MATCH, {})["error_type"] == "no_match"
    with pytest.raises(TypeError):
        events.log_error("req-7", ErrorType.NO_MATCH, ["not", "a", "dict"])
    assert [event["request_id"] for event in events.iter_events("error")] == ["req-6"]
