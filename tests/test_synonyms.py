from __future__ import annotations

import pytest

from duafinder.synonyms import DEFAULT_SYNONYMS, aliases_for, expand_query, strip_stop_words


def test_alias_expansion_keeps_base_tokens_first():
    query = expand_query("Safar")
    assert query.normalized == "safar"
    assert query.base_tokens == ("safar",)
    assert query.expanded == ("safar", "travel", "journey", "trip")


def test_stop_words_are_removed():
    query = expand_query("sone ki dua")
    assert query.base_tokens == ("sone",)
    assert query.expanded == ("sone", "sleep", "night")
    assert query.normalized == "sone ki dua"


def test_stop_word_only_query_keeps_original_tokens():
    query = expand_query("the dua")
    assert query.base_tokens == ("the", "dua")
    assert query.expanded == ("the", "dua")
    assert not query.empty


def test_expansion_deduplicates_aliases():
    query = expand_query("safar travel")
    assert query.expanded == ("safar", "travel", "journey", "trip")


def test_empty_queries_are_flagged():
    assert expand_query("").empty
    assert expand_query("!!! ...").empty
    assert expand_query(None).empty


def test_tables_are_immutable():
    with pytest.raises(TypeError):
        DEFAULT_SYNONYMS.aliases["new"] = ("alias",)  # type: ignore[index]
    with pytest.raises(AttributeError):
        DEFAULT_SYNONYMS.stop_words.add("x")  # type: ignore[attr-defined]


def test_helpers():
    assert strip_stop_words(["ki", "rizq"]) == ["rizq"]
    assert strip_stop_words(["ki", "ka"]) == ["ki", "ka"]
    assert aliases_for("shifa") == ["health", "healing"]
    assert aliases_for("unknown") == []
