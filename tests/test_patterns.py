from __future__ import annotations

import pytest

from duafinder.patterns import is_command, normalize_text, parse_selection, tokenize_words


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Du'ā  for TRAVEL! ", "du a for travel"),
        ("Café—Ümit", "cafe umit"),
        ("ＲＩＺＱ", "rizq"),
        ("دُعَاءُ السَّفَرِ", "دعاء السفر"),
        ("سونے کی دعا", "سونے کی دعا"),
        ("line\none\ttab", "line one tab"),
        ("", ""),
        (None, ""),
        (42, "42"),
    ],
)
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "İstanbul ﬁrst",
        "Ｓａｆａｒ ki DUA!!",
        "أَذْكَارُ الصَّبَاحِ",
        "Hello,   World... (again)",
        "ǅemal ℌ ½",
    ],
)
def test_normalize_text_is_idempotent(raw):
    once = normalize_text(raw)
    assert normalize_text(once) == once


def test_tokenize_words_discards_empty_tokens():
    assert tokenize_words("a,b  c") == ["a", "b", "c"]
    assert tokenize_words("   ") == []
    assert tokenize_words(None) == []


@pytest.mark.parametrize(
    "reply, expected",
    [("2", 2), (" 3 please", 3), ("5", 5), ("-1", -1), ("second", None), ("", None)],
)
def test_parse_selection(reply, expected):
    assert parse_selection(reply) == expected


@pytest.mark.parametrize("text", ["/dua", "/Cancel@TafseerBot", "/duas on", "/- hello", "/", "  /start"])
def test_is_command(text):
    assert is_command(text)


@pytest.mark.parametrize("text", ["safar", "", "dua / night", "2"])
def test_is_not_command(text):
    assert not is_command(text)
