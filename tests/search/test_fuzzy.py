from __future__ import annotations

import pytest

from duafinder.records import Record
from duafinder.search.fuzzy import build_haystack, is_near_match, levenshtein, relaxed_matches
from duafinder.synonyms import expand_query


@pytest.mark.parametrize(
    "a, b, distance",
    [("kitten", "sitting", 3), ("", "abc", 3), ("abc", "", 3), ("rizq", "rizk", 1), ("same", "same", 0)],
)
def test_levenshtein(a, b, distance):
    assert levenshtein(a, b) == distance
    assert levenshtein(b, a) == distance


def test_near_match_rules():
    assert is_near_match("rizq", "rizk")
    assert not is_near_match("sleep", "evening")
    assert is_near_match("trav", "travel")
    assert is_near_match("travelling", "travel")
    assert is_near_match("forgivness", "forgiveness")
    assert not is_near_match("rizq", "roza")
    assert not is_near_match("abcdefg", "abcdxyz")
    assert not is_near_match("", "travel")
    assert not is_near_match("travel", "")


def test_haystack_includes_urdu_and_raw_text():
    record = Record(id="1", urdu="سفر کی دعا", raw_text="Extra NOTES")
    assert build_haystack(record) == "سفر کی دعا extra notes"


def test_relaxed_matches_tolerate_transliteration(corpus):
    matches = relaxed_matches(expand_query("rizk"), corpus)
    assert [match.record_id for match in matches] == ["5"]
    assert matches[0].score == pytest.approx(2.5)


def test_literal_substring_beats_near_match(corpus):
    matches = relaxed_matches(expand_query("adhk"), corpus)
    assert {match.record_id for match in matches} == {"3", "4"}
    assert all(match.score == pytest.approx(5.0) for match in matches)


def test_records_without_text_are_skipped():
    assert relaxed_matches(expand_query("rizq"), [Record(id="blank")]) == []
