from __future__ import annotations

import pytest

from duafinder.records import Record
from duafinder.search.scorer import BLOB_CONTAINS, FieldView, score_candidates, score_record
from duafinder.synonyms import expand_query


def test_alias_hit_scores_text_and_blob_tokens():
    record = Record(id="1", category="Morning", english="dua for travel safety")
    match = score_record(expand_query("safar"), record)
    # travel: text +7, blob +4; coverage 1/4 * 18
    assert match.score == pytest.approx(15.5)
    assert match.exact is False
    assert match.overlap == pytest.approx(0.25)


def test_every_field_bonus_applies_independently(corpus):
    sleep_record = corpus[1]
    match = score_record(expand_query("sleep"), sleep_record)
    # blob 36 + keywords 28 + chapter 20 + keyword token 11 + category token 9 + blob token 4 + coverage 18
    assert match.score == pytest.approx(126.0)
    assert match.exact is True
    assert match.overlap == pytest.approx(1.0)


def test_blob_containment_scores_at_least_top_bonus():
    record = Record(id="x", search_blob="Dua for travel safety")
    match = score_record(expand_query("travel safety"), record)
    assert match.score >= BLOB_CONTAINS


def test_search_blob_falls_back_to_joined_fields():
    record = Record(id="x", chapter_title_en="Visiting the sick", keywords_en="shifa dua")
    view = FieldView.build(record)
    assert view.blob == "visiting the sick shifa dua"
    assert "shifa" in view.keyword_tokens


def test_score_candidates_discards_non_positive(corpus):
    kept = score_candidates(expand_query("safar"), corpus)
    assert [match.record_id for match in kept] == ["1"]


def test_empty_query_matches_nothing(corpus):
    assert score_candidates(expand_query("  ?? "), corpus) == []


def test_missing_fields_contribute_nothing():
    match = score_record(expand_query("travel"), Record(id="empty"))
    assert match.score == 0
