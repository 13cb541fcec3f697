from __future__ import annotations

import csv
from pathlib import Path

import pytest

from duafinder.catalog.importer import find_csv, import_csv, read_csv_records
from duafinder.search import search


def _write_csv(path: Path, header, rows) -> Path:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle)
        writer.writerow(header)
        writer.writerows(rows)
    return path


HEADER = ["dua_id", "chapter_id", "chapter_title_en", "category", "arabic", "english", "source_ref"]


def test_import_generates_keywords_and_is_searchable(tmp_path, catalog):
    csv_path = _write_csv(
        tmp_path / "master.csv",
        HEADER,
        [
            ["27_1", "27", "Before sleeping", "", "بِاسْمِكَ اللَّهُمَّ أَمُوتُ وَأَحْيَا", "In Your name O Allah, I die and I live", "Bukhari"],
            ["96_1", "96", "Supplication for travel", "Travel", "", "Glory is to Him", "Muslim"],
            ["", "1", "Orphan row", "", "", "", ""],
        ],
    )
    summary = import_csv(catalog, csv_path)
    assert (summary.total, summary.inserted, summary.updated, summary.skipped) == (2, 2, 0, 1)

    records = {record.id: record for record in catalog.load_records()}
    sleep = records["27_1"]
    assert sleep.category == "Sleep"
    assert sleep.source == "Bukhari"
    assert "neend ki dua" in sleep.keywords_roman
    assert sleep.search_blob

    assert [r.id for r in search("neend", catalog.load_records())] == ["27_1"]
    assert [r.id for r in search("safar", catalog.load_records())] == ["96_1"]


def test_reimport_updates_rows(tmp_path, catalog):
    csv_path = _write_csv(tmp_path / "a.csv", HEADER, [["1_1", "1", "Morning", "Morning", "", "first", ""]])
    import_csv(catalog, csv_path)
    _write_csv(csv_path, HEADER, [["1_1", "1", "Morning", "Morning", "", "second", ""]])
    summary = import_csv(catalog, csv_path)
    assert (summary.inserted, summary.updated) == (0, 1)
    assert catalog.load_records()[0].english == "second"


def test_existing_keywords_are_kept_without_enrichment(tmp_path):
    csv_path = _write_csv(
        tmp_path / "b.csv",
        ["id", "category", "keywords_roman", "tags"],
        [["x", "General", "custom words", "mine"]],
    )
    [record] = read_csv_records(csv_path, enrich=False)
    assert record.keywords_roman == "custom words"
    assert record.tags == "mine"
    assert record.search_blob == ""


def test_missing_id_column_is_rejected(tmp_path, catalog):
    csv_path = _write_csv(tmp_path / "c.csv", ["english"], [["hello"]])
    with pytest.raises(ValueError):
        import_csv(catalog, csv_path)


def test_missing_file(tmp_path, catalog):
    with pytest.raises(FileNotFoundError):
        import_csv(catalog, tmp_path / "missing.csv")


def test_find_csv(tmp_path):
    assert find_csv(tmp_path) is None
    _write_csv(tmp_path / "b.csv", ["id"], [["1"]])
    _write_csv(tmp_path / "a.csv", ["id"], [["1"]])
    assert find_csv(tmp_path).name == "a.csv"
