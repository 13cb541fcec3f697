from __future__ import annotations

import pytest

from duafinder.catalog.store import CatalogStore
from duafinder.records import Record


def test_upsert_and_load_round_trip(catalog, corpus):
    assert catalog.count() == 0
    before = catalog.get_version()

    result = catalog.upsert(corpus[:2])
    assert (result.total, result.inserted, result.updated) == (2, 2, 0)
    assert result.version == before + 1
    assert catalog.load_records() == corpus[:2]


def test_upsert_overwrites_existing_ids(catalog, corpus):
    catalog.upsert(corpus[:2])
    changed = corpus[0].with_fields(english="Updated translation")
    result = catalog.upsert([changed, corpus[2]])
    assert (result.inserted, result.updated) == (1, 1)
    loaded = {record.id: record for record in catalog.load_records()}
    assert loaded["1"].english == "Updated translation"
    assert catalog.count() == 3


def test_records_without_id_are_skipped(catalog):
    result = catalog.upsert([Record(id=""), Record(id="a", english="x")])
    assert result.total == 1
    assert [record.id for record in catalog.load_records()] == ["a"]


def test_empty_upsert_keeps_version(catalog):
    version = catalog.get_version()
    assert catalog.upsert([]).version == version
    assert catalog.get_version() == version


def test_delete_bumps_version(catalog, corpus):
    catalog.upsert(corpus[:1])
    version = catalog.get_version()
    assert catalog.delete("1") is True
    assert catalog.get_version() == version + 1
    assert catalog.delete("1") is False
    assert catalog.count() == 0


def test_catalog_persists_across_instances(tmp_path, corpus):
    path = tmp_path / "nested" / "duas.duckdb"
    CatalogStore(path).upsert(corpus)
    assert len(CatalogStore(path).load_records()) == len(corpus)


def test_rejects_unsafe_table_name(tmp_path):
    with pytest.raises(ValueError):
        CatalogStore(tmp_path / "x.duckdb", table="duas; DROP TABLE x")
