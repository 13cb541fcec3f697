"""Load dua rows from CSV exports into the catalog."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import duckdb

from ..keywords import enrich_record
from ..records import TEXT_FIELDS, Record
from .store import CatalogStore

logger = logging.getLogger(__name__)

# Header spellings seen in spreadsheet exports.
_COLUMN_ALIASES = {
    "duaid": "id",
    "id": "id",
    "chapter": "chapter_title_en",
    "chaptertitle": "chapter_title_en",
    "title": "chapter_title_en",
    "sourceref": "source",
    "reference": "source",
    "text": "raw_text",
}


@dataclass
class ImportSummary:
    total: int
    inserted: int
    updated: int
    skipped: int


def _normalise(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def _column_map(columns: Sequence[str]) -> Dict[str, str]:
    targets = {_normalise(field): field for field in TEXT_FIELDS}
    targets.update(_COLUMN_ALIASES)
    mapping: Dict[str, str] = {}
    for column in columns:
        target = targets.get(_normalise(column))
        if target and target not in mapping.values():
            mapping[column] = target
    return mapping


def _compact(value: object) -> str:
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def read_csv_records(csv_path: Path, *, enrich: bool = True) -> List[Record]:
    """Parse ``csv_path`` into records, generating missing keyword fields."""
    with duckdb.connect() as conn:
        result = conn.execute(
            "SELECT * FROM read_csv_auto(?, header = true, all_varchar = true)",
            [str(csv_path)],
        )
        columns = [desc[0] for desc in result.description]
        rows = result.fetchall()
    mapping = _column_map(columns)
    if "id" not in mapping.values():
        raise ValueError(f"{csv_path} has no id or dua_id column")

    records: List[Record] = []
    for row in rows:
        payload = {mapping[col]: _compact(value) for col, value in zip(columns, row) if col in mapping}
        record = Record.from_mapping(payload)
        if enrich:
            record = enrich_record(record)
        records.append(record)
    return records


def import_csv(store: CatalogStore, csv_path: Path, *, enrich: bool = True) -> ImportSummary:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")
    records = read_csv_records(path, enrich=enrich)
    usable = [record for record in records if record.id]
    skipped = len(records) - len(usable)
    if skipped:
        logger.warning("Skipping %d rows without an id in %s", skipped, path.name)
    result = store.upsert(usable)
    logger.info(
        "Imported %s: %d rows (%d inserted, %d updated)",
        path.name,
        result.total,
        result.inserted,
        result.updated,
    )
    return ImportSummary(
        total=result.total,
        inserted=result.inserted,
        updated=result.updated,
        skipped=skipped,
    )


def find_csv(data_dir: Path) -> Optional[Path]:
    csv_files = sorted(Path(data_dir).glob("*.csv"))
    return csv_files[0] if csv_files else None
