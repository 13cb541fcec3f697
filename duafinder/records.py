"""Dua record model shared by the catalog, search engine and formatter."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Iterable, List, Mapping, Tuple

TEXT_FIELDS: Tuple[str, ...] = (
    "chapter_title_en",
    "category",
    "arabic",
    "transliteration",
    "english",
    "urdu",
    "keywords_en",
    "keywords_ur",
    "keywords_roman",
    "keywords_ar",
    "tags",
    "search_blob",
    "raw_text",
    "source",
    "authenticity",
)

KEYWORD_FIELDS: Tuple[str, ...] = (
    "keywords_en",
    "keywords_ur",
    "keywords_roman",
    "keywords_ar",
    "tags",
)


def _coerce(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_coerce(item) for item in value if item is not None)
    return str(value)


@dataclass(frozen=True)
class Record:
    """One searchable dua entry. Every text field defaults to ``""``."""

    id: str
    chapter_title_en: str = ""
    category: str = ""
    arabic: str = ""
    transliteration: str = ""
    english: str = ""
    urdu: str = ""
    keywords_en: str = ""
    keywords_ur: str = ""
    keywords_roman: str = ""
    keywords_ar: str = ""
    tags: str = ""
    search_blob: str = ""
    raw_text: str = ""
    source: str = ""
    authenticity: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Record":
        """Build a record from a loosely-typed row, ignoring unknown keys."""
        if isinstance(payload, Record):
            return payload
        if not isinstance(payload, Mapping):
            return cls(id="")
        known = {f.name for f in fields(cls)}
        values: Dict[str, str] = {}
        for key, raw in payload.items():
            if key in known:
                values[key] = _coerce(raw)
        values.setdefault("id", _coerce(payload.get("dua_id")))
        return cls(**values)

    def with_fields(self, **changes: str) -> "Record":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def coerce_records(candidates: Iterable[Any]) -> List[Record]:
    """Convert arbitrary candidate rows into records, never failing the batch."""
    if not isinstance(candidates, Iterable) or isinstance(candidates, (str, bytes, Mapping)):
        return []
    records: List[Record] = []
    for candidate in candidates:
        records.append(Record.from_mapping(candidate))
    return records
