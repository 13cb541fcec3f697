#!/usr/bin/env python3
"""Load a dua CSV export into the DuckDB catalog and optionally try a query."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:  # pragma: no cover - import side effect
    sys.path.insert(0, str(ROOT))

from duafinder.catalog import CatalogStore, import_csv
from duafinder.config import load_settings
from duafinder.search import search_matches


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import duas into the search catalog")
    parser.add_argument("csv", type=Path, help="CSV file with a dua_id or id column")
    parser.add_argument("--db", type=Path, default=None, help="DuckDB file (default: settings db_path)")
    parser.add_argument(
        "--no-enrich",
        action="store_true",
        help="Do not generate missing keyword lists and search blobs",
    )
    parser.add_argument("--query", default=None, help="Run a search after importing")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    args = _build_parser().parse_args(argv)

    settings = load_settings()
    store = CatalogStore(args.db or settings.db_path, table=settings.catalog_table)
    try:
        summary = import_csv(store, args.csv, enrich=not args.no_enrich)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    print(
        f"Imported {summary.total} rows "
        f"({summary.inserted} inserted, {summary.updated} updated, {summary.skipped} skipped)"
    )
    if args.query:
        for rank, match in enumerate(search_matches(args.query, store.load_records(), settings.search_limit), 1):
            print(f"{rank}. [{match.record.category or 'General'}] {match.record.id} score={match.score:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
