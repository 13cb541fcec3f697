"""Dua catalog storage, caching and import utilities."""

from .importer import ImportSummary, import_csv
from .store import CatalogStore
from .supplier import CachedSupplier
from .watcher import CatalogWatcher

__all__ = ["CachedSupplier", "CatalogStore", "CatalogWatcher", "ImportSummary", "import_csv"]
