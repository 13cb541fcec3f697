"""Background watcher that keeps the supplier cache in sync with the catalog."""
from __future__ import annotations

import logging
import threading
from typing import Optional

from .store import CatalogStore
from .supplier import CachedSupplier

logger = logging.getLogger(__name__)


class CatalogWatcher:
    """Poll the catalog version and drop the supplier cache on change."""

    def __init__(
        self,
        store: CatalogStore,
        supplier: CachedSupplier,
        *,
        interval: float = 2.0,
    ) -> None:
        self._store = store
        self._supplier = supplier
        self._interval = interval
        self._version: Optional[int] = None
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def version(self) -> Optional[int]:
        return self._version

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._version = self._store.get_version()
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="catalog-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._thread:
            return
        self._stop.set()
        self._thread.join(timeout=self._interval * 2)
        self._thread = None

    def poll(self) -> bool:
        """Check the catalog once; return True when the cache was invalidated."""
        version = self._store.get_version()
        if version == self._version:
            return False
        logger.info("Catalog version changed %s -> %s; invalidating cache", self._version, version)
        self._version = version
        self._supplier.invalidate()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.poll()
            except Exception:
                logger.exception("Catalog watcher poll failed")
