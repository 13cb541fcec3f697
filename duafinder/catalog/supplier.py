"""Cached candidate supplier feeding the search engine."""
from __future__ import annotations

import logging
import time
from threading import RLock
from typing import Callable, List, Optional, Sequence

from ..errors.taxonomy import CandidateSupplyError
from ..records import Record

logger = logging.getLogger(__name__)

Loader = Callable[[], Sequence[Record]]


class CachedSupplier:
    """Serve the full record list, reloading it once the TTL has elapsed."""

    def __init__(
        self,
        loader: Loader,
        *,
        ttl_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "catalog",
    ) -> None:
        self._loader = loader
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._name = name
        self._lock = RLock()
        self._data: Optional[List[Record]] = None
        self._expires_at = 0.0

    def get(self, *, force_refresh: bool = False) -> List[Record]:
        """Return cached records, raising ``CandidateSupplyError`` if loading fails."""
        with self._lock:
            if not force_refresh and self._data is not None and self._clock() < self._expires_at:
                return list(self._data)
            try:
                loaded = list(self._loader())
            except CandidateSupplyError:
                raise
            except Exception as exc:
                logger.warning("Failed to load %s records: %s", self._name, exc)
                raise CandidateSupplyError(
                    f"Unable to load {self._name} records", source=self._name
                ) from exc
            self._data = loaded
            self._expires_at = self._clock() + self._ttl
            logger.debug("Refreshed %s cache with %d records", self._name, len(loaded))
            return list(loaded)

    def invalidate(self) -> None:
        with self._lock:
            self._expires_at = 0.0

    def __call__(self) -> List[Record]:
        return self.get()
