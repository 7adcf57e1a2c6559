"""
In-memory cache of the latest pricing / recall snapshot.

- One immutable CacheSnapshot is held at a time; a refresh swaps the
  reference, so readers see the old snapshot or the new one, never a mix.
- Staleness is judged against an injectable clock (time.time by default).
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable, Optional

import config
from models import CacheSnapshot, PricingRecord, RecallDescriptor


class CacheStore:
    """Owner of the current snapshot. Single writer: the Refresher."""

    def __init__(
        self,
        max_age: float = config.CACHE_DURATION_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_age = max_age
        self._clock = clock
        self._snapshot = CacheSnapshot()
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def replace(
        self,
        pricing: Iterable[PricingRecord],
        recalls: Iterable[RecallDescriptor],
    ) -> CacheSnapshot:
        """Build a new snapshot stamped with the current time and swap it in."""
        snapshot = CacheSnapshot(
            pricing=tuple(pricing),
            recalls=tuple(recalls),
            loaded_at=self._clock(),
        )
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def age(self) -> Optional[float]:
        """Seconds since the last successful load, or None if never loaded."""
        loaded_at = self._snapshot.loaded_at
        if loaded_at is None:
            return None
        return self._clock() - loaded_at

    def is_stale(self) -> bool:
        age = self.age()
        return age is None or age > self.max_age

    def clear(self) -> None:
        """Drop all cached data (process shutdown)."""
        with self._lock:
            self._snapshot = CacheSnapshot()
