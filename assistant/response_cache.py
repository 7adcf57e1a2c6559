"""
In-memory answer cache keyed by normalised query text.

- Entries expire RESPONSE_CACHE_TTL_SECONDS after they were stored (checked lazily on lookup).
- At most RESPONSE_CACHE_MAX_ENTRIES answers are kept; the oldest insert is evicted first.
- Thread-safe with a Lock (FastAPI runs async but sync code runs in threads).
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import config


@dataclass
class _CachedAnswer:
    answer: str
    created_at: float


def normalize_query(query: str) -> str:
    return query.strip().lower()


class ResponseCache:
    """Thread-safe FIFO cache of final answers."""

    def __init__(
        self,
        max_entries: int = config.RESPONSE_CACHE_MAX_ENTRIES,
        ttl: float = config.RESPONSE_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, _CachedAnswer] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, query: str) -> bool:
        with self._lock:
            return normalize_query(query) in self._entries

    def get(self, query: str) -> Optional[str]:
        """Return the cached answer for *query*, or None if missing or expired."""
        key = normalize_query(query)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at > self.ttl:
                del self._entries[key]
                return None
            return entry.answer

    def put(self, query: str, answer: str) -> None:
        """Store *answer*, evicting the oldest entry when full."""
        key = normalize_query(query)
        with self._lock:
            # Re-inserting moves the key to the back of the eviction order.
            self._entries.pop(key, None)
            while len(self._entries) >= self.max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = _CachedAnswer(answer=answer, created_at=self._clock())

    def clear(self) -> int:
        """Drop every entry. Returns count removed."""
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
        return n
