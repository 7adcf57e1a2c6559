"""
Query handler — the main orchestration pipeline.

For each operator query:
  1. Serve a cached answer if one is still fresh.
  2. Refresh the data cache if it has gone stale.
  3. Route: queries mentioning "recall" list matching recall documents,
     everything else is a pricing query.
  4. Pricing: keyword search, then summarise the top matches with the LLM.
  5. Store the answer in the response cache.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Sequence

# Ensure the repo root is importable so we can reach the flat modules
# (config.py, search.py, store.py, sync.py).
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import config  # noqa: E402
from models import CacheSnapshot, PricingRecord  # noqa: E402
from search import search_pricing, search_recalls  # noqa: E402
from store import CacheStore  # noqa: E402
from sync import Refresher  # noqa: E402

from assistant import replies  # noqa: E402
from assistant.llm import summarize_pricing  # noqa: E402
from assistant.response_cache import ResponseCache  # noqa: E402

logger = logging.getLogger(__name__)

Summarizer = Callable[[str, Sequence[PricingRecord]], str]


def is_recall_query(query: str) -> bool:
    return "recall" in query.lower()


class QueryService:
    """Owns the data cache, its refresher and the answer cache for one process."""

    def __init__(
        self,
        store: CacheStore,
        refresher: Refresher,
        response_cache: ResponseCache,
        summarize: Summarizer = summarize_pricing,
        top_k: int = config.SEARCH_TOP_K,
    ) -> None:
        self.store = store
        self.refresher = refresher
        self.response_cache = response_cache
        self._summarize = summarize
        self.top_k = top_k

    @classmethod
    def from_config(cls) -> "QueryService":
        store = CacheStore()
        return cls(store, Refresher(store), ResponseCache())

    # ------------------------------------------------------------------
    # Cache lifecycle
    # ------------------------------------------------------------------

    def _refresh(self) -> bool:
        refreshed = self.refresher.refresh()
        if refreshed:
            n = self.response_cache.clear()
            if n:
                logger.info("Dropped %d cached answer(s) after refresh", n)
        return refreshed

    def reload(self) -> CacheSnapshot:
        """Force a refresh. Raises sources.FetchError on failure."""
        self._refresh()
        return self.store.snapshot

    def refresh_if_stale(self) -> bool:
        if not self.refresher.needs_refresh():
            return False
        logger.info("Auto-refreshing cache…")
        return self._refresh()

    def close(self) -> None:
        self.response_cache.clear()
        self.store.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def answer(self, query: str) -> str:
        """
        Answer one operator query.

        Raises:
            ValueError: *query* is blank.
            sources.FetchError: a needed refresh failed.
            assistant.llm.SummarizerError: the LLM call failed.
        """
        query = query.strip()
        if not query:
            raise ValueError("Query is required")

        cached = self.response_cache.get(query)
        if cached is not None:
            logger.info("Answer cache hit for %r", query)
            return cached

        if self.refresher.needs_refresh():
            logger.info("Cache expired, refreshing…")
            self._refresh()

        snapshot = self.store.snapshot
        if is_recall_query(query):
            answer = self._answer_recall(query, snapshot)
        else:
            answer = self._answer_pricing(query, snapshot)

        # Answers built from a snapshot that has since been replaced are not cached.
        if self.store.snapshot is snapshot:
            self.response_cache.put(query, answer)
        return answer

    def _answer_recall(self, query: str, snapshot: CacheSnapshot) -> str:
        matches = search_recalls(query, snapshot.recalls)
        logger.info("Recall query %r matched %d document(s)", query, len(matches))
        if not matches:
            return replies.no_recall_reply(query, snapshot.recalls)
        return replies.recall_reply(matches)

    def _answer_pricing(self, query: str, snapshot: CacheSnapshot) -> str:
        records = search_pricing(query, snapshot.pricing, top_k=self.top_k)
        logger.info("Pricing query %r matched %d record(s)", query, len(records))
        if not records:
            return replies.no_pricing_reply(query)
        return self._summarize(query, records)
