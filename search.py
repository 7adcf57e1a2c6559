"""
search.py — Keyword search over the cached pricing records and recall names.

The search is only a pre-filter: it keeps the summariser prompt small by
forwarding at most SEARCH_TOP_K records, and requires at least
MIN_MATCH_SCORE query words to hit before a record qualifies.

Usage (interactive test):
    python search.py "MG HS major service"
    python search.py "recall citroen"
    python search.py            # interactive mode
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Iterable, Sequence

import config
from models import PricingRecord, RecallDescriptor, ScoredMatch

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def tokenize(query: str) -> list[str]:
    """Lower-case whitespace tokens, minus the very short ones ("mg", "3")."""
    return [w for w in query.lower().split() if len(w) >= config.MIN_TOKEN_LENGTH]


def _record_text(record: PricingRecord) -> str:
    # Headers count too: "interim service" should hit an "Interim Service" column.
    return json.dumps(record.to_dict(), ensure_ascii=False).lower()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def rank_pricing(query: str, records: Iterable[PricingRecord]) -> list[ScoredMatch]:
    """
    Score every record by the number of query tokens found in it.

    Returns qualifying matches ordered by descending score; equal scores
    keep cache order.
    """
    words = tokenize(query)
    if not words:
        return []

    matches: list[ScoredMatch] = []
    for record in records:
        text = _record_text(record)
        score = sum(1 for w in words if w in text)
        if score >= config.MIN_MATCH_SCORE:
            matches.append(ScoredMatch(record=record, score=score))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def search_pricing(
    query: str,
    records: Iterable[PricingRecord],
    top_k: int = config.SEARCH_TOP_K,
) -> list[PricingRecord]:
    """Top *top_k* pricing records for *query*."""
    return [m.record for m in rank_pricing(query, records)[:top_k]]


def search_recalls(query: str, recalls: Iterable[RecallDescriptor]) -> list[RecallDescriptor]:
    """Recall documents whose name contains any query token."""
    words = tokenize(query)
    return [r for r in recalls if any(w in r.name.lower() for w in words)]


# ---------------------------------------------------------------------------
# CLI test harness
# ---------------------------------------------------------------------------


def _print_results(query: str, pricing: Sequence[PricingRecord], recalls: Sequence[RecallDescriptor]) -> None:
    if "recall" in query.lower():
        found = search_recalls(query, recalls)
        if not found:
            print("No recall documents matched.")
        for r in found:
            print(f"  • {r.name}")
        return

    matches = rank_pricing(query, pricing)
    if not matches:
        print("No results found.")
        return
    for i, m in enumerate(matches[: config.SEARCH_TOP_K], 1):
        print(f"\n[{i}] score={m.score}")
        for header, value in m.record.to_dict().items():
            print(f"    {header:<20}: {value}")


def main() -> None:
    from store import CacheStore
    from sync import Refresher

    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
    parser = argparse.ArgumentParser(description="Search cached service pricing and recalls")
    parser.add_argument("query", nargs="?", default=None, help="Search query")
    args = parser.parse_args()

    store = CacheStore()
    Refresher(store).refresh()
    snapshot = store.snapshot

    if args.query is None:
        # Interactive mode
        print("Service pricing search  (Ctrl-C to exit)\n")
        while True:
            try:
                query = input("Query> ").strip()
            except (KeyboardInterrupt, EOFError):
                break
            if not query:
                continue
            _print_results(query, snapshot.pricing, snapshot.recalls)
    else:
        _print_results(args.query, snapshot.pricing, snapshot.recalls)


if __name__ == "__main__":
    main()
