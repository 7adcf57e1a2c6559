"""
sync.py — Google Sheets + Drive → in-memory cache refresh.

Flow:
1. Skip immediately if another refresh holds the guard
2. Read every configured pricing sheet (sequentially, one at a time)
3. List the recall folder on Drive
4. Parse sheet ranges into PricingRecords, listing into RecallDescriptors
5. Swap the new snapshot into the CacheStore in one step

Any fetch failure aborts the whole refresh and leaves the previous snapshot
in place.

Usage:
    python sync.py              # one refresh, log counts
    python sync.py --show 10    # also print the first 10 parsed records
"""

from __future__ import annotations

import argparse
import json
import logging
import threading
from typing import Any, Callable, Optional, Sequence

import config
import sources
from models import CacheSnapshot
from parsing import list_recalls, parse_pricing_ranges
from store import CacheStore

logger = logging.getLogger(__name__)

FetchRanges = Callable[[str], list]
FetchFiles = Callable[[str], list[dict[str, Any]]]


class Refresher:
    """Loads both sources into a CacheStore; at most one load runs at a time."""

    def __init__(
        self,
        store: CacheStore,
        sheet_ids: Optional[Sequence[str]] = None,
        folder_id: Optional[str] = None,
        fetch_ranges: FetchRanges = sources.fetch_pricing_ranges,
        fetch_files: FetchFiles = sources.fetch_recall_files,
    ) -> None:
        self.store = store
        self.sheet_ids = list(config.PRICING_SHEET_IDS if sheet_ids is None else sheet_ids)
        self.folder_id = config.RECALL_FOLDER_ID if folder_id is None else folder_id
        self._fetch_ranges = fetch_ranges
        self._fetch_files = fetch_files
        self._guard = threading.Lock()

    @property
    def in_progress(self) -> bool:
        return self._guard.locked()

    def needs_refresh(self) -> bool:
        return self.store.is_stale()

    def refresh(self) -> bool:
        """
        Reload the cache.

        Returns False without doing anything if a refresh is already running.
        Raises sources.FetchError if any source fails; the store is untouched.
        """
        if not self._guard.acquire(blocking=False):
            logger.info("Refresh already in progress — skipping")
            return False

        try:
            logger.info("Loading data into cache…")
            ranges: list = []
            for sheet_id in self.sheet_ids:
                ranges.extend(self._fetch_ranges(sheet_id))
            files = self._fetch_files(self.folder_id)

            snapshot = self.store.replace(parse_pricing_ranges(ranges), list_recalls(files))
            logger.info(
                "Cached %d pricing records and %d recalls",
                len(snapshot.pricing),
                len(snapshot.recalls),
            )
            return True
        except sources.FetchError as exc:
            logger.error("Error loading data: %s", exc)
            raise
        finally:
            self._guard.release()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _print_snapshot(snapshot: CacheSnapshot, show: int) -> None:
    for record in snapshot.pricing[:show]:
        print(json.dumps(record.to_dict(), ensure_ascii=False))
    for recall in snapshot.recalls[:show]:
        print(f"recall: {recall.name}")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s  %(message)s")
    parser = argparse.ArgumentParser(description="Load pricing sheets and recall listing once")
    parser.add_argument("--show", type=int, default=0, help="Print the first N parsed records")
    args = parser.parse_args()

    store = CacheStore()
    Refresher(store).refresh()
    if args.show:
        _print_snapshot(store.snapshot, args.show)


if __name__ == "__main__":
    main()
