"""
parsing.py — Raw sheet ranges and Drive listings → normalised cache records.

Pricing sheets are maintained by hand, so layouts drift: title rows above
the header, ragged rows, blank cells. The parser sniffs for the header row
instead of assuming row 0.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

import config
from models import PricingRecord, RecallDescriptor

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

Row = Sequence[Any]
Range = Sequence[Row]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


# ---------------------------------------------------------------------------
# Pricing ranges
# ---------------------------------------------------------------------------


def find_header_row(rows: Range) -> Optional[int]:
    """Index of the first of the leading rows that looks like column labels."""
    for i, row in enumerate(rows[: config.HEADER_SCAN_ROWS]):
        text = "|".join(_cell(c) for c in row).lower()
        if any(keyword in text for keyword in config.HEADER_KEYWORDS):
            return i
    return None


def _row_fields(header: list[str], row: Row) -> dict[str, str]:
    fields: dict[str, str] = {}
    for name, raw in zip(header, row):
        value = _cell(raw)
        if name and value:
            fields[name] = value
    return fields


def parse_range(rows: Range) -> list[PricingRecord]:
    header_index = find_header_row(rows)
    if header_index is None:
        logger.debug("No header row in first %d rows — range skipped", config.HEADER_SCAN_ROWS)
        return []

    header = [_cell(c) for c in rows[header_index]]
    records: list[PricingRecord] = []
    for row in rows[header_index + 1:]:
        record = PricingRecord.from_fields(_row_fields(header, row))
        if record is not None:
            records.append(record)
    return records


def parse_pricing_ranges(ranges: Iterable[Range]) -> list[PricingRecord]:
    """
    Flatten every range into one ordered list of PricingRecord.

    Rows without a Model value are dropped. Records are not deduplicated
    across ranges or sheets.
    """
    records: list[PricingRecord] = []
    for rows in ranges:
        records.extend(parse_range(rows or []))
    return records


def ranges_from_batch(response: Mapping[str, Any]) -> list[list[list[Any]]]:
    """Unpack a Sheets ``values:batchGet`` response. Empty ranges have no ``values`` key."""
    return [list(vr.get("values") or []) for vr in response.get("valueRanges") or []]


# ---------------------------------------------------------------------------
# Recall listing
# ---------------------------------------------------------------------------


def list_recalls(files: Iterable[Mapping[str, Any]]) -> list[RecallDescriptor]:
    """Keep PDFs only, judged by declared MIME type rather than file name."""
    recalls: list[RecallDescriptor] = []
    for f in files:
        name = _cell(f.get("name"))
        if name and f.get("mimeType") == PDF_MIME_TYPE:
            recalls.append(RecallDescriptor(name=name))
    return recalls
