"""Fetchers for the two upstream data sources: Google Sheets pricing and the Drive recall folder."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import GSpreadException

import config
from parsing import ranges_from_batch

logger = logging.getLogger(__name__)

# OSError covers a missing credentials file as well as socket errors.
_TRANSPORT_ERRORS = (GSpreadException, GoogleAuthError, requests.RequestException, OSError)


class FetchError(RuntimeError):
    """An upstream source answered with an error or could not be reached."""


def fetch_pricing_ranges(sheet_id: str, ranges: Optional[list[str]] = None) -> list[list[list[Any]]]:
    """
    Read one pricing spreadsheet as a list of ranges (rows of cell strings).

    With *ranges* (A1 notation) a single batch read is made; otherwise every
    worksheet is read in tab order.
    """
    ranges = config.PRICING_RANGES if ranges is None else ranges
    try:
        spreadsheet = config.get_sheets_client().open_by_key(sheet_id)
        if ranges:
            return ranges_from_batch(spreadsheet.values_batch_get(ranges))
        return [ws.get_all_values() for ws in spreadsheet.worksheets()]
    except _TRANSPORT_ERRORS as exc:
        raise FetchError(f"Failed to load sheet {sheet_id}: {exc}") from exc


def fetch_recall_files(folder_id: str) -> list[dict]:
    """List the files in the recall folder (id, name, mimeType), following pagination."""
    params = {
        "q": f"'{folder_id}' in parents and trashed = false",
        "fields": "nextPageToken, files(id, name, mimeType)",
        "pageSize": 1000,
    }
    files: list[dict] = []
    try:
        session = config.get_drive_session()
        while True:
            resp = session.get(config.DRIVE_FILES_URL, params=params, timeout=30)
            resp.raise_for_status()
            body = resp.json()
            files.extend(body.get("files") or [])
            token = body.get("nextPageToken")
            if not token:
                break
            params["pageToken"] = token
    except _TRANSPORT_ERRORS as exc:
        raise FetchError(f"Failed to load Drive files: {exc}") from exc

    logger.debug("Drive folder %s listed %d file(s)", folder_id, len(files))
    return files
