"""Central configuration: data source ids, cache windows, search tuning, Google clients."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _csv_env(name: str) -> list[str]:
    return [part.strip() for part in os.getenv(name, "").split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Data sources
# ---------------------------------------------------------------------------

GOOGLE_CREDENTIALS_PATH: str = os.getenv(
    "GOOGLE_CREDENTIALS_PATH", "credentials/google_service_account.json"
)

# Comma separated; SHEET1_ID / SHEET2_ID kept for older deployments.
PRICING_SHEET_IDS: list[str] = _csv_env("PRICING_SHEET_IDS") or [
    sid for sid in (os.getenv("SHEET1_ID", ""), os.getenv("SHEET2_ID", "")) if sid
]

# Optional A1 ranges (e.g. "Petrol!A1:Z200"). Empty → every worksheet is read.
PRICING_RANGES: list[str] = _csv_env("PRICING_RANGES")

RECALL_FOLDER_ID: str = os.getenv("RECALL_FOLDER_ID", os.getenv("DRIVE_FOLDER_ID", ""))

DRIVE_FILES_URL: str = "https://www.googleapis.com/drive/v3/files"

# ---------------------------------------------------------------------------
# Cache config
# ---------------------------------------------------------------------------

CACHE_DURATION_SECONDS: int = int(os.getenv("CACHE_DURATION_SECONDS", "3600"))
REFRESH_CHECK_INTERVAL_SECONDS: int = int(os.getenv("REFRESH_CHECK_INTERVAL_SECONDS", "300"))

RESPONSE_CACHE_TTL_SECONDS: int = int(os.getenv("RESPONSE_CACHE_TTL_SECONDS", "3600"))
RESPONSE_CACHE_MAX_ENTRIES: int = int(os.getenv("RESPONSE_CACHE_MAX_ENTRIES", "100"))

# ---------------------------------------------------------------------------
# Parsing / search config
# ---------------------------------------------------------------------------

HEADER_SCAN_ROWS: int = 5
HEADER_KEYWORDS: tuple[str, ...] = ("model", "engine")

SEARCH_TOP_K: int = int(os.getenv("SEARCH_TOP_K", "5"))
MIN_TOKEN_LENGTH: int = 3
MIN_MATCH_SCORE: int = 2

# ---------------------------------------------------------------------------
# Summariser config
# ---------------------------------------------------------------------------

HF_MODEL: str = os.getenv("HF_MODEL", "meta-llama/Llama-3.1-8B-Instruct")
SUMMARY_MAX_TOKENS: int = int(os.getenv("SUMMARY_MAX_TOKENS", "1500"))

# ---------------------------------------------------------------------------
# Google clients
# ---------------------------------------------------------------------------

_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]


@lru_cache(maxsize=1)
def get_credentials():
    """Load the service-account credentials once per process."""
    from google.oauth2.service_account import Credentials

    return Credentials.from_service_account_file(GOOGLE_CREDENTIALS_PATH, scopes=_SCOPES)


@lru_cache(maxsize=1)
def get_sheets_client():
    """Return a cached gspread client authorised via service account."""
    import gspread

    client = gspread.authorize(get_credentials())
    logger.info("Google Sheets client initialised")
    return client


@lru_cache(maxsize=1)
def get_drive_session():
    """Return a cached authorised HTTP session for Drive REST calls."""
    from google.auth.transport.requests import AuthorizedSession

    session = AuthorizedSession(get_credentials())
    logger.info("Google Drive session initialised")
    return session
