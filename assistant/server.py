"""
Vehicle service assistant FastAPI server.

Endpoints
---------
GET  /health        — liveness + cache counts
GET  /api/status    — cache readiness and age
POST /api/reload    — force a reload of pricing sheets and recall listing
POST /api/query     — {"query": "..."} → {"answer": "..."}

Run
---
    uvicorn assistant.server:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager, suppress
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv

# Load .env before any other local imports so all env vars are available.
load_dotenv()

# Ensure repo root is importable (config.py, sources.py, etc.).
_REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import config  # noqa: E402
from fastapi import Depends, FastAPI, Request  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import JSONResponse  # noqa: E402
from pydantic import BaseModel  # noqa: E402
from sources import FetchError  # noqa: E402

from assistant.llm import SummarizerError  # noqa: E402
from assistant.query_handler import QueryService  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


async def _refresh_loop(service: QueryService) -> None:
    """Re-check staleness every REFRESH_CHECK_INTERVAL_SECONDS; failures are only logged."""
    while True:
        await asyncio.sleep(config.REFRESH_CHECK_INTERVAL_SECONDS)
        try:
            await asyncio.to_thread(service.refresh_if_stale)
        except Exception as exc:  # noqa: BLE001
            logger.error("Auto-refresh failed: %s", exc)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Service assistant starting…")

    service = QueryService.from_config()
    app.state.service = service

    try:
        await asyncio.to_thread(service.reload)
        logger.info("Initial data load complete")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Failed to load initial data: %s", exc)

    refresh_task = asyncio.create_task(_refresh_loop(service))

    yield  # ← server runs here

    refresh_task.cancel()
    with suppress(asyncio.CancelledError):
        await refresh_task
    service.close()
    logger.info("Service assistant stopped")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Vehicle Service Assistant API",
    description="Service pricing and recall lookup for call centre operators",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS — restrict origins in production via CORS_ORIGINS env var.
_cors_origins_raw = os.environ.get("CORS_ORIGINS", "*")
_cors_origins = [o.strip() for o in _cors_origins_raw.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def get_service(request: Request) -> QueryService:
    return request.app.state.service


# ---------------------------------------------------------------------------
# Request models / helpers
# ---------------------------------------------------------------------------


class QueryRequest(BaseModel):
    query: Optional[str] = None


def _iso(ts: Optional[float]) -> Optional[str]:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def _error(status_code: int, message: str, kind: Optional[str] = None) -> JSONResponse:
    content = {"error": message}
    if kind is not None:
        content["type"] = kind
    return JSONResponse(content=content, status_code=status_code)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


@app.get("/health")
async def health(service: QueryService = Depends(get_service)):
    snapshot = service.store.snapshot
    return {
        "status": "ok",
        "data_loaded": snapshot.loaded,
        "pricing_records": len(snapshot.pricing),
        "recall_documents": len(snapshot.recalls),
        "last_loaded": _iso(snapshot.loaded_at),
    }


@app.get("/api/status")
async def status(service: QueryService = Depends(get_service)):
    snapshot = service.store.snapshot
    age = service.store.age()
    return {
        "ready": len(snapshot.pricing) > 0,
        "pricing_records": len(snapshot.pricing),
        "recall_documents": len(snapshot.recalls),
        "last_loaded": _iso(snapshot.loaded_at),
        "cache_age_seconds": round(age, 1) if age is not None else None,
        "refresh_in_progress": service.refresher.in_progress,
    }


@app.post("/api/reload")
async def reload(service: QueryService = Depends(get_service)):
    try:
        snapshot = await asyncio.to_thread(service.reload)
    except FetchError as exc:
        return _error(500, str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.error("Reload error: %s", exc)
        return _error(500, str(exc), type(exc).__name__)
    return {
        "success": True,
        "pricing_records": len(snapshot.pricing),
        "recall_documents": len(snapshot.recalls),
    }


@app.post("/api/query")
async def query_endpoint(body: QueryRequest, service: QueryService = Depends(get_service)):
    """
    Answer one operator query.

    Pricing questions are summarised by the LLM from the best-matching rows;
    questions mentioning "recall" list the matching recall PDFs.
    """
    if not body.query or not body.query.strip():
        return _error(400, "Query is required")

    try:
        answer = await asyncio.to_thread(service.answer, body.query)
    except SummarizerError as exc:
        logger.error("Query error: %s", exc)
        return _error(500, str(exc), exc.kind)
    except FetchError as exc:
        logger.error("Query error: %s", exc)
        return _error(500, str(exc), "fetch_failure")
    except Exception as exc:  # noqa: BLE001
        logger.error("Query error: %s", exc)
        return _error(500, str(exc), type(exc).__name__)

    return {"answer": answer}
