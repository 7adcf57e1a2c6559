"""
HuggingFace Inference Provider client for the pricing summariser.

Uses huggingface_hub.InferenceClient with the OpenAI-compatible chat-completions
API, non-streaming: the HTTP reply carries the whole answer.

Key design decisions:
- One fresh InferenceClient per call (lightweight, avoids stale state).
- Output capped at SUMMARY_MAX_TOKENS.
- No retries; a failed call fails the query and the caller may re-ask.
- HF_PROVIDER env var is optional; empty string → auto-routing.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Sequence

from huggingface_hub import InferenceClient

import config
from assistant.prompt_builder import build_messages

if TYPE_CHECKING:
    from models import PricingRecord

logger = logging.getLogger(__name__)


class SummarizerError(RuntimeError):
    """The summariser call failed. ``kind`` is a short machine-readable class."""

    def __init__(self, message: str, kind: str = "unknown") -> None:
        super().__init__(message)
        self.kind = kind


def _make_client() -> InferenceClient:
    token = os.environ.get("HF_TOKEN")
    provider = os.environ.get("HF_PROVIDER") or None  # "" → None → auto-route
    return InferenceClient(api_key=token, provider=provider)


def _classify(exc: Exception) -> str:
    resp = getattr(exc, "response", None)
    status = getattr(resp, "status_code", 0) if resp is not None else 0
    if status:
        return f"http_{status}"
    return type(exc).__name__


def summarize_pricing(query: str, records: Sequence["PricingRecord"]) -> str:
    """Ask the model to turn *records* into an operator-facing answer to *query*."""
    messages = build_messages(query, records)
    try:
        completion = _make_client().chat.completions.create(
            model=config.HF_MODEL,
            messages=messages,
            max_tokens=config.SUMMARY_MAX_TOKENS,
            temperature=0.3,
        )
    except Exception as exc:
        logger.error("HuggingFace API error: %s", exc)
        raise SummarizerError(str(exc), kind=_classify(exc)) from exc

    content = completion.choices[0].message.content if completion.choices else None
    if not content:
        raise SummarizerError("Summariser returned an empty response", kind="empty_response")
    return content
