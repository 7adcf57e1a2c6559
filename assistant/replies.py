"""
Fixed-text replies that never go through the summariser.

- Recall answers are a plain listing of matching document names.
- Queries with no matching data get a rephrasing hint instead of an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from models import RecallDescriptor

PRICING_HINT = (
    "Try searching with: brand + model + service type\n"
    'Example: "MG HS major service" or "Citroen C3 interim service"'
)


def _bullets(recalls: Sequence["RecallDescriptor"]) -> str:
    return "\n".join(f"• {r.name}" for r in recalls)


def no_pricing_reply(query: str) -> str:
    return f'No pricing data found for "{query}".\n\n{PRICING_HINT}'


def recall_reply(matches: Sequence["RecallDescriptor"]) -> str:
    return (
        "RECALL INFORMATION\n\n"
        f"Found {len(matches)} relevant document(s):\n\n"
        f"{_bullets(matches)}\n\n"
        "Please open the PDF from Google Drive for full details."
    )


def no_recall_reply(query: str, available: Sequence["RecallDescriptor"]) -> str:
    reply = f'No matching recall documents found for "{query}".'
    if available:
        reply += f"\n\nAvailable recalls:\n{_bullets(available)}"
    return reply
