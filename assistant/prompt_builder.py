"""
Builds the messages list for the pricing summariser:

  1. System prompt  — call-centre assistant role + answer format
  2. User message   — the operator's query plus the matched pricing rows
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from models import PricingRecord

# ---------------------------------------------------------------------------
# System prompt
# ---------------------------------------------------------------------------

SYSTEM_PROMPT = """\
You are a call centre assistant helping operators find vehicle service pricing.

INSTRUCTIONS:
1. Identify the vehicle model, engine type, and any age/mileage mentioned.
2. If age and mileage are mentioned, provide BOTH service options:
   - TIME-BASED: annual service by years (from columns such as "1 Year", "2 Years")
   - MILEAGE-BASED: standard service by mileage (from columns such as "15,000", "30,000")
3. Explain which interval the vehicle is closest to and why.
4. Present prices clearly with service type names.
5. If multiple service types exist (Interim/Main/Major), explain briefly.
6. ONLY use prices present in the data. NEVER invent a price.

FORMAT YOUR RESPONSE LIKE THIS:

VEHICLE: [Model and Engine]

TIME-BASED SERVICE OPTIONS:
  • [X] year service: £[price] [← CLOSEST if applicable]

MILEAGE-BASED SERVICE OPTIONS:
  • [X],000 mile service: £[price] [← CLOSEST if applicable]

RECOMMENDATION:
[1-2 sentences on which to choose for the given age/mileage]

Be concise, professional, and always cite specific prices from the data.\
"""


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def format_records(records: Sequence["PricingRecord"]) -> str:
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False)


def build_messages(query: str, records: Sequence["PricingRecord"]) -> list[dict]:
    """
    Return the complete messages list ready to send to the model.

    Structure:
        [system: SYSTEM_PROMPT]
        [user: CUSTOMER QUERY + RELEVANT PRICING DATA]
    """
    user_content = (
        f'CUSTOMER QUERY: "{query}"\n\n'
        f"RELEVANT PRICING DATA ({len(records)} records found):\n"
        f"{format_records(records)}"
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]
