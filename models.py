"""Dataclasses for the vehicle service assistant."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

_TIME_HEADER_RE = re.compile(r"^\d+\s*(?:years?|yrs?)$", re.IGNORECASE)
_MILEAGE_HEADER_RE = re.compile(
    r"^(?:\d{1,3}(?:,\d{3})+|\d{4,}|\d+\s*k)(?:\s*miles?)?$", re.IGNORECASE
)
_SERVICE_HEADER_RE = re.compile(
    r"\b(?:service|interim|main|major|minor|full)\b", re.IGNORECASE
)
_BRAND_HEADERS = {"brand", "make", "manufacturer"}


@dataclass(frozen=True)
class PricingRecord:
    """One priced vehicle row, split into column families.

    Spreadsheets differ in layout, so every family is optional apart from
    ``model``; headers nothing recognises land in ``extra``.
    """

    model: str
    engine: Optional[str] = None
    brand: Optional[str] = None
    brand_header: Optional[str] = None  # sheet label the brand came from ("Make", ...)
    time_prices: dict[str, str] = field(default_factory=dict)      # "1 Year" → "£150"
    mileage_prices: dict[str, str] = field(default_factory=dict)   # "15,000" → "£180"
    service_prices: dict[str, str] = field(default_factory=dict)   # "Interim Service" → "£150"
    extra: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, fields: Mapping[str, str]) -> Optional["PricingRecord"]:
        """Classify a header → value mapping. Returns None when there is no Model."""
        model = None
        identity: dict[str, str] = {}
        families: dict[str, dict[str, str]] = {
            "time_prices": {},
            "mileage_prices": {},
            "service_prices": {},
            "extra": {},
        }

        for header, value in fields.items():
            key = header.strip().lower()
            if key == "model" and model is None:
                model = value
            elif key == "engine" and "engine" not in identity:
                identity["engine"] = value
            elif key in _BRAND_HEADERS and "brand" not in identity:
                identity["brand"] = value
                identity["brand_header"] = header.strip()
            elif key in _BRAND_HEADERS or key in ("model", "engine"):
                # Second Make/Manufacturer-style column: keep it under its own label.
                families["extra"][header] = value
            elif _TIME_HEADER_RE.match(key):
                families["time_prices"][header] = value
            elif _MILEAGE_HEADER_RE.match(key):
                families["mileage_prices"][header] = value
            elif _SERVICE_HEADER_RE.search(key):
                families["service_prices"][header] = value
            else:
                families["extra"][header] = value

        if not model:
            return None
        return cls(model=model, **identity, **families)

    def to_dict(self) -> dict[str, str]:
        """Flatten back into a header → value mapping (absent fields omitted)."""
        out: dict[str, str] = {}
        if self.brand:
            out[self.brand_header or "Brand"] = self.brand
        out["Model"] = self.model
        if self.engine:
            out["Engine"] = self.engine
        out.update(self.time_prices)
        out.update(self.mileage_prices)
        out.update(self.service_prices)
        out.update(self.extra)
        return out


@dataclass(frozen=True)
class RecallDescriptor:
    name: str


@dataclass
class ScoredMatch:
    record: PricingRecord
    score: int


@dataclass(frozen=True)
class CacheSnapshot:
    """Everything one refresh produced. Replaced whole, never mutated."""

    pricing: tuple[PricingRecord, ...] = ()
    recalls: tuple[RecallDescriptor, ...] = ()
    loaded_at: Optional[float] = None  # epoch seconds; None = never loaded

    @property
    def loaded(self) -> bool:
        return self.loaded_at is not None
