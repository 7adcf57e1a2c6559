"""Shared pytest fixtures for the service assistant unit tests."""
from __future__ import annotations

import pytest

from models import PricingRecord, RecallDescriptor
from store import CacheStore
from sync import Refresher


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSources:
    """Records fetch calls and serves canned sheet ranges / Drive listings."""

    def __init__(self, sheets: dict, files: list[dict]) -> None:
        self.sheets = sheets
        self.files = files
        self.range_calls: list[str] = []
        self.file_calls: list[str] = []
        self.fail_sheet: str | None = None

    def fetch_ranges(self, sheet_id: str) -> list:
        from sources import FetchError

        self.range_calls.append(sheet_id)
        if sheet_id == self.fail_sheet:
            raise FetchError(f"Failed to load sheet {sheet_id}: 500")
        return self.sheets[sheet_id]

    def fetch_files(self, folder_id: str) -> list[dict]:
        self.file_calls.append(folder_id)
        return self.files


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def petrol_range() -> list[list[str]]:
    return [
        ["MG Service Prices 2024", "", ""],
        ["Model", "Engine", "Interim Service", "Major Service", "1 Year", "15,000"],
        ["MG HS", "1.5T", "£150", "£320", "£199", "£210"],
        ["MG ZS", "1.0T", "£140", "£300"],
        ["", "1.5T", "£999"],
    ]


@pytest.fixture()
def diesel_range() -> list[list[str]]:
    return [
        ["Model", "Engine", "Main Service"],
        ["Citroen C3", "1.2 PureTech", "£175"],
    ]


@pytest.fixture()
def drive_files() -> list[dict]:
    return [
        {"id": "f1", "name": "MG HS Recall 2023.pdf", "mimeType": "application/pdf"},
        {"id": "f2", "name": "Citroen Brake Recall.pdf", "mimeType": "application/pdf"},
        {"id": "f3", "name": "notes.txt", "mimeType": "text/plain"},
    ]


@pytest.fixture()
def fake_sources(petrol_range, diesel_range, drive_files) -> FakeSources:
    return FakeSources({"sheet-1": [petrol_range], "sheet-2": [diesel_range]}, drive_files)


@pytest.fixture()
def store(clock) -> CacheStore:
    return CacheStore(max_age=3600, clock=clock)


@pytest.fixture()
def refresher(store, fake_sources) -> Refresher:
    return Refresher(
        store,
        sheet_ids=["sheet-1", "sheet-2"],
        folder_id="folder-1",
        fetch_ranges=fake_sources.fetch_ranges,
        fetch_files=fake_sources.fetch_files,
    )


@pytest.fixture()
def mg_hs_record() -> PricingRecord:
    return PricingRecord(model="MG HS", engine="1.5T", service_prices={"Interim Service": "£150"})


@pytest.fixture()
def recalls() -> list[RecallDescriptor]:
    return [
        RecallDescriptor(name="MG HS Recall 2023.pdf"),
        RecallDescriptor(name="Citroen Brake Recall.pdf"),
    ]
