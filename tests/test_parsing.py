"""Tests for parsing.py — header sniffing, record building, recall filtering."""
from __future__ import annotations

from models import RecallDescriptor
from parsing import (
    find_header_row,
    list_recalls,
    parse_pricing_ranges,
    parse_range,
    ranges_from_batch,
)


# ---------------------------------------------------------------------------
# find_header_row
# ---------------------------------------------------------------------------

class TestFindHeaderRow:
    def test_first_row_header(self):
        assert find_header_row([["Model", "Price"], ["MG HS", "£1"]]) == 0

    def test_skips_title_rows(self, petrol_range):
        assert find_header_row(petrol_range) == 1

    def test_engine_keyword_case_insensitive(self):
        rows = [["Prices"], ["ENGINE SIZE", "Cost"]]
        assert find_header_row(rows) == 1

    def test_header_beyond_scan_window_ignored(self):
        rows = [["title"]] * 5 + [["Model", "Engine"], ["MG HS", "1.5T"]]
        assert find_header_row(rows) is None

    def test_empty_range(self):
        assert find_header_row([]) is None


# ---------------------------------------------------------------------------
# parse_range / parse_pricing_ranges
# ---------------------------------------------------------------------------

class TestParseRange:
    def test_builds_records_after_header(self, petrol_range):
        records = parse_range(petrol_range)
        assert [r.model for r in records] == ["MG HS", "MG ZS"]

    def test_rows_without_model_dropped(self, petrol_range):
        records = parse_range(petrol_range)
        assert all(r.model for r in records)
        assert "£999" not in [v for r in records for v in r.to_dict().values()]

    def test_ragged_row_zips_to_shorter(self, petrol_range):
        zs = parse_range(petrol_range)[1]
        assert zs.to_dict() == {
            "Model": "MG ZS",
            "Engine": "1.0T",
            "Interim Service": "£140",
            "Major Service": "£300",
        }

    def test_blank_cells_and_headers_omitted(self):
        rows = [
            ["Model", "", "Interim Service"],
            ["  MG HS ", "orphan value", "   "],
        ]
        (record,) = parse_range(rows)
        assert record.to_dict() == {"Model": "MG HS"}

    def test_non_string_cells_accepted(self):
        rows = [["Model", "Interim Service"], ["MG4", 150], ["MG5", None]]
        records = parse_range(rows)
        assert records[0].service_prices == {"Interim Service": "150"}
        assert records[1].service_prices == {}

    def test_no_header_contributes_nothing(self):
        rows = [["Make", "Price"], ["MG", "£1"], ["Citroen", "£2"]]
        assert parse_range(rows) == []

    def test_model_column_required(self):
        rows = [["Engine", "Interim Service"], ["1.5T", "£150"]]
        assert parse_range(rows) == []


class TestParsePricingRanges:
    def test_concatenates_in_order(self, petrol_range, diesel_range):
        records = parse_pricing_ranges([petrol_range, diesel_range])
        assert [r.model for r in records] == ["MG HS", "MG ZS", "Citroen C3"]

    def test_no_deduplication(self, diesel_range):
        records = parse_pricing_ranges([diesel_range, diesel_range])
        assert len(records) == 2
        assert records[0] == records[1]

    def test_missing_range_treated_as_empty(self, diesel_range):
        assert len(parse_pricing_ranges([None, [], diesel_range])) == 1


class TestRangesFromBatch:
    def test_unpacks_values(self):
        response = {
            "valueRanges": [
                {"range": "Petrol!A1:C2", "values": [["Model"], ["MG HS"]]},
                {"range": "Diesel!A1:C2"},
            ]
        }
        assert ranges_from_batch(response) == [[["Model"], ["MG HS"]], []]

    def test_empty_response(self):
        assert ranges_from_batch({}) == []


# ---------------------------------------------------------------------------
# list_recalls
# ---------------------------------------------------------------------------

class TestListRecalls:
    def test_keeps_pdf_mime_type_only(self, drive_files):
        assert list_recalls(drive_files) == [
            RecallDescriptor(name="MG HS Recall 2023.pdf"),
            RecallDescriptor(name="Citroen Brake Recall.pdf"),
        ]

    def test_pdf_name_without_pdf_mime_type_excluded(self):
        files = [{"id": "1", "name": "scan.pdf", "mimeType": "application/octet-stream"}]
        assert list_recalls(files) == []

    def test_missing_mime_type_excluded(self):
        assert list_recalls([{"id": "1", "name": "scan.pdf"}]) == []

    def test_nameless_file_skipped(self):
        assert list_recalls([{"id": "1", "mimeType": "application/pdf"}]) == []


class TestParseRangeKeepsEveryColumn:
    def test_make_and_manufacturer_both_survive(self):
        rows = [
            ["Make", "Manufacturer", "Model", "Interim Service"],
            ["MG", "SAIC Motor", "MG HS", "£150"],
        ]
        (record,) = parse_range(rows)
        assert sorted(record.to_dict().values()) == sorted(["MG", "SAIC Motor", "MG HS", "£150"])
        assert set(record.to_dict()) == {"Make", "Manufacturer", "Model", "Interim Service"}
