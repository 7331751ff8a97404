"""Tests for export encoders."""
import csv
import io

import pytest

from exceptions import EncodingFailure
from models import ExportFormat
from routers.utils.export_encoders import (
    CsvExportEncoder,
    TxtExportEncoder,
    get_encoder,
)

COLUMNS = ["Date", "Tag", "Description"]


class TestCsvExportEncoder:
    """Tests for CSV encoding."""

    def test_header_only_for_empty_rows(self):
        assert CsvExportEncoder().encode([], COLUMNS) == "Date,Tag,Description\n"

    def test_rows_follow_column_order_and_missing_values_are_empty(self):
        rows = [{"Tag": "Travel", "Date": "2024-01-01"}]

        output = CsvExportEncoder().encode(rows, COLUMNS)

        assert output == "Date,Tag,Description\n2024-01-01,Travel,\n"

    def test_special_characters_are_escaped(self):
        rows = [{"Date": "2024-01-01", "Tag": 'a,"b"', "Description": "line1\nline2"}]

        output = CsvExportEncoder().encode(rows, COLUMNS)

        assert output == 'Date,Tag,Description\n2024-01-01,"a,""b""","line1\nline2"\n'

    def test_output_parses_back_to_same_values(self):
        rows = [
            {"Date": "2024-01-01", "Tag": "x, y", "Description": 'she said "ok"\r\nthen left'},
            {"Date": "2024-01-02", "Tag": "plain", "Description": None},
        ]

        parsed = list(csv.reader(io.StringIO(CsvExportEncoder().encode(rows, COLUMNS), newline="")))

        assert parsed[0] == COLUMNS
        assert parsed[1] == ["2024-01-01", "x, y", 'she said "ok"\r\nthen left']
        assert parsed[2] == ["2024-01-02", "plain", ""]

    def test_numbers_are_written_as_text(self):
        output = CsvExportEncoder().encode([{"Date": "2024-01-05", "Tag": 4, "Description": 2.5}], COLUMNS)

        assert output.splitlines()[1] == "2024-01-05,4,2.5"

    def test_encoding_is_deterministic(self):
        rows = [{"Date": "2024-01-01", "Tag": "Travel", "Description": "trip"}]
        encoder = CsvExportEncoder()

        assert encoder.encode(rows, COLUMNS) == encoder.encode(rows, COLUMNS)

    def test_unknown_column_raises_encoding_failure(self):
        with pytest.raises(EncodingFailure):
            CsvExportEncoder().encode([{"Date": "2024-01-01", "Mood": "low"}], COLUMNS)

    def test_non_scalar_value_raises_encoding_failure(self):
        with pytest.raises(EncodingFailure) as exc_info:
            CsvExportEncoder().encode([{"Date": "2024-01-01", "Tag": ["a", "b"]}], COLUMNS)

        assert exc_info.value.to_error_string().startswith("EncodingFailure: ")


class TestTxtExportEncoder:
    """Tests for readable text encoding."""

    def test_groups_rows_by_date(self):
        rows = [
            {"Date": "2024-01-01", "Tag": "Travel", "Description": "trip"},
            {"Date": "2024-01-01", "Tag": "Stress"},
            {"Date": "2024-01-02", "Tag": "Travel", "Description": "trip"},
        ]

        output = TxtExportEncoder().encode(rows, COLUMNS)
        lines = output.splitlines()

        assert "Total Rows: 3" in lines
        assert lines.count("Date: 2024-01-01") == 1
        assert lines.count("Date: 2024-01-02") == 1
        assert "  Tag: Stress" in lines
        assert "  Description: " not in lines
        assert output.endswith("\n")

    def test_empty_export_has_header(self):
        output = TxtExportEncoder().encode([], COLUMNS)

        assert "Symptom Log Export" in output
        assert "Total Rows: 0" in output

    def test_encoding_is_deterministic(self):
        rows = [{"Date": "2024-01-01", "Tag": "Travel"}]
        encoder = TxtExportEncoder()

        assert encoder.encode(rows, COLUMNS) == encoder.encode(rows, COLUMNS)


class TestGetEncoder:
    """Tests for encoder selection."""

    def test_selects_encoder_by_format(self):
        assert get_encoder(ExportFormat.CSV).extension == "csv"
        assert get_encoder(ExportFormat.TXT).extension == "txt"
        assert get_encoder("txt").mime_type == "text/plain"

    def test_unknown_format_raises_encoding_failure(self):
        with pytest.raises(EncodingFailure):
            get_encoder("xml")
