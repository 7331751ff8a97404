"""Tests for tag name and date helpers."""
from datetime import date, datetime

import pytest

from utils.date_utils import month_date_range, to_iso_date
from utils.tag_utils import (
    format_tags_string,
    normalize_tag_name,
    parse_tags_string,
    validate_tag_name,
)


class TestNormalizeTagName:
    """Tests for normalize_tag_name."""

    def test_strips_and_lowercases(self):
        assert normalize_tag_name("  Flare Day ") == "flare day"

    def test_case_variants_collide(self):
        assert normalize_tag_name("Travel") == normalize_tag_name("TRAVEL ")


class TestValidateTagName:
    """Tests for validate_tag_name."""

    def test_valid_name_has_no_errors(self):
        assert validate_tag_name("Stress day_1 - work") == []

    def test_blank_name_rejected(self):
        errors = validate_tag_name("   ")
        assert len(errors) == 1

    def test_too_long_name_rejected(self):
        assert validate_tag_name("a" * 51)

    def test_fifty_characters_allowed(self):
        assert validate_tag_name("a" * 50) == []

    @pytest.mark.parametrize("name", ["<script>", "a/b", "say \"hi\"", "it's", "x|y"])
    def test_forbidden_characters_rejected(self, name):
        assert validate_tag_name(name)

    def test_other_punctuation_rejected(self):
        assert validate_tag_name("coffee!")


class TestTagsString:
    """Tests for comma separated note tags."""

    def test_parse_ignores_empty_items(self):
        assert parse_tags_string(" spicy, ,late night ,") == ["spicy", "late night"]

    def test_parse_empty_string(self):
        assert parse_tags_string("") == []

    def test_format_joins_with_comma_space(self):
        assert format_tags_string(["spicy", "late night"]) == "spicy, late night"


class TestDateHelpers:
    """Tests for ISO date conversion and month ranges."""

    def test_to_iso_date_accepts_date_datetime_and_string(self):
        assert to_iso_date(date(2024, 1, 5)) == "2024-01-05"
        assert to_iso_date(datetime(2024, 1, 5, 23, 59)) == "2024-01-05"
        assert to_iso_date("2024-01-05") == "2024-01-05"

    def test_to_iso_date_rejects_malformed_string(self):
        with pytest.raises(ValueError):
            to_iso_date("2024/01/05")

    def test_month_range_handles_leap_february(self):
        assert month_date_range(2024, 2) == ("2024-02-01", "2024-02-29")

    def test_month_range_december(self):
        assert month_date_range(2023, 12) == ("2023-12-01", "2023-12-31")
