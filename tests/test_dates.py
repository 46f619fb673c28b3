"""
Tests for certificate date parsing and canonicalization.
"""

from datetime import date, datetime

import pytest

from certverify.certificates.dates import (
    display_date,
    normalize_date,
    parse_date,
    serial_to_date,
)


@pytest.mark.unit
class TestParseDate:
    """Tests for parse_date across every accepted representation."""

    def test_day_first_text(self):
        assert parse_date("15-12-2024") == date(2024, 12, 15)

    def test_year_first_text(self):
        assert parse_date("2024-12-15") == date(2024, 12, 15)

    def test_full_iso_timestamp(self):
        assert parse_date("2024-12-15T00:00:00.000Z") == date(2024, 12, 15)

    def test_both_textual_forms_are_equivalent(self):
        assert parse_date("15-12-2024") == parse_date("2024-12-15")

    def test_slash_separated_text_is_day_first(self):
        assert parse_date("05/01/2024") == date(2024, 1, 5)

    def test_spreadsheet_serial(self):
        assert parse_date(45641) == date(2024, 12, 15)

    def test_fractional_serial_keeps_the_day(self):
        assert parse_date(45641.75) == date(2024, 12, 15)

    def test_native_values(self):
        assert parse_date(date(2024, 1, 2)) == date(2024, 1, 2)
        assert parse_date(datetime(2024, 1, 2, 23, 59)) == date(2024, 1, 2)

    def test_impossible_day_first_date(self):
        assert parse_date("31-02-2024") is None

    @pytest.mark.parametrize("value", [None, "", "   ", "banana", True, [], {}])
    def test_unparseable_values(self, value):
        assert parse_date(value) is None


@pytest.mark.unit
class TestSerialToDate:
    def test_unix_epoch(self):
        assert serial_to_date(25569) == date(1970, 1, 1)

    def test_overflow_returns_none(self):
        assert serial_to_date(10**12) is None


@pytest.mark.unit
class TestNormalizeDate:
    """Tests for the canonical DD-MM-YYYY storage form."""

    def test_year_first_is_rewritten(self):
        assert normalize_date("2024-12-15") == "15-12-2024"

    def test_day_first_is_kept(self):
        assert normalize_date(" 15-12-2024 ") == "15-12-2024"

    def test_serial_is_rewritten(self):
        assert normalize_date(45641) == "15-12-2024"

    def test_datetime_is_rewritten(self):
        assert normalize_date(datetime(2025, 1, 15, 10, 30)) == "15-01-2025"

    def test_empty_becomes_none(self):
        assert normalize_date("") is None
        assert normalize_date(None) is None

    def test_unparseable_is_passed_through(self):
        assert normalize_date("banana") == "banana"


@pytest.mark.unit
class TestDisplayDate:
    def test_legacy_iso_value(self):
        assert display_date("2024-12-15") == "15-12-2024"

    def test_missing_value(self):
        assert display_date(None) == ""

    def test_garbage_is_echoed(self):
        assert display_date("someday") == "someday"
