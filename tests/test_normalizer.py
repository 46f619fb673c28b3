"""
Tests for certificate field normalization.

Covers alias resolution, text cleanup, spreadsheet-specific title casing and
the partial-update variant.
"""

import pytest

from certverify.certificates.normalizer import (
    CertificateRecord,
    RecordSource,
    normalize_changes,
    normalize_duration,
    normalize_record,
    resolve_field,
    title_case,
)


SPREADSHEET_ROW = {
    "S. No.": 1,
    "Intern ID": " itid00001 ",
    "Name of the Intern": "john DOE",
    "Domain": " Data Analyst ",
    "Duration (in months)": "3",
    "Start Date": "15-12-2024",
    "End Date": "2025-03-15",
    "Email ID": " John.Doe@Example.COM ",
    "Contact No.": "+91 98765-43210",
    "Mentor Name": "jane SMITH",
    "Mentor Email ID": "JANE@example.com",
    "Mentor Contact No.": "(987) 654-3210",
}


@pytest.mark.unit
class TestNormalizeRecord:
    """Tests for normalize_record."""

    def test_spreadsheet_row(self):
        record = normalize_record(SPREADSHEET_ROW, RecordSource.SPREADSHEET)

        assert record.intern_id == "ITID00001"
        assert record.name == "John Doe"
        assert record.domain == "Data Analyst"
        assert record.duration == 3
        assert record.starting_date == "15-12-2024"
        assert record.completion_date == "15-03-2025"
        assert record.email == "john.doe@example.com"
        assert record.contact_no == "919876543210"
        assert record.status == "active"
        assert record.mentor.name == "Jane Smith"
        assert record.mentor.email == "jane@example.com"
        assert record.mentor.contact_no == "9876543210"

    def test_json_names_are_only_trimmed(self):
        record = normalize_record({"name": "  john DOE "})

        assert record.name == "john DOE"

    def test_canonical_key_wins_over_display_name(self):
        record = normalize_record({"internId": "a1", "Intern ID": "b2"})

        assert record.intern_id == "A1"

    def test_blank_canonical_value_falls_back_to_alias(self):
        record = normalize_record({"internId": "  ", "Intern ID": "b2"})

        assert record.intern_id == "B2"

    def test_case_and_punctuation_insensitive_keys(self):
        record = normalize_record({"INTERN_ID": "x1", "starting date": "2024-01-05"})

        assert record.intern_id == "X1"
        assert record.starting_date == "05-01-2024"

    def test_key_case_normalization(self):
        lower = normalize_record({"internId": "itid00001"})
        upper = normalize_record({"internId": "ITID00001"})

        assert lower.intern_id == upper.intern_id == "ITID00001"

    def test_both_date_formats_normalize_identically(self):
        first = normalize_record({"startingDate": "15-12-2024"})
        second = normalize_record({"startingDate": "2024-12-15"})

        assert first.starting_date == second.starting_date == "15-12-2024"

    def test_unparseable_date_is_kept_for_validation(self):
        record = normalize_record({"completionDate": "banana-split"})

        assert record.completion_date == "banana-split"

    def test_missing_fields_stay_empty(self):
        record = normalize_record({"internId": "X1"})

        assert record.name == ""
        assert record.domain == ""
        assert record.duration is None
        assert record.starting_date is None
        assert record.email is None
        assert record.mentor is None

    def test_status_is_lowercased(self):
        assert normalize_record({"status": " Revoked "}).status == "revoked"

    def test_nested_mentor(self):
        record = normalize_record(
            {"mentor": {"name": "a b", "email": "X@Y.com", "contactNo": "12-34"}}
        )

        assert record.mentor.to_dict() == {
            "name": "a b",
            "email": "x@y.com",
            "contactNo": "1234",
        }

    def test_numeric_intern_id_from_spreadsheet(self):
        record = normalize_record({"Intern ID": 1001.0}, RecordSource.SPREADSHEET)

        assert record.intern_id == "1001"

    @pytest.mark.parametrize("raw", [None, "ITID00001", 42, ["internId"]])
    def test_non_mapping_input_gives_empty_record(self, raw):
        assert normalize_record(raw) == CertificateRecord()

    def test_source_keys_are_recorded(self):
        record = normalize_record({"Intern ID": "X1", "extra": 1})

        assert record.source_keys == ("Intern ID", "extra")

    def test_to_dict_uses_public_names(self):
        data = normalize_record({"internId": "x1", "name": "A"}).to_dict()

        assert data["internId"] == "X1"
        assert data["name"] == "A"
        assert "mentor" not in data


@pytest.mark.unit
class TestHelpers:
    def test_title_case(self):
        assert title_case("mARY o'neil-SMITH") == "Mary O'neil-smith"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (3, 3),
            (3.0, 3),
            ("6", 6),
            (" 2.0 ", 2),
            (2.5, 2.5),
            ("three", "three"),
            ("", None),
            (None, None),
        ],
    )
    def test_normalize_duration(self, value, expected):
        assert normalize_duration(value) == expected

    def test_resolve_field_returns_none_when_absent(self):
        assert resolve_field({"a": 1}, ("b", "c")) is None


@pytest.mark.unit
class TestNormalizeChanges:
    """Tests for the partial-update variant."""

    def test_only_updatable_fields_are_kept(self):
        changes = normalize_changes(
            {
                "name": " New Name ",
                "internId": "OTHER",
                "startingDate": "2024-01-05",
                "status": "REVOKED",
                "contactNo": "123",
            }
        )

        assert changes == {
            "name": "New Name",
            "startingDate": "05-01-2024",
            "status": "revoked",
        }

    def test_display_name_aliases(self):
        changes = normalize_changes({"Duration": "4", "Email": "A@B.COM"})

        assert changes == {"duration": 4, "email": "a@b.com"}

    def test_explicitly_blank_name_is_kept(self):
        assert normalize_changes({"name": "  "}) == {"name": ""}

    def test_non_mapping(self):
        assert normalize_changes(None) == {}
