"""
Unit tests for single-record certificate operations and duplicate detection,
run against the in-memory store.
"""

import pytest

from certverify.certificates.duplicates import DuplicateOutcome, DuplicateResolver
from certverify.certificates.service import (
    NOT_FOUND_MESSAGE,
    create_certificate,
    delete_certificate,
    list_certificates,
    update_certificate,
    verify_certificate,
)
from certverify.exceptions import (
    BadRequestException,
    ConflictException,
    NotFoundException,
    ValidationException,
)


@pytest.mark.unit
class TestDuplicateResolver:
    def test_classify(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)
        resolver = DuplicateResolver(memory_store)

        assert resolver.classify("ITID00001") is DuplicateOutcome.DUPLICATE
        assert resolver.classify("ITID00002") is DuplicateOutcome.NEW

    def test_ensure_new_raises(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        with pytest.raises(ConflictException):
            DuplicateResolver(memory_store).ensure_new("ITID00001")


@pytest.mark.unit
class TestCreateCertificate:
    @pytest.mark.parametrize("payload", [None, {}, [], "text"])
    def test_empty_payload(self, memory_store, payload):
        with pytest.raises(BadRequestException) as exc_info:
            create_certificate(payload, memory_store)

        assert "example" in exc_info.value.extra

    def test_invalid_payload_reports_received_keys(self, memory_store):
        with pytest.raises(ValidationException) as exc_info:
            create_certificate({"Intern ID": "X"}, memory_store)

        assert exc_info.value.extra["received"] == ["Intern ID"]
        assert "Name is required" in exc_info.value.errors
        assert len(memory_store) == 0

    def test_mentor_fields(self, memory_store, certificate_factory):
        certificate = create_certificate(
            certificate_factory(**{"Mentor Name": "Asha", "Mentor Email ID": "A@B.com"}),
            memory_store,
        )

        assert certificate.mentor_name == "Asha"
        assert certificate.mentor_email == "a@b.com"


@pytest.mark.unit
class TestVerifyCertificate:
    def test_valid(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        result = verify_certificate(" itid00001 ", memory_store)

        assert result.status_code == 200
        assert result.valid is True
        assert result.body["Intern ID"] == "ITID00001"

    def test_missing(self, memory_store):
        result = verify_certificate("NOPE", memory_store)

        assert result.status_code == 404
        assert result.body == {"valid": False, "message": NOT_FOUND_MESSAGE}

    def test_revoked_is_never_valid(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)
        update_certificate("ITID00001", {"status": "REVOKED"}, memory_store)

        result = verify_certificate("ITID00001", memory_store)

        assert result.status_code == 403
        assert result.valid is False

    def test_blank_key(self, memory_store):
        assert verify_certificate("", memory_store).status_code == 400


@pytest.mark.unit
class TestUpdateDeleteList:
    def test_update_canonicalizes_values(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        certificate = update_certificate(
            "itid00001",
            {"Starting Date": 45641, "duration": "3", "email": " X@Y.COM "},
            memory_store,
        )

        assert certificate.starting_date == "15-12-2024"
        assert certificate.duration == 3
        assert certificate.email == "x@y.com"

    def test_update_rejects_invalid(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        with pytest.raises(ValidationException):
            update_certificate("ITID00001", {"duration": "long"}, memory_store)

    def test_update_blank_key(self, memory_store):
        with pytest.raises(BadRequestException):
            update_certificate("  ", {"name": "x"}, memory_store)

    def test_delete(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        delete_certificate("itid00001", memory_store)

        with pytest.raises(NotFoundException):
            delete_certificate("ITID00001", memory_store)

    def test_list_serializes_display_dates(self, memory_store, certificate_factory):
        create_certificate(certificate_factory(), memory_store)

        [item] = list_certificates(memory_store)

        assert item["startingDate"] == "15-12-2024"
        assert item["status"] == "active"
        assert item["createdAt"]
