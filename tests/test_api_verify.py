"""
Integration tests for the /api/verify endpoints.

Covers single submission, bulk import envelopes and outcomes, the public
lookup (valid, revoked, missing, storage failure), updates and deletes.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from certverify.certificates.service import (
    LOOKUP_ERROR_MESSAGE,
    NOT_FOUND_MESSAGE,
    REVOKED_MESSAGE,
)
from certverify.storage import SQLCertificateStore
from certverify.storage.base import DUPLICATE_KEY_MESSAGE


@pytest.mark.integration
class TestAddCertificate:
    """Tests for POST /api/verify."""

    def test_requires_token(self, client: TestClient, certificate_factory):
        response = client.post("/api/verify", json=certificate_factory())

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized, no token"}

    def test_rejects_bad_token(self, client: TestClient, certificate_factory):
        response = client.post(
            "/api/verify",
            json=certificate_factory(),
            headers={"Authorization": "Bearer not.a.token"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, token failed"

    def test_create(self, client: TestClient, auth_headers, certificate_factory):
        response = client.post(
            "/api/verify", json=certificate_factory("itid00001"), headers=auth_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Certificate added successfully"
        assert body["data"] == {
            "internId": "ITID00001",
            "name": "John Doe",
            "domain": "Data Analyst",
            "duration": 1,
        }

    def test_accepts_display_keys(self, client: TestClient, auth_headers):
        payload = {
            "Intern ID": "ITID00009",
            "Name": "Asha Rao",
            "Domain": "Web Development",
            "Duration": "2",
            "Starting Date": "2024-11-01",
            "Completion Date": "01-01-2025",
        }

        response = client.post("/api/verify", json=payload, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["data"]["duration"] == 2

    def test_empty_body(self, client: TestClient, auth_headers):
        response = client.post("/api/verify", json={}, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"].startswith("Request body is empty")
        assert body["example"]["internId"] == "ITID00001"

    def test_validation_errors_list_every_defect(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/verify",
            json={"internId": "ITID1", "startingDate": "someday"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"] == [
            "Name is required",
            "Domain is required",
            "Duration is required",
            "Invalid Starting Date format",
            "Completion Date is required",
        ]
        assert body["received"] == ["internId", "startingDate"]

    def test_duplicate_is_conflict(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory(), headers=auth_headers)

        response = client.post(
            "/api/verify", json=certificate_factory("itid00001"), headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json()["message"] == DUPLICATE_KEY_MESSAGE

    def test_invalid_json(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/verify",
            content='{"internId": "ITID1",}',
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid JSON format in request body"
        assert "hint" in body


@pytest.mark.integration
class TestBulkImport:
    """Tests for POST /api/verify/bulk."""

    def test_requires_token(self, client: TestClient, certificate_factory):
        response = client.post(
            "/api/verify/bulk", json={"certificates": [certificate_factory()]}
        )

        assert response.status_code == 401

    def test_empty_body(self, client: TestClient, auth_headers):
        response = client.post("/api/verify/bulk", json={}, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Request body is empty. Please provide certificates array."
        assert "certificates" in body["example"]

    @pytest.mark.parametrize("certificates", [[], "ITID1", {"internId": "ITID1"}, None])
    def test_certificates_must_be_non_empty_array(
        self, client: TestClient, auth_headers, certificates
    ):
        response = client.post(
            "/api/verify/bulk",
            json={"certificates": certificates},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == (
            'Please provide an array of certificates in the "certificates" field'
        )

    def test_all_created(self, client: TestClient, auth_headers, certificate_factory):
        payload = {"certificates": [certificate_factory(f"B{i}") for i in range(3)]}

        response = client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["results"] == {"total": 3, "successful": 3, "failed": 0, "skipped": 0}
        assert "details" not in body

    def test_partial_with_details(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory("DUP1"), headers=auth_headers)
        payload = {
            "certificates": [
                certificate_factory("NEW1"),
                {"name": "Missing Id"},
                certificate_factory("dup1"),
                certificate_factory("NEW2"),
            ]
        }

        response = client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        assert response.status_code == 207
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Processed 4 certificates. 2 successful, 1 failed, 1 skipped."
        details = body["details"]
        assert [d["index"] for d in details["successful"]] == [1, 4]
        assert details["failed"][0]["index"] == 2
        assert details["failed"][0]["internId"] == "N/A"
        assert "Intern ID is required" in details["failed"][0]["errors"]
        assert details["skipped"] == [
            {"index": 3, "internId": "DUP1", "reason": DUPLICATE_KEY_MESSAGE}
        ]

    def test_reimport_is_skipped(self, client: TestClient, auth_headers, certificate_factory):
        payload = {"certificates": [certificate_factory("R1"), certificate_factory("R2")]}
        client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        response = client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        assert response.status_code == 207
        assert response.json()["results"]["skipped"] == 2

        listing = client.get("/api/verify", headers=auth_headers).json()
        assert listing["count"] == 2

    def test_all_failed(self, client: TestClient, auth_headers):
        payload = {"certificates": [{"internId": "X1"}, {"internId": "X2"}]}

        response = client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["results"]["failed"] == 2

    def test_oversize_batch(self, client: TestClient, auth_headers, certificate_factory):
        payload = {"certificates": [certificate_factory(f"O{i}") for i in range(1001)]}

        response = client.post("/api/verify/bulk", json=payload, headers=auth_headers)

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "limited to 1000" in body["message"]
        assert body["example"]["certificates"][0]["internId"]
        assert client.get("/api/verify", headers=auth_headers).json()["count"] == 0


@pytest.mark.integration
class TestVerifyLookup:
    """Tests for GET /api/verify/{intern_id}."""

    def test_valid_certificate(self, client: TestClient, auth_headers, certificate_factory):
        client.post(
            "/api/verify",
            json=certificate_factory(startingDate="2024-12-15"),
            headers=auth_headers,
        )

        response = client.get("/api/verify/itid00001")

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "Name": "John Doe",
            "Domain": "Data Analyst",
            "Duration": 1,
            "Intern ID": "ITID00001",
            "Starting Date": "15-12-2024",
            "Completion Date": "15-01-2025",
        }

    def test_not_found(self, client: TestClient):
        response = client.get("/api/verify/NOPE")

        assert response.status_code == 404
        assert response.json() == {"valid": False, "message": NOT_FOUND_MESSAGE}

    def test_revoked(self, client: TestClient, auth_headers, certificate_factory):
        client.post(
            "/api/verify", json=certificate_factory(status="revoked"), headers=auth_headers
        )

        response = client.get("/api/verify/ITID00001")

        assert response.status_code == 403
        assert response.json() == {"valid": False, "message": REVOKED_MESSAGE}

    def test_blank_intern_id(self, client: TestClient):
        response = client.get("/api/verify/%20")

        assert response.status_code == 400
        assert response.json()["valid"] is False

    def test_storage_failure(self, client: TestClient):
        with patch.object(
            SQLCertificateStore, "find_by_key", side_effect=RuntimeError("db down")
        ):
            response = client.get("/api/verify/ITID00001")

        assert response.status_code == 500
        assert response.json() == {"valid": False, "message": LOOKUP_ERROR_MESSAGE}


@pytest.mark.integration
class TestUpdateDeleteList:
    """Tests for PUT, DELETE and list on /api/verify."""

    def test_update(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory(), headers=auth_headers)

        response = client.put(
            "/api/verify/itid00001",
            json={"name": "Jane Doe", "completionDate": "2025-02-15", "internId": "OTHER"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["internId"] == "ITID00001"
        assert data["name"] == "Jane Doe"
        assert data["completionDate"] == "15-02-2025"
        assert "createdAt" not in data

    def test_update_invalid(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory(), headers=auth_headers)

        response = client.put(
            "/api/verify/ITID00001",
            json={"name": "", "status": "expired"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "Name cannot be empty",
            "Status must be one of: active, revoked",
        ]

    def test_revoke_then_verify(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory(), headers=auth_headers)

        client.put("/api/verify/ITID00001", json={"status": "revoked"}, headers=auth_headers)

        assert client.get("/api/verify/ITID00001").status_code == 403

    def test_update_missing(self, client: TestClient, auth_headers):
        response = client.put("/api/verify/NOPE", json={"name": "x"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Certificate not found"

    def test_delete(self, client: TestClient, auth_headers, certificate_factory):
        client.post("/api/verify", json=certificate_factory(), headers=auth_headers)

        response = client.delete("/api/verify/itid00001", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"internId": "ITID00001", "name": "John Doe"}
        assert client.get("/api/verify/ITID00001").status_code == 404

    def test_delete_missing(self, client: TestClient, auth_headers):
        response = client.delete("/api/verify/NOPE", headers=auth_headers)

        assert response.status_code == 404

    def test_list_requires_token(self, client: TestClient):
        assert client.get("/api/verify").status_code == 401

    def test_list_filters(self, client: TestClient, auth_headers, certificate_factory):
        client.post(
            "/api/verify",
            json=certificate_factory("L1", domain="Data Analyst"),
            headers=auth_headers,
        )
        client.post(
            "/api/verify",
            json=certificate_factory("L2", domain="Web Development", status="revoked"),
            headers=auth_headers,
        )

        revoked = client.get("/api/verify?status=revoked", headers=auth_headers).json()
        data = client.get("/api/verify?domain=data", headers=auth_headers).json()

        assert [c["internId"] for c in revoked["data"]] == ["L2"]
        assert [c["internId"] for c in data["data"]] == ["L1"]
        assert data["data"][0]["startingDate"] == "15-12-2024"


@pytest.mark.integration
class TestUnknownRoute:
    def test_route_not_found(self, client: TestClient):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}
