"""
Integration tests for spreadsheet uploads (POST /api/certificates/bulk-upload).
"""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

XLSX_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def sheet_row(serial, intern_id, name, start=45641, end=45672):
    return [
        serial, intern_id, name, "Data Analyst", 1, start, end,
        "Intern@Example.com", "+91 98765-43210", "asha rao", "ASHA@corp.com", "12345",
    ]


def upload(client, headers, content, filename="interns.xlsx"):
    return client.post(
        "/api/certificates/bulk-upload",
        files={"file": (filename, content, XLSX_TYPE)},
        headers=headers,
    )


@pytest.mark.integration
class TestBulkUpload:
    """Tests for the spreadsheet import endpoint."""

    def test_requires_token(self, client: TestClient, workbook_builder):
        response = upload(client, {}, workbook_builder([sheet_row(1, "S1", "a")]))

        assert response.status_code == 401

    def test_imports_rows(self, client: TestClient, auth_headers, workbook_builder):
        content = workbook_builder(
            [
                sheet_row(1, "itid00001", "jOHN doe"),
                sheet_row(2, "ITID00002", "mary SMITH", start=datetime(2024, 12, 15)),
            ]
        )

        response = upload(client, auth_headers, content)

        assert response.status_code == 201
        assert response.json()["results"] == {
            "total": 2,
            "successful": 2,
            "failed": 0,
            "skipped": 0,
        }

        lookup = client.get("/api/verify/ITID00001").json()
        assert lookup["Name"] == "John Doe"
        assert lookup["Starting Date"] == "15-12-2024"
        assert lookup["Completion Date"] == "15-01-2025"
        assert client.get("/api/verify/ITID00002").json()["Name"] == "Mary Smith"

    def test_partial_upload_reports_row_positions(
        self, client: TestClient, auth_headers, workbook_builder
    ):
        content = workbook_builder(
            [
                sheet_row(1, "U1", "ok one"),
                sheet_row(2, "U2", "bad dates", start="not a date"),
                sheet_row(3, "U1", "duplicate of row one"),
            ]
        )

        response = upload(client, auth_headers, content)

        assert response.status_code == 207
        details = response.json()["details"]
        assert [d["index"] for d in details["successful"]] == [1]
        assert details["failed"] == [
            {"index": 2, "internId": "U2", "errors": ["Invalid Starting Date format"]}
        ]
        assert [d["index"] for d in details["skipped"]] == [3]

    def test_reupload_skips_everything(self, client: TestClient, auth_headers, workbook_builder):
        content = workbook_builder([sheet_row(1, "R1", "a b"), sheet_row(2, "R2", "c d")])
        upload(client, auth_headers, content)

        response = upload(client, auth_headers, content)

        assert response.status_code == 207
        assert response.json()["results"]["skipped"] == 2

    def test_no_file(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/certificates/bulk-upload", data={"other": "x"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"

    def test_wrong_extension(self, client: TestClient, auth_headers):
        response = upload(client, auth_headers, b"a,b,c", filename="interns.csv")

        assert response.status_code == 400
        assert response.json()["message"].startswith("Unsupported file type")

    def test_corrupt_workbook(self, client: TestClient, auth_headers):
        response = upload(client, auth_headers, b"not really a zip")

        assert response.status_code == 400
        assert response.json()["message"].startswith("Error processing Excel file")

    def test_missing_header(self, client: TestClient, auth_headers, workbook_builder):
        content = workbook_builder([sheet_row(1, "H1", "x")], headers=["a", "b", "c"])

        response = upload(client, auth_headers, content)

        assert response.status_code == 400
        assert response.json()["message"].startswith("Could not find header row")

    def test_header_without_rows(self, client: TestClient, auth_headers, workbook_builder):
        response = upload(client, auth_headers, workbook_builder([]))

        assert response.status_code == 400
        assert response.json()["message"] == "No certificate rows found below the header row"
