"""
Shared pytest fixtures for the certificate service tests.

This file contains reusable fixtures for:
- Environment setup (in-memory SQLite, test JWT secret)
- Database lifecycle and sessions
- FastAPI test client and admin auth headers
- Sample certificate records and workbook builders
"""

import os

# Must be set before certverify is imported (engine and settings read these)
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-pytest-only"
os.environ["ENV"] = "test"

from io import BytesIO
from typing import Any, Callable, Dict, Generator, List, Optional

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from certverify.database import Base, SessionLocal, engine
from certverify.models import User  # noqa: F401  (registers all tables)


# ============================================================================
# Database
# ============================================================================


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    """Create every table before each test and drop them afterwards."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Plain SQLAlchemy session against the test database."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# ============================================================================
# FastAPI Test Client
# ============================================================================


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """FastAPI test client running the full app (lifespan included)."""
    from certverify.main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def admin_user(db_session) -> User:
    from certverify.core.auth import get_password_hash

    user = User(
        email=ADMIN_EMAIL,
        name="Admin",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        is_active=True,
        is_superuser=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(admin_user) -> Dict[str, str]:
    """Return bearer headers for the admin user."""
    from certverify.core.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token(admin_user.email)}"}


# ============================================================================
# Stores
# ============================================================================


@pytest.fixture
def memory_store():
    from certverify.storage import InMemoryCertificateStore

    return InMemoryCertificateStore()


# ============================================================================
# Sample Data
# ============================================================================


def make_certificate(intern_id: str = "ITID00001", **overrides: Any) -> Dict[str, Any]:
    """Valid JSON certificate payload; ``overrides`` replace or add keys."""
    data: Dict[str, Any] = {
        "internId": intern_id,
        "name": "John Doe",
        "domain": "Data Analyst",
        "duration": 1,
        "startingDate": "15-12-2024",
        "completionDate": "15-01-2025",
    }
    data.update(overrides)
    return data


@pytest.fixture
def certificate_factory() -> Callable[..., Dict[str, Any]]:
    return make_certificate


SHEET_HEADERS = [
    "S. No.",
    "Intern ID",
    "Name of the Intern",
    "Domain",
    "Duration (in months)",
    "Start Date",
    "End Date",
    "Email ID",
    "Contact No.",
    "Mentor Name",
    "Mentor Email ID",
    "Mentor Contact No.",
]


def build_workbook(
    rows: List[List[Any]],
    headers: Optional[List[str]] = None,
    title_rows: int = 2,
) -> bytes:
    """Serialize an intern sheet: title block, header row, then ``rows``."""
    wb = Workbook()
    ws = wb.active
    for i in range(title_rows):
        ws.append([f"Internship batch report {i + 1}"])
    ws.append(headers or SHEET_HEADERS)
    for row in rows:
        ws.append(row)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def workbook_builder() -> Callable[..., bytes]:
    return build_workbook
