"""Defect collection for canonical certificate records.

Every rule runs on every record so callers see all problems at once.
Nothing here raises; an empty list means the record is valid.
"""

from typing import Any, List

from certverify.models.certificate import CERTIFICATE_STATUSES

from .dates import parse_date
from .normalizer import CertificateRecord


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_date(value: Any, label: str, errors: List[str]) -> None:
    if _blank(value):
        errors.append(f"{label} is required")
    elif parse_date(value) is None:
        errors.append(f"Invalid {label} format")


def validate_record(record: CertificateRecord) -> List[str]:
    """Return the ordered list of defects found in ``record``."""
    errors: List[str] = []

    if _blank(record.intern_id):
        errors.append("Intern ID is required")
    if _blank(record.name):
        errors.append("Name is required")
    if _blank(record.domain):
        errors.append("Domain is required")

    # Sign is deliberately not checked; existing data relies on it
    if _blank(record.duration):
        errors.append("Duration is required")
    elif isinstance(record.duration, bool) or not isinstance(record.duration, int):
        errors.append("Duration must be a whole number of months")

    _check_date(record.starting_date, "Starting Date", errors)
    _check_date(record.completion_date, "Completion Date", errors)

    if record.status not in CERTIFICATE_STATUSES:
        errors.append(f"Status must be one of: {', '.join(CERTIFICATE_STATUSES)}")

    return errors


def validate_changes(changes: dict) -> List[str]:
    """Validate a partial update produced by ``normalize_changes``."""
    errors: List[str] = []

    for key, label in (("name", "Name"), ("domain", "Domain")):
        if key in changes and _blank(changes[key]):
            errors.append(f"{label} cannot be empty")

    if "duration" in changes:
        duration = changes["duration"]
        if isinstance(duration, bool) or not isinstance(duration, int):
            errors.append("Duration must be a whole number of months")

    for key, label in (("startingDate", "Starting Date"), ("completionDate", "Completion Date")):
        if key in changes and parse_date(changes[key]) is None:
            errors.append(f"Invalid {label} format")

    if "status" in changes and changes["status"] not in CERTIFICATE_STATUSES:
        errors.append(f"Status must be one of: {', '.join(CERTIFICATE_STATUSES)}")

    return errors
