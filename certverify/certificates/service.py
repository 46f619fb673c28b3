"""
Single-record certificate operations: submit, verify, update, delete, list.

Bulk imports go through ``importer.run_batch``; everything here handles one
certificate per call and raises the service exceptions the API layer turns
into JSON error envelopes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from certverify.exceptions import BadRequestException, ValidationException
from certverify.metrics import certverify_lookups_total
from certverify.models.certificate import Certificate
from certverify.storage.base import CertificateStore

from .dates import display_date
from .duplicates import DuplicateResolver
from .normalizer import (
    RecordSource,
    normalize_changes,
    normalize_intern_id,
    normalize_record,
)
from .validator import validate_changes, validate_record

logger = logging.getLogger(__name__)

EXAMPLE_CERTIFICATE: Dict[str, Any] = {
    "internId": "ITID00001",
    "name": "John Doe",
    "domain": "Data Analyst",
    "duration": 1,
    "startingDate": "15-12-2024",
    "completionDate": "15-01-2025",
}

NOT_FOUND_MESSAGE = "Certificate not found. Please check your Intern ID and try again."
REVOKED_MESSAGE = "This certificate has been revoked and is no longer valid."
LOOKUP_ERROR_MESSAGE = (
    "An error occurred while verifying the certificate. Please try again later."
)


@dataclass(frozen=True)
class VerificationResult:
    """Public lookup answer; ``body`` always carries ``valid``."""

    status_code: int
    body: Dict[str, Any]

    @property
    def valid(self) -> bool:
        return bool(self.body.get("valid"))


# ----------------------------------------------------------------------
# Serialization
# ----------------------------------------------------------------------


def certificate_summary(certificate: Certificate) -> Dict[str, Any]:
    return {
        "internId": certificate.intern_id,
        "name": certificate.name,
        "domain": certificate.domain,
        "duration": certificate.duration,
    }


def certificate_to_dict(certificate: Certificate) -> Dict[str, Any]:
    """Admin view of a stored certificate with DD-MM-YYYY dates."""
    data = certificate_summary(certificate)
    data.update(
        {
            "startingDate": display_date(certificate.starting_date),
            "completionDate": display_date(certificate.completion_date),
            "email": certificate.email,
            "status": certificate.status,
            "createdAt": certificate.created_at.isoformat() if certificate.created_at else None,
            "updatedAt": certificate.updated_at.isoformat() if certificate.updated_at else None,
        }
    )
    return data


def verification_payload(certificate: Certificate) -> Dict[str, Any]:
    """Lookup body keyed by the literal display labels clients depend on."""
    return {
        "valid": True,
        "Name": certificate.name,
        "Domain": certificate.domain,
        "Duration": certificate.duration,
        "Intern ID": certificate.intern_id,
        "Starting Date": display_date(certificate.starting_date),
        "Completion Date": display_date(certificate.completion_date),
    }


# ----------------------------------------------------------------------
# Operations
# ----------------------------------------------------------------------


def _require_key(intern_id: Optional[str]) -> str:
    key = normalize_intern_id(intern_id)
    if not key:
        raise BadRequestException("Intern ID is required")
    return key


def create_certificate(payload: Any, store: CertificateStore) -> Certificate:
    """Validate and store one submitted certificate.

    Raises:
        BadRequestException: Empty body
        ValidationException: Field defects (with the received keys)
        ConflictException: Intern ID already stored
    """
    if not isinstance(payload, Mapping) or not payload:
        raise BadRequestException(
            "Request body is empty. Please provide certificate data.",
            extra={"example": EXAMPLE_CERTIFICATE},
        )

    record = normalize_record(payload, RecordSource.JSON)
    errors = validate_record(record)
    if errors:
        raise ValidationException(errors, extra={"received": list(record.source_keys)})

    DuplicateResolver(store).ensure_new(record.intern_id)
    certificate = store.insert(record)
    logger.info(f"Certificate {certificate.intern_id} created")
    return certificate


def verify_certificate(intern_id: Optional[str], store: CertificateStore) -> VerificationResult:
    """Public verification lookup.

    Revoked certificates are never reported valid, even though they stay
    in storage.
    """
    key = normalize_intern_id(intern_id)
    if not key:
        return VerificationResult(400, {"valid": False, "message": "Intern ID is required"})

    try:
        certificate = store.find_by_key(key)
    except Exception as e:
        logger.error(f"Verification lookup failed for {key}: {e}")
        certverify_lookups_total.labels(result="error").inc()
        return VerificationResult(500, {"valid": False, "message": LOOKUP_ERROR_MESSAGE})

    if certificate is None:
        certverify_lookups_total.labels(result="not_found").inc()
        return VerificationResult(404, {"valid": False, "message": NOT_FOUND_MESSAGE})

    if certificate.is_revoked:
        certverify_lookups_total.labels(result="revoked").inc()
        return VerificationResult(403, {"valid": False, "message": REVOKED_MESSAGE})

    certverify_lookups_total.labels(result="valid").inc()
    return VerificationResult(200, verification_payload(certificate))


def update_certificate(
    intern_id: Optional[str], payload: Any, store: CertificateStore
) -> Certificate:
    """Apply a partial update limited to the updatable fields.

    Raises:
        BadRequestException: Blank intern id
        ValidationException: Invalid new values
        NotFoundException: Unknown intern id
    """
    key = _require_key(intern_id)
    changes = normalize_changes(payload)

    errors = validate_changes(changes)
    if errors:
        raise ValidationException(errors)

    certificate = store.update_by_key(key, changes)
    logger.info(f"Certificate {key} updated: {sorted(changes)}")
    return certificate


def delete_certificate(intern_id: Optional[str], store: CertificateStore) -> Certificate:
    key = _require_key(intern_id)
    certificate = store.delete_by_key(key)
    logger.info(f"Certificate {key} deleted")
    return certificate


def list_certificates(
    store: CertificateStore,
    status: Optional[str] = None,
    domain: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Dict[str, Any]]:
    return [
        certificate_to_dict(c)
        for c in store.list(status=status, domain=domain, search=search)
    ]
