"""
Certificate submission, bulk import and verification endpoints.

Mounted at ``/api/verify``. Lookup is public; everything else needs an
admin bearer token.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse

from certverify.api.dependencies import get_certificate_store, get_current_admin_user
from certverify.certificates import service
from certverify.certificates.importer import run_batch
from certverify.certificates.normalizer import RecordSource
from certverify.exceptions import BadRequestException, BatchTooLargeError
from certverify.models import User
from certverify.storage import CertificateStore

logger = logging.getLogger(__name__)

router = APIRouter()

BULK_EXAMPLE: Dict[str, Any] = {"certificates": [service.EXAMPLE_CERTIFICATE]}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_certificate(
    payload: Any = Body(default=None),
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    """Add one certificate.

    Returns 400 with every validation error, 409 when the Intern ID is taken.
    """
    certificate = service.create_certificate(payload, store)
    return {
        "success": True,
        "message": "Certificate added successfully",
        "data": service.certificate_summary(certificate),
    }


@router.post(
    "/bulk",
    status_code=status.HTTP_201_CREATED,
    responses={
        207: {"description": "Some certificates failed or were skipped"},
        400: {"description": "Malformed envelope, oversize batch, or every record failed"},
    },
)
def add_certificates_bulk(
    payload: Any = Body(default=None),
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
):
    """Import up to the configured batch limit of certificates.

    Every record is processed independently; the response reports each
    failed or skipped record by its 1-based position in the request.
    """
    if not isinstance(payload, Mapping) or not payload:
        raise BadRequestException(
            "Request body is empty. Please provide certificates array.",
            extra={"example": BULK_EXAMPLE},
        )

    certificates = payload.get("certificates")
    if not isinstance(certificates, list) or not certificates:
        raise BadRequestException(
            'Please provide an array of certificates in the "certificates" field',
            extra={"example": BULK_EXAMPLE},
        )

    try:
        report = run_batch(certificates, store, RecordSource.JSON)
    except BatchTooLargeError as e:
        raise BatchTooLargeError(e.limit, extra={"example": BULK_EXAMPLE}) from e
    return JSONResponse(status_code=report.status_code, content=report.to_response())


@router.get("")
def list_certificates(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    domain: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    """List certificates, newest first."""
    data = service.list_certificates(store, status=status_filter, domain=domain, search=search)
    return {"success": True, "count": len(data), "data": data}


@router.get(
    "/{intern_id}",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "valid": True,
                        "Name": "John Doe",
                        "Domain": "Data Analyst",
                        "Duration": 1,
                        "Intern ID": "ITID00001",
                        "Starting Date": "15-12-2024",
                        "Completion Date": "15-01-2025",
                    }
                }
            }
        },
        403: {"description": "Certificate revoked"},
        404: {"description": "Certificate not found"},
    },
)
def verify_certificate(
    intern_id: str,
    store: CertificateStore = Depends(get_certificate_store),
):
    """Public verification lookup (case-insensitive Intern ID)."""
    result = service.verify_certificate(intern_id, store)
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.put("/{intern_id}")
def update_certificate(
    intern_id: str,
    payload: Any = Body(default=None),
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    certificate = service.update_certificate(intern_id, payload, store)
    return {
        "success": True,
        "message": "Certificate updated successfully",
        "data": {
            key: value
            for key, value in service.certificate_to_dict(certificate).items()
            if key not in ("createdAt", "updatedAt")
        },
    }


@router.delete("/{intern_id}")
def delete_certificate(
    intern_id: str,
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
) -> Dict[str, Any]:
    certificate = service.delete_certificate(intern_id, store)
    return {
        "success": True,
        "message": "Certificate deleted successfully",
        "data": {"internId": certificate.intern_id, "name": certificate.name},
    }
