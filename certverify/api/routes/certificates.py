"""
Spreadsheet bulk upload, mounted at ``/api/certificates``.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from certverify.api.dependencies import get_certificate_store, get_current_admin_user
from certverify.certificates.importer import run_batch
from certverify.certificates.normalizer import RecordSource
from certverify.certificates.spreadsheet import read_workbook
from certverify.exceptions import BadRequestException
from certverify.metrics import certverify_errors_total
from certverify.models import User
from certverify.settings import import_settings
from certverify.storage import CertificateStore

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_upload(file: Optional[UploadFile]) -> None:
    if file is None or not file.filename:
        raise BadRequestException("No file uploaded")

    extension = Path(file.filename).suffix.lower().lstrip(".")
    if extension not in import_settings.allowed_extensions:
        allowed = ", ".join(f".{ext}" for ext in sorted(import_settings.allowed_extensions))
        raise BadRequestException(f"Unsupported file type. Please upload one of: {allowed}")


@router.post("/bulk-upload", status_code=201)
def bulk_upload(
    file: Optional[UploadFile] = File(default=None),
    store: CertificateStore = Depends(get_certificate_store),
    current_user: User = Depends(get_current_admin_user),
):
    """Import certificates from the first sheet of an ``.xlsx`` workbook.

    Rows go through the same pipeline as ``POST /api/verify/bulk`` and the
    response has the same shape; ``index`` counts data rows from 1.
    """
    _check_upload(file)

    content = file.file.read(import_settings.max_file_size + 1)
    if len(content) > import_settings.max_file_size:
        certverify_errors_total.labels(component="upload", error_type="too_large").inc()
        raise BadRequestException(
            f"File too large. Maximum size is {import_settings.max_file_size} bytes"
        )

    records = read_workbook(content)
    if not records:
        raise BadRequestException("No certificate rows found below the header row")

    logger.info(f"Spreadsheet upload {file.filename}: {len(records)} rows")
    report = run_batch(records, store, RecordSource.SPREADSHEET)
    return JSONResponse(status_code=report.status_code, content=report.to_response())
