"""
API dependencies for the certificate service.

Contains FastAPI dependencies for storage and authentication.
"""

import logging
from fastapi import Depends
from sqlalchemy.orm import Session

from certverify.core.auth import get_current_admin_user
from certverify.database import get_db
from certverify.storage import CertificateStore, SQLCertificateStore

logger = logging.getLogger(__name__)


def get_certificate_store(db: Session = Depends(get_db)) -> CertificateStore:
    """Request-scoped certificate store bound to the request's DB session.
    """
    return SQLCertificateStore(db)


__all__ = ["get_certificate_store", "get_current_admin_user", "get_db"]
