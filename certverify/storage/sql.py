"""
SQLAlchemy-backed certificate store (production backend).
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from certverify.exceptions import ConflictException, NotFoundException
from certverify.models.certificate import Certificate
from certverify.storage.base import (
    DUPLICATE_KEY_MESSAGE,
    NOT_FOUND_MESSAGE,
    UPDATE_COLUMNS,
    CertificateStore,
    record_to_model,
)

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from certverify.certificates.normalizer import CertificateRecord

logger = logging.getLogger(__name__)


class SQLCertificateStore(CertificateStore):
    """Certificate store bound to one request-scoped SQLAlchemy session.

    Every write commits on its own; a batch is applied record by record.
    The unique index on ``intern_id`` is the authoritative duplicate guard.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_key(self, intern_id: str) -> Optional[Certificate]:
        stmt = select(Certificate).where(Certificate.intern_id == intern_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def insert(self, record: "CertificateRecord") -> Certificate:
        certificate = record_to_model(record)
        self.db.add(certificate)
        try:
            self.db.commit()
        except IntegrityError as e:
            # Lost a race against another writer; leave the session usable
            self.db.rollback()
            logger.warning(f"Unique constraint hit for {record.intern_id}: {e.orig}")
            raise ConflictException(DUPLICATE_KEY_MESSAGE) from e
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(certificate)
        return certificate

    def update_by_key(self, intern_id: str, changes: Dict[str, Any]) -> Certificate:
        certificate = self.find_by_key(intern_id)
        if certificate is None:
            raise NotFoundException(NOT_FOUND_MESSAGE)

        for key, value in changes.items():
            column = UPDATE_COLUMNS.get(key)
            if column:
                setattr(certificate, column, value)

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(certificate)
        return certificate

    def delete_by_key(self, intern_id: str) -> Certificate:
        certificate = self.find_by_key(intern_id)
        if certificate is None:
            raise NotFoundException(NOT_FOUND_MESSAGE)

        self.db.delete(certificate)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return certificate

    def list(
        self,
        status: Optional[str] = None,
        domain: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Certificate]:
        stmt = select(Certificate)
        if status:
            stmt = stmt.where(Certificate.status == status)
        if domain:
            stmt = stmt.where(Certificate.domain.ilike(f"%{domain}%"))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Certificate.name.ilike(pattern),
                    Certificate.intern_id.ilike(pattern),
                    Certificate.email.ilike(pattern),
                )
            )
        stmt = stmt.order_by(Certificate.created_at.desc(), Certificate.id.desc())
        return list(self.db.execute(stmt).scalars().all())
