"""
In-memory certificate store.

Used by unit tests and by ``scripts/import_certificates.py --dry-run``.
Objects are plain unsaved ORM instances; nothing touches a database.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TYPE_CHECKING

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


class InMemoryCertificateStore(CertificateStore):
    """Dict-backed store keyed by intern id, guarded by one lock."""

    def __init__(self):
        self._records: Dict[str, Certificate] = {}
        self._lock = threading.RLock()
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._records)

    def find_by_key(self, intern_id: str) -> Optional[Certificate]:
        with self._lock:
            return self._records.get(intern_id)

    def insert(self, record: "CertificateRecord") -> Certificate:
        with self._lock:
            if record.intern_id in self._records:
                raise ConflictException(DUPLICATE_KEY_MESSAGE)

            now = datetime.now(timezone.utc).replace(tzinfo=None)
            certificate = record_to_model(record)
            certificate.id = self._next_id
            certificate.created_at = now
            certificate.updated_at = now
            self._next_id += 1

            self._records[record.intern_id] = certificate
            return certificate

    def update_by_key(self, intern_id: str, changes: Dict[str, Any]) -> Certificate:
        with self._lock:
            certificate = self._records.get(intern_id)
            if certificate is None:
                raise NotFoundException(NOT_FOUND_MESSAGE)

            for key, value in changes.items():
                column = UPDATE_COLUMNS.get(key)
                if column:
                    setattr(certificate, column, value)
            certificate.updated_at = datetime.now(timezone.utc).replace(tzinfo=None)
            return certificate

    def delete_by_key(self, intern_id: str) -> Certificate:
        with self._lock:
            certificate = self._records.pop(intern_id, None)
            if certificate is None:
                raise NotFoundException(NOT_FOUND_MESSAGE)
            return certificate

    def list(
        self,
        status: Optional[str] = None,
        domain: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Certificate]:
        with self._lock:
            results = list(self._records.values())

        if status:
            results = [c for c in results if c.status == status]
        if domain:
            needle = domain.lower()
            results = [c for c in results if needle in (c.domain or "").lower()]
        if search:
            needle = search.lower()
            results = [
                c
                for c in results
                if any(
                    needle in (value or "").lower()
                    for value in (c.name, c.intern_id, c.email)
                )
            ]
        return sorted(results, key=lambda c: c.id, reverse=True)
