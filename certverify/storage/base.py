"""
Abstract base class for certificate persistence.

The import pipeline and the single-record endpoints only talk to this
interface. Implementations must enforce ``intern_id`` uniqueness themselves
because the duplicate check and the insert are not atomic.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from certverify.models.certificate import Certificate

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from certverify.certificates.normalizer import CertificateRecord

logger = logging.getLogger(__name__)

DUPLICATE_KEY_MESSAGE = "Certificate with this Intern ID already exists"
NOT_FOUND_MESSAGE = "Certificate not found"

# Canonical update keys -> model attributes
UPDATE_COLUMNS = {
    "name": "name",
    "domain": "domain",
    "duration": "duration",
    "startingDate": "starting_date",
    "completionDate": "completion_date",
    "email": "email",
    "status": "status",
}


def record_to_model(record: "CertificateRecord") -> Certificate:
    """Build an unsaved ORM object from a validated canonical record."""
    mentor = record.mentor
    return Certificate(
        intern_id=record.intern_id,
        name=record.name,
        domain=record.domain,
        duration=record.duration,
        starting_date=record.starting_date,
        completion_date=record.completion_date,
        email=record.email,
        contact_no=record.contact_no,
        mentor_name=mentor.name if mentor else None,
        mentor_email=mentor.email if mentor else None,
        mentor_contact_no=mentor.contact_no if mentor else None,
        status=record.status,
    )


class CertificateStore(ABC):
    """Abstract base class for certificate storage backends."""

    @abstractmethod
    def find_by_key(self, intern_id: str) -> Optional[Certificate]:
        """Return the certificate for a normalized intern id, or None."""
        pass

    @abstractmethod
    def insert(self, record: "CertificateRecord") -> Certificate:
        """Persist a new certificate.

        Raises:
            ConflictException: If the intern id is already stored
        """
        pass

    @abstractmethod
    def update_by_key(self, intern_id: str, changes: Dict[str, Any]) -> Certificate:
        """Apply canonical ``changes`` to a stored certificate.

        Raises:
            NotFoundException: If no certificate has this intern id
        """
        pass

    @abstractmethod
    def delete_by_key(self, intern_id: str) -> Certificate:
        """Remove a certificate and return what was removed.

        Raises:
            NotFoundException: If no certificate has this intern id
        """
        pass

    @abstractmethod
    def list(
        self,
        status: Optional[str] = None,
        domain: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Certificate]:
        """Return certificates newest first, optionally filtered."""
        pass

    def exists(self, intern_id: str) -> bool:
        return self.find_by_key(intern_id) is not None
