"""
Natural-key duplicate detection.

The check here is an optimistic fast path. The store's unique constraint on
``intern_id`` stays the authoritative guard, so callers must still handle a
``ConflictException`` from ``insert``.
"""

import logging
from enum import Enum

from certverify.exceptions import ConflictException
from certverify.storage.base import DUPLICATE_KEY_MESSAGE, CertificateStore

logger = logging.getLogger(__name__)


class DuplicateOutcome(str, Enum):
    NEW = "new"
    DUPLICATE = "duplicate"


class DuplicateResolver:
    """Classify intern ids against what is already stored.

    Single submissions treat a duplicate as a client error (``ensure_new``);
    batch imports treat it as a skip (``classify``).
    """

    def __init__(self, store: CertificateStore):
        self.store = store

    def classify(self, intern_id: str) -> DuplicateOutcome:
        if self.store.find_by_key(intern_id) is not None:
            return DuplicateOutcome.DUPLICATE
        return DuplicateOutcome.NEW

    def ensure_new(self, intern_id: str) -> None:
        """Raise ``ConflictException`` if ``intern_id`` is already stored."""
        if self.classify(intern_id) is DuplicateOutcome.DUPLICATE:
            logger.info(f"Rejected duplicate certificate {intern_id}")
            raise ConflictException(DUPLICATE_KEY_MESSAGE)
