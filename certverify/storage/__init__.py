"""
Storage module for certificate persistence.

Architecture:
- base.py: CertificateStore interface consumed by the import pipeline
- sql.py: SQLAlchemy implementation (production)
- memory.py: in-memory implementation (tests, dry runs)
"""

from certverify.storage.base import CertificateStore
from certverify.storage.memory import InMemoryCertificateStore
from certverify.storage.sql import SQLCertificateStore

__all__ = [
    "CertificateStore",
    "InMemoryCertificateStore",
    "SQLCertificateStore",
]
