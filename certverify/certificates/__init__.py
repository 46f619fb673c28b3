"""
Certificate ingestion and verification.

Pipeline (one record at a time):
- normalizer.py: alias resolution and text/date cleanup
- validator.py: defect accumulation
- duplicates.py: natural-key duplicate check
- importer.py: batch coordinator producing an ImportReport
"""

from certverify.certificates.importer import (
    BatchOutcome,
    ImportReport,
    RecordOutcome,
    RecordStatus,
    run_batch,
)
from certverify.certificates.normalizer import (
    CertificateRecord,
    RecordSource,
    normalize_record,
)
from certverify.certificates.validator import validate_record

__all__ = [
    "BatchOutcome",
    "CertificateRecord",
    "ImportReport",
    "RecordOutcome",
    "RecordSource",
    "RecordStatus",
    "normalize_record",
    "run_batch",
    "validate_record",
]
