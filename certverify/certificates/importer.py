"""
Batch Coordinator for certificate imports.

Drives every raw record through normalize -> validate -> duplicate check ->
insert, one record at a time. A failure while handling one record is
recorded against that record and never stops the batch.

The accumulated result is an immutable ``ImportReport`` built with a fold
over ``enumerate(records, 1)``, so each outcome keeps the 1-based position
of its source record.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from typing import Any, Dict, List, Optional, Sequence, Tuple

from certverify.exceptions import BatchTooLargeError, CertVerifyException
from certverify.metrics import (
    certverify_errors_total,
    certverify_import_batch_size,
    certverify_import_batches_total,
    certverify_import_latency_seconds,
    certverify_import_records_total,
)
from certverify.settings import import_settings
from certverify.storage.base import DUPLICATE_KEY_MESSAGE, CertificateStore

from .duplicates import DuplicateOutcome, DuplicateResolver
from .normalizer import RecordSource, normalize_record
from .validator import validate_record

logger = logging.getLogger(__name__)

MISSING_KEY = "N/A"


class RecordStatus(str, Enum):
    SUCCESSFUL = "successful"
    FAILED = "failed"
    SKIPPED = "skipped"


class BatchOutcome(str, Enum):
    """Overall classification of a processed batch."""

    CREATED = "created"
    PARTIAL = "partial"
    FAILED = "failed"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    BatchOutcome.CREATED: 201,
    BatchOutcome.PARTIAL: 207,
    BatchOutcome.FAILED: 400,
}


@dataclass(frozen=True)
class RecordOutcome:
    """What happened to one input record."""

    index: int
    intern_id: str
    status: RecordStatus
    name: Optional[str] = None
    errors: Tuple[str, ...] = ()
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"index": self.index, "internId": self.intern_id}
        if self.status is RecordStatus.SUCCESSFUL:
            entry["name"] = self.name
        elif self.status is RecordStatus.FAILED:
            entry["errors"] = list(self.errors)
        else:
            entry["reason"] = self.reason
        return entry


@dataclass(frozen=True)
class ImportReport:
    """Tri-partition result of a batch import.

    Instances are never mutated; ``with_outcome`` returns a new report.
    """

    successful: Tuple[RecordOutcome, ...] = field(default_factory=tuple)
    failed: Tuple[RecordOutcome, ...] = field(default_factory=tuple)
    skipped: Tuple[RecordOutcome, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed) + len(self.skipped)

    def with_outcome(self, outcome: RecordOutcome) -> "ImportReport":
        bucket = outcome.status.value
        return replace(self, **{bucket: getattr(self, bucket) + (outcome,)})

    @property
    def outcome(self) -> BatchOutcome:
        if self.failed and not self.successful and not self.skipped:
            return BatchOutcome.FAILED
        if not self.failed and not self.skipped:
            return BatchOutcome.CREATED
        return BatchOutcome.PARTIAL

    @property
    def success(self) -> bool:
        return self.outcome is not BatchOutcome.FAILED

    @property
    def status_code(self) -> int:
        return self.outcome.status_code

    @property
    def message(self) -> str:
        return (
            f"Processed {self.total} certificates. "
            f"{len(self.successful)} successful, "
            f"{len(self.failed)} failed, "
            f"{len(self.skipped)} skipped."
        )

    def counts(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "successful": len(self.successful),
            "failed": len(self.failed),
            "skipped": len(self.skipped),
        }

    def to_response(self) -> Dict[str, Any]:
        """Build the bulk endpoint body.

        ``details`` is only attached when something failed or was skipped.
        """
        body: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "results": self.counts(),
        }
        if self.failed or self.skipped:
            body["details"] = {
                "successful": [o.to_dict() for o in self.successful],
                "failed": [o.to_dict() for o in self.failed],
                "skipped": [o.to_dict() for o in self.skipped],
            }
        return body


# ----------------------------------------------------------------------
# Per-record processing
# ----------------------------------------------------------------------


def _failure_message(exc: Exception) -> str:
    if isinstance(exc, CertVerifyException):
        return exc.message
    return str(exc) or exc.__class__.__name__


def process_record(
    index: int,
    raw: Any,
    store: CertificateStore,
    resolver: DuplicateResolver,
    source: RecordSource = RecordSource.JSON,
) -> RecordOutcome:
    """Run one raw record through the pipeline.

    Never raises: every exception becomes a ``FAILED`` outcome.
    """
    intern_id = MISSING_KEY
    try:
        record = normalize_record(raw, source)
        intern_id = record.intern_id or MISSING_KEY

        errors = validate_record(record)
        if errors:
            return RecordOutcome(index, intern_id, RecordStatus.FAILED, errors=tuple(errors))

        if resolver.classify(record.intern_id) is DuplicateOutcome.DUPLICATE:
            return RecordOutcome(
                index, intern_id, RecordStatus.SKIPPED, reason=DUPLICATE_KEY_MESSAGE
            )

        certificate = store.insert(record)
        return RecordOutcome(index, intern_id, RecordStatus.SUCCESSFUL, name=certificate.name)

    except Exception as e:
        logger.warning(
            f"Record {index} ({intern_id}) failed: {e}",
            extra={
                "index": index,
                "intern_id": intern_id,
                "outcome": RecordStatus.FAILED.value,
                "error_type": e.__class__.__name__,
            },
        )
        certverify_errors_total.labels(
            component="importer", error_type=e.__class__.__name__
        ).inc()
        return RecordOutcome(
            index, intern_id, RecordStatus.FAILED, errors=(_failure_message(e),)
        )


# ----------------------------------------------------------------------
# Batch processing
# ----------------------------------------------------------------------


def check_batch_size(records: Sequence[Any], max_batch_size: Optional[int] = None) -> None:
    """Reject oversize batches before any record is touched."""
    limit = max_batch_size or import_settings.max_batch_size
    if len(records) > limit:
        certverify_import_batches_total.labels(outcome="rejected").inc()
        logger.warning(
            f"Rejected batch of {len(records)} records (limit {limit})",
            extra={"total": len(records), "outcome": "rejected"},
        )
        raise BatchTooLargeError(limit)


def run_batch(
    records: Sequence[Any],
    store: CertificateStore,
    source: RecordSource = RecordSource.JSON,
    max_batch_size: Optional[int] = None,
) -> ImportReport:
    """Import a batch of raw certificate records.

    Args:
        records: Raw records in submission order
        store: Persistence backend
        source: Origin of the records (spreadsheet rows get name title-casing)
        max_batch_size: Override for the configured batch limit

    Returns:
        ImportReport with one outcome per input record

    Raises:
        BatchTooLargeError: If the batch exceeds the limit (nothing is processed)
    """
    check_batch_size(records, max_batch_size)

    resolver = DuplicateResolver(store)
    start = time.perf_counter()

    def step(report: ImportReport, item: Tuple[int, Any]) -> ImportReport:
        index, raw = item
        outcome = process_record(index, raw, store, resolver, source)
        certverify_import_records_total.labels(outcome=outcome.status.value).inc()
        return report.with_outcome(outcome)

    report = reduce(step, enumerate(records, 1), ImportReport())

    certverify_import_batch_size.observe(report.total)
    certverify_import_latency_seconds.observe(time.perf_counter() - start)
    certverify_import_batches_total.labels(outcome=report.outcome.value).inc()

    logger.info(
        f"Import complete ({source.value})",
        extra={
            "source": source.value,
            "outcome": report.outcome.value,
            "total": report.total,
            "successful": len(report.successful),
            "failed": len(report.failed),
            "skipped": len(report.skipped),
        },
    )
    return report


def failed_indexes(report: ImportReport) -> List[int]:
    """1-based positions of the records that need resubmitting."""
    return [outcome.index for outcome in report.failed]
