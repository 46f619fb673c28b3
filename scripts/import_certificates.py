"""
Import certificates from a JSON or .xlsx file.

Runs the same batch pipeline as the bulk endpoints, so re-running a file is
safe: already stored intern ids are reported as skipped.

Usage:
    python scripts/import_certificates.py interns.xlsx
    python scripts/import_certificates.py certificates.json --dry-run
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from certverify.certificates.importer import failed_indexes, run_batch
from certverify.certificates.normalizer import RecordSource
from certverify.certificates.spreadsheet import read_workbook
from certverify.exceptions import CertVerifyException
from certverify.logging_config import setup_logging
from certverify.storage import InMemoryCertificateStore, SQLCertificateStore

logger = logging.getLogger(__name__)


def load_records(path: Path):
    """Return (records, source) for a JSON list/envelope or a workbook."""
    if path.suffix.lower() in (".xlsx", ".xlsm"):
        return read_workbook(path.read_bytes()), RecordSource.SPREADSHEET

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("certificates")
    if not isinstance(data, list):
        raise ValueError('Expected a JSON array or an object with a "certificates" array')
    return data, RecordSource.JSON


def main():
    parser = argparse.ArgumentParser(description="Bulk import internship certificates")
    parser.add_argument("path", type=Path, help="JSON or .xlsx file to import")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and classify records without touching the database",
    )
    parser.add_argument("--batch-size", type=int, help="Override IMPORT_MAX_BATCH_SIZE")
    parser.add_argument("--output", type=Path, help="Write the full report as JSON")
    args = parser.parse_args()

    setup_logging()

    try:
        records, source = load_records(args.path)
    except (OSError, ValueError, CertVerifyException) as e:
        logger.error(f"Could not read {args.path}: {e}")
        sys.exit(1)

    logger.info(f"Loaded {len(records)} records from {args.path}")

    db = None
    if args.dry_run:
        store = InMemoryCertificateStore()
    else:
        from certverify.database import Base, SessionLocal, engine

        Base.metadata.create_all(bind=engine)
        db = SessionLocal()
        store = SQLCertificateStore(db)

    try:
        report = run_batch(records, store, source, max_batch_size=args.batch_size)
    except CertVerifyException as e:
        logger.error(e.message)
        sys.exit(1)
    finally:
        if db is not None:
            db.close()

    print(report.message)
    for outcome in report.failed:
        print(f"  row {outcome.index} ({outcome.intern_id}): {'; '.join(outcome.errors)}")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(report.to_response(), f, indent=2)
        logger.info(f"Report written to {args.output}")

    if report.failed:
        logger.warning(f"Resubmit rows: {failed_indexes(report)}")
    sys.exit(0 if report.success else 2)


if __name__ == "__main__":
    main()
