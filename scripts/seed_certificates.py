"""
Reset the certificates table and insert one sample certificate.

Handy for local development against a fresh database:
    python scripts/seed_certificates.py
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from certverify.certificates.service import EXAMPLE_CERTIFICATE, create_certificate
from certverify.database import Base, SessionLocal, engine
from certverify.logging_config import setup_logging
from certverify.models.certificate import Certificate
from certverify.storage import SQLCertificateStore


def main():
    setup_logging()
    logger = logging.getLogger(__name__)

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        removed = db.execute(delete(Certificate)).rowcount
        db.commit()
        logger.info(f"Cleared {removed} existing certificates")

        certificate = create_certificate(EXAMPLE_CERTIFICATE, SQLCertificateStore(db))
        logger.info(f"Seeded certificate {certificate.intern_id} ({certificate.name})")
    except Exception as e:
        logger.error(f"Seeding failed: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
