"""
SQLAlchemy model for issued internship certificates.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Integer, String

from certverify.database import Base

CERTIFICATE_STATUSES = ("active", "revoked")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Certificate(Base):
    """
    One certificate per intern, keyed by the upper-cased ``intern_id``.

    Dates are stored as ``DD-MM-YYYY`` text so they redisplay exactly as
    issued, without timezone conversion.
    """

    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    intern_id = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    domain = Column(String(255), nullable=False)
    duration = Column(Integer, nullable=False)
    starting_date = Column(String(10), nullable=False)
    completion_date = Column(String(10), nullable=False)
    email = Column(String(255), nullable=True)
    contact_no = Column(String(32), nullable=True)

    mentor_name = Column(String(255), nullable=True)
    mentor_email = Column(String(255), nullable=True)
    mentor_contact_no = Column(String(32), nullable=True)

    status = Column(String(16), nullable=False, default="active", index=True)
    created_at = Column(DateTime, default=_utcnow, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    @property
    def is_revoked(self) -> bool:
        return self.status == "revoked"

    def __repr__(self):
        return f"<Certificate(intern_id={self.intern_id}, status={self.status})>"
