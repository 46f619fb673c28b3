"""
SQLAlchemy model for the program catalog.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text

from certverify.database import Base

PROGRAM_CATEGORIES = (
    "Business",
    "Development",
    "Cybersecurity",
    "Data Science",
    "Business & Analytics",
    "Cyber Security",
    "AI & Machine Learning",
    "Data & Analytics",
)

PROGRAM_LEVELS = ("Beginner", "Intermediate", "Advanced", "Beginner to Intermediate")

PROGRAM_STATUSES = ("active", "inactive")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Program(Base):
    """
    Catalog entry for an internship/training program.
    """

    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    summary = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)
    level = Column(String(64), nullable=False, index=True)
    duration = Column(String(64), nullable=False)
    rating = Column(Float, default=0)
    skills = Column(JSON, default=list)
    thumbnail = Column(String(1024), nullable=True)
    details_link = Column(String(1024), nullable=True, index=True)

    overview = Column(Text, nullable=True)
    detailed_summary = Column(Text, nullable=True)
    course_topics = Column(JSON, default=list)
    technologies = Column(JSON, default=list)
    original_price = Column(Float, default=2000)
    discounted_price = Column(Float, default=1499)
    modules = Column(Integer, default=6)
    hours = Column(Integer, default=8)
    certificate_image = Column(String(1024), nullable=True)
    additional_images = Column(JSON, default=list)

    status = Column(String(16), nullable=False, default="active", index=True)
    created_at = Column(DateTime, default=_utcnow, index=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the catalog's public camelCase field names."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "category": self.category,
            "level": self.level,
            "duration": self.duration,
            "rating": self.rating,
            "skills": list(self.skills or []),
            "thumbnail": self.thumbnail,
            "detailsLink": self.details_link,
            "overview": self.overview,
            "detailedSummary": self.detailed_summary,
            "courseTopics": list(self.course_topics or []),
            "technologies": list(self.technologies or []),
            "originalPrice": self.original_price,
            "discountedPrice": self.discounted_price,
            "modules": self.modules,
            "hours": self.hours,
            "certificateImage": self.certificate_image,
            "additionalImages": list(self.additional_images or []),
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Program(id={self.id}, title={self.title!r})>"
