"""
Program catalog operations.

Plain CRUD over the ``programs`` table plus the forgiving by-name lookup the
public site uses for URLs like ``/programs/ai-ml-internship``.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import String, cast, delete, or_, select
from sqlalchemy.orm import Session

from certverify.exceptions import (
    BadRequestException,
    NotFoundException,
    ValidationException,
)
from certverify.models.program import (
    PROGRAM_CATEGORIES,
    PROGRAM_LEVELS,
    PROGRAM_STATUSES,
    Program,
)

logger = logging.getLogger(__name__)

PROGRAM_NOT_FOUND = "Program not found"

EXAMPLE_PROGRAM: Dict[str, Any] = {
    "title": "Business Analyst Internship Program",
    "summary": "Master data-driven decision making and business intelligence tools.",
    "category": "Business",
    "level": "Beginner",
    "duration": "3 months",
    "rating": 4.8,
    "skills": ["SQL", "Tableau", "Excel", "Analytics"],
    "thumbnail": "https://example.com/image.jpg",
    "detailsLink": "/programs/business-analyst",
}

# Public field -> column
TEXT_FIELDS = {
    "title": "title",
    "summary": "summary",
    "category": "category",
    "level": "level",
    "duration": "duration",
    "thumbnail": "thumbnail",
    "detailsLink": "details_link",
    "overview": "overview",
    "detailedSummary": "detailed_summary",
    "certificateImage": "certificate_image",
    "status": "status",
}
LIST_FIELDS = {
    "skills": "skills",
    "courseTopics": "course_topics",
    "technologies": "technologies",
    "additionalImages": "additional_images",
}
NUMBER_FIELDS = {
    "rating": ("rating", float, 0),
    "originalPrice": ("original_price", float, 2000),
    "discountedPrice": ("discounted_price", float, 1499),
    "modules": ("modules", int, 6),
    "hours": ("hours", int, 8),
}

# Search-term abbreviations expanded into title patterns
WORD_EXPANSIONS = {
    "ai": r"(ai|artificial.?intelligence)",
    "ml": r"(ml|machine.?learning)",
    "frontend": r"(front.?end|frontend)",
    "backend": r"(back.?end|backend)",
    "fullstack": r"(full.?stack|fullstack)",
    "full-stack": r"(full.?stack|fullstack)",
}


# ----------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def validate_program(data: Mapping[str, Any]) -> List[str]:
    """Collect every defect in a program payload."""
    errors: List[str] = []

    if _blank(data.get("title")):
        errors.append("Title is required")
    if _blank(data.get("summary")):
        errors.append("Summary is required")

    category = data.get("category")
    if _blank(category):
        errors.append("Category is required")
    elif category not in PROGRAM_CATEGORIES:
        errors.append(f"Category must be one of: {', '.join(PROGRAM_CATEGORIES)}")

    level = data.get("level")
    if _blank(level):
        errors.append("Level is required")
    elif level not in PROGRAM_LEVELS:
        errors.append(f"Level must be one of: {', '.join(PROGRAM_LEVELS)}")

    if _blank(data.get("duration")):
        errors.append("Duration is required")

    rating = data.get("rating")
    if rating is not None:
        number = _as_number(rating)
        if number is None or number < 0 or number > 5:
            errors.append("Rating must be a number between 0 and 5")

    status = data.get("status")
    if status is not None and status not in PROGRAM_STATUSES:
        errors.append(f"Status must be one of: {', '.join(PROGRAM_STATUSES)}")

    return errors


def _column_values(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a validated public payload to trimmed column values with defaults."""
    values: Dict[str, Any] = {}
    for key, column in TEXT_FIELDS.items():
        value = data.get(key)
        values[column] = str(value).strip() if not _blank(value) else None
    values["status"] = values["status"] or "active"

    for key, column in LIST_FIELDS.items():
        items = data.get(key)
        values[column] = (
            [str(item).strip() for item in items] if isinstance(items, list) else []
        )

    for key, (column, kind, default) in NUMBER_FIELDS.items():
        number = _as_number(data.get(key))
        values[column] = kind(number) if number else default

    return values


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------


def list_programs(
    db: Session,
    status: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[str] = None,
    search: Optional[str] = None,
) -> List[Program]:
    """Programs newest first. ``status='all'`` disables the status filter."""
    stmt = select(Program)
    if status and status != "all":
        stmt = stmt.where(Program.status == status)
    if category:
        stmt = stmt.where(Program.category == category)
    if level:
        stmt = stmt.where(Program.level == level)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Program.title.ilike(pattern),
                Program.summary.ilike(pattern),
                cast(Program.skills, String).ilike(pattern),
            )
        )
    stmt = stmt.order_by(Program.created_at.desc(), Program.id.desc())
    return list(db.execute(stmt).scalars().all())


def _slug_words(name: str) -> List[str]:
    return [w for w in re.split(r"\s+", name.replace("-", " ").replace("_", " ").strip()) if w]


def _word_pattern(word: str) -> str:
    return WORD_EXPANSIONS.get(word.lower(), re.escape(word))


def _first_title_match(db: Session, pattern: str) -> Optional[Program]:
    regex = re.compile(pattern, re.IGNORECASE)
    for program in db.execute(select(Program).order_by(Program.id)).scalars():
        if regex.search(program.title or ""):
            return program
    return None


def find_program_by_name(db: Session, name: str) -> Program:
    """Resolve a URL slug or free-form name to a program.

    Tries, in order: exact ``detailsLink`` match, all words in order, all
    words in any order. Abbreviations like ``ai``/``ml`` are expanded.
    """
    program = db.execute(
        select(Program).where(Program.details_link == f"/programs/{name}")
    ).scalars().first()

    words = _slug_words(name)
    if program is None and words:
        program = _first_title_match(db, ".*".join(_word_pattern(w) for w in words))
        if program is None:
            any_order = "".join(f"(?=.*{_word_pattern(w)})" for w in words)
            program = _first_title_match(db, any_order)

    if program is None:
        raise NotFoundException(PROGRAM_NOT_FOUND)
    return program


def get_program(db: Session, program_id: str) -> Program:
    """Fetch by numeric id, falling back to a title match for older links."""
    program = None
    if program_id.isdigit():
        program = db.get(Program, int(program_id))

    if program is None:
        words = _slug_words(program_id)
        if words:
            program = _first_title_match(db, ".*".join(re.escape(w) for w in words))

    if program is None:
        raise NotFoundException(PROGRAM_NOT_FOUND)
    return program


def _get_by_id(db: Session, program_id: int) -> Program:
    program = db.get(Program, program_id)
    if program is None:
        raise NotFoundException(PROGRAM_NOT_FOUND)
    return program


# ----------------------------------------------------------------------
# Mutations
# ----------------------------------------------------------------------


def create_program(db: Session, payload: Any) -> Program:
    if not isinstance(payload, Mapping) or not payload:
        raise BadRequestException(
            "Request body is empty. Please provide program data.",
            extra={"example": EXAMPLE_PROGRAM},
        )

    errors = validate_program(payload)
    if errors:
        raise ValidationException(errors)

    program = Program(**_column_values(payload))
    db.add(program)
    db.commit()
    db.refresh(program)
    logger.info(f"Program {program.id} created: {program.title}")
    return program


def update_program(db: Session, program_id: int, payload: Any) -> Program:
    """Partial update; the merged result must still be a valid program."""
    program = _get_by_id(db, program_id)
    if not isinstance(payload, Mapping):
        payload = {}

    merged = program.to_dict()
    merged.update({k: v for k, v in payload.items() if k in merged})

    errors = validate_program(merged)
    if errors:
        raise ValidationException(errors)

    for column, value in _column_values(merged).items():
        setattr(program, column, value)
    db.commit()
    db.refresh(program)
    logger.info(f"Program {program.id} updated")
    return program


def delete_program(db: Session, program_id: int) -> Program:
    program = _get_by_id(db, program_id)
    db.delete(program)
    db.commit()
    logger.info(f"Program {program_id} deleted")
    return program


def delete_all_programs(db: Session) -> int:
    result = db.execute(delete(Program))
    db.commit()
    logger.warning(f"Deleted all programs ({result.rowcount})")
    return result.rowcount
