"""
Field normalization for incoming certificate records.

Raw records come from JSON clients (``internId``), hand-written payloads
(``"Intern ID"``) and spreadsheet rows (``"Name of the Intern"``,
``"Start Date"``). ``normalize_record`` maps every shape onto one canonical
``CertificateRecord``. It never raises: missing or malformed input simply
leaves the canonical field empty for the validator to report.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from .dates import normalize_date

# Canonical field -> accepted source keys, in priority order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "internId": ("internId", "intern_id", "Intern ID"),
    "name": ("name", "Name", "Name of the Intern"),
    "domain": ("domain", "Domain"),
    "duration": ("duration", "Duration", "Duration (in months)"),
    "startingDate": ("startingDate", "starting_date", "Starting Date", "Start Date"),
    "completionDate": (
        "completionDate",
        "completion_date",
        "Completion Date",
        "End Date",
    ),
    "email": ("email", "Email", "Email ID"),
    "contactNo": ("contactNo", "contact_no", "Contact No."),
    "status": ("status", "Status"),
}

# Flat spreadsheet columns used when no nested ``mentor`` mapping is given
MENTOR_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": ("Mentor Name", "mentorName", "mentor_name"),
    "email": ("Mentor Email ID", "Mentor Email", "mentorEmail", "mentor_email"),
    "contactNo": ("Mentor Contact No.", "mentorContactNo", "mentor_contact_no"),
}

# Fields a stored certificate may change through update-by-key
UPDATABLE_FIELDS = (
    "name",
    "domain",
    "duration",
    "startingDate",
    "completionDate",
    "email",
    "status",
)

_WORD = re.compile(r"\w\S*")
_NON_DIGIT = re.compile(r"\D")
_KEY_NOISE = re.compile(r"[^a-z0-9]")


class RecordSource(str, Enum):
    """Where a raw record came from; spreadsheets get extra text cleanup."""

    JSON = "json"
    SPREADSHEET = "spreadsheet"


@dataclass(slots=True)
class MentorRecord:
    name: Optional[str] = None
    email: Optional[str] = None
    contact_no: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.name or self.email or self.contact_no)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"name": self.name, "email": self.email, "contactNo": self.contact_no}


@dataclass(slots=True)
class CertificateRecord:
    """Canonical certificate shape produced by the normalizer.

    Date fields hold a ``DD-MM-YYYY`` string when parseable, otherwise the
    untouched source value. ``duration`` is an int when coercible.
    """

    intern_id: str = ""
    name: str = ""
    domain: str = ""
    duration: Any = None
    starting_date: Any = None
    completion_date: Any = None
    email: Optional[str] = None
    contact_no: Optional[str] = None
    status: str = "active"
    mentor: Optional[MentorRecord] = None
    source_keys: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the public camelCase field names."""
        result: Dict[str, Any] = {
            "internId": self.intern_id,
            "name": self.name,
            "domain": self.domain,
            "duration": self.duration,
            "startingDate": self.starting_date,
            "completionDate": self.completion_date,
            "email": self.email,
            "contactNo": self.contact_no,
            "status": self.status,
        }
        if self.mentor is not None:
            result["mentor"] = self.mentor.to_dict()
        return result


# ----------------------------------------------------------------------
# Text helpers
# ----------------------------------------------------------------------


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def title_case(value: str) -> str:
    """Upper-case the first letter of every word, lower-case the rest."""
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), value)


def normalize_intern_id(value: Any) -> str:
    return _text(value).upper()


def normalize_email(value: Any) -> Optional[str]:
    text = _text(value).lower()
    return text or None


def normalize_contact(value: Any) -> Optional[str]:
    digits = _NON_DIGIT.sub("", _text(value))
    return digits or None


def normalize_duration(value: Any) -> Any:
    """Coerce a duration to whole months where possible.

    Non-integral or non-numeric values are returned unchanged.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if re.fullmatch(r"[+-]?\d+", text):
            return int(text)
        try:
            number = float(text)
        except ValueError:
            return value
        return int(number) if number.is_integer() else value
    return value


def normalize_status(value: Any) -> str:
    text = _text(value).lower()
    return text or "active"


# ----------------------------------------------------------------------
# Key resolution
# ----------------------------------------------------------------------


def _fold(key: Any) -> str:
    return _KEY_NOISE.sub("", str(key).lower())


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_field(raw: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    """Return the first non-blank value among ``aliases``.

    Exact key matches win; a case- and punctuation-insensitive pass runs
    afterwards in the same alias order. Returns None when nothing matches.
    """
    aliases = tuple(aliases)
    for alias in aliases:
        if alias in raw and not _is_blank(raw[alias]):
            return raw[alias]

    folded: Dict[str, Any] = {}
    for key, value in raw.items():
        folded.setdefault(_fold(key), value)
    for alias in aliases:
        value = folded.get(_fold(alias))
        if not _is_blank(value):
            return value
    return None


def _resolve_mentor(raw: Mapping[str, Any], source: RecordSource) -> Optional[MentorRecord]:
    nested = resolve_field(raw, ("mentor", "Mentor"))
    lookup: Mapping[str, Any] = nested if isinstance(nested, Mapping) else {}

    def pick(key: str) -> Any:
        if lookup:
            value = resolve_field(lookup, (key, key.capitalize()))
            if not _is_blank(value):
                return value
        return resolve_field(raw, MENTOR_ALIASES[key])

    name = _text(pick("name"))
    if name and source is RecordSource.SPREADSHEET:
        name = title_case(name)

    mentor = MentorRecord(
        name=name or None,
        email=normalize_email(pick("email")),
        contact_no=normalize_contact(pick("contactNo")),
    )
    return None if mentor.is_empty() else mentor


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------


def normalize_record(
    raw: Any, source: RecordSource = RecordSource.JSON
) -> CertificateRecord:
    """Map one raw record onto the canonical certificate shape.

    Args:
        raw: Mapping keyed by canonical or display names. Anything else is
            treated as an empty record.
        source: Spreadsheet rows additionally get title-cased names.

    Returns:
        CertificateRecord with normalized values
    """
    if not isinstance(raw, Mapping):
        return CertificateRecord()

    name = _text(resolve_field(raw, FIELD_ALIASES["name"]))
    if name and source is RecordSource.SPREADSHEET:
        name = title_case(name)

    return CertificateRecord(
        intern_id=normalize_intern_id(resolve_field(raw, FIELD_ALIASES["internId"])),
        name=name,
        domain=_text(resolve_field(raw, FIELD_ALIASES["domain"])),
        duration=normalize_duration(resolve_field(raw, FIELD_ALIASES["duration"])),
        starting_date=normalize_date(resolve_field(raw, FIELD_ALIASES["startingDate"])),
        completion_date=normalize_date(
            resolve_field(raw, FIELD_ALIASES["completionDate"])
        ),
        email=normalize_email(resolve_field(raw, FIELD_ALIASES["email"])),
        contact_no=normalize_contact(resolve_field(raw, FIELD_ALIASES["contactNo"])),
        status=normalize_status(resolve_field(raw, FIELD_ALIASES["status"])),
        mentor=_resolve_mentor(raw, source),
        source_keys=tuple(str(key) for key in raw.keys()),
    )


def normalize_changes(raw: Any) -> Dict[str, Any]:
    """Resolve the updatable fields present in a partial update payload.

    Only keys that actually appear (under any alias) are returned, keyed by
    canonical camelCase name. Dates are canonicalized, unparseable ones are
    passed through.
    """
    if not isinstance(raw, Mapping):
        return {}

    changes: Dict[str, Any] = {}
    for canonical in UPDATABLE_FIELDS:
        value = resolve_field(raw, FIELD_ALIASES[canonical])
        if value is None:
            # Explicitly blanked required text is kept so validation rejects it
            if canonical in ("name", "domain") and any(
                alias in raw for alias in FIELD_ALIASES[canonical]
            ):
                changes[canonical] = ""
            continue
        if canonical in ("startingDate", "completionDate"):
            changes[canonical] = normalize_date(value)
        elif canonical == "duration":
            changes[canonical] = normalize_duration(value)
        elif canonical == "email":
            changes[canonical] = normalize_email(value)
        elif canonical == "status":
            changes[canonical] = _text(value).lower()
        else:
            changes[canonical] = _text(value)
    return changes
