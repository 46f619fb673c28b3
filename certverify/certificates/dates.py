"""
Date handling for certificate records.

Certificates arrive with dates in several shapes: ``DD-MM-YYYY`` text,
``YYYY-MM-DD`` (or full ISO) text, native ``date``/``datetime`` values from a
workbook reader, and raw spreadsheet serial numbers. Everything is reduced
to one canonical ``DD-MM-YYYY`` string before it reaches storage.

All functions here are pure and never raise on bad input.
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser

CANONICAL_FORMAT = "%d-%m-%Y"

# Day 25569 of the spreadsheet calendar is 1970-01-01
SPREADSHEET_EPOCH_OFFSET = 25569
MS_PER_DAY = 86400 * 1000

_UNIX_EPOCH = datetime(1970, 1, 1)


def serial_to_date(serial: float) -> Optional[date]:
    """Convert a spreadsheet date serial to a calendar date.

    Uses ``(serial - 25569) * 86400 * 1000`` milliseconds since the Unix
    epoch, read as UTC so the day never shifts with the server timezone.
    """
    try:
        millis = (float(serial) - SPREADSHEET_EPOCH_OFFSET) * MS_PER_DAY
        return (_UNIX_EPOCH + timedelta(milliseconds=millis)).date()
    except (OverflowError, ValueError):
        return None


def _parse_day_first(parts: list) -> Optional[date]:
    if len(parts) != 3 or not all(p.strip().isdigit() for p in parts):
        return None
    day, month, year = (int(p) for p in parts)
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """Parse any accepted date representation.

    Args:
        value: ``date``/``datetime``, spreadsheet serial (int/float), or text

    Returns:
        The calendar date, or None when the value is empty or unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        return serial_to_date(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if "-" in text:
        parts = text.split("-")
        # Two-character first segment means day first (DD-MM-YYYY)
        if len(parts[0]) == 2:
            return _parse_day_first(parts)

    try:
        return date_parser.isoparse(text).date()
    except (ValueError, OverflowError):
        pass

    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError):
        return None


def format_date(value: date) -> str:
    """Render a date in the canonical DD-MM-YYYY form."""
    return value.strftime(CANONICAL_FORMAT)


def normalize_date(value: Any) -> Any:
    """Canonicalize a date value for storage.

    Returns the ``DD-MM-YYYY`` string when the value parses, None for empty
    input, and the original value unchanged otherwise so validation can
    report it.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None

    parsed = parse_date(value)
    if parsed is None:
        return value
    return format_date(parsed)


def display_date(value: Any) -> str:
    """Best-effort DD-MM-YYYY rendering for stored values.

    Legacy rows may hold ISO text; anything unparseable is echoed back as-is.
    """
    if value is None:
        return ""
    parsed = parse_date(value)
    if parsed is None:
        return str(value)
    return format_date(parsed)
