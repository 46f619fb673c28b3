"""
Read certificate rows out of an uploaded ``.xlsx`` workbook.

Only the first worksheet is used. Intern sheets start with a title block,
so the header row is located by content (``S. No.`` / ``Intern ID`` /
``Name of the Intern``) rather than position. Data rows follow the header
until the first row whose first cell is empty.
"""

import logging
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Sequence
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from certverify.exceptions import BadRequestException

logger = logging.getLogger(__name__)

HEADER_MARKERS = ("s. no.", "intern id", "name of the intern")

# Labels of the standard intern sheet. A header cell that starts with one of
# these (e.g. "Name of the Intern (as per ID)") is keyed by the label itself.
SHEET_COLUMNS = (
    "S. No.",
    "Intern ID",
    "Name of the Intern",
    "Domain",
    "Duration (in months)",
    "Start Date",
    "End Date",
    "Email ID",
    "Contact No.",
    "Mentor Name",
    "Mentor Email ID",
    "Mentor Contact No.",
)

HEADER_NOT_FOUND_MESSAGE = (
    "Could not find header row in Excel file. "
    'Please ensure your file has headers like "S. No." in the first column.'
)


class SpreadsheetFormatError(BadRequestException):
    """Uploaded file is not a readable certificate workbook"""


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def is_header_row(row: Sequence[Any]) -> bool:
    if len(row) < len(HEADER_MARKERS):
        return False
    serial, intern_id, name = (_cell_text(v).lower() for v in row[:3])
    return (
        serial == HEADER_MARKERS[0]
        and intern_id == HEADER_MARKERS[1]
        and HEADER_MARKERS[2] in name
    )


def canonical_header(value: Any) -> str:
    """Map a header cell onto its standard sheet label when it extends one."""
    text = _cell_text(value)
    lowered = text.lower()
    matches = [label for label in SHEET_COLUMNS if lowered.startswith(label.lower())]
    return max(matches, key=len) if matches else text


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def rows_to_records(rows: Iterable[Sequence[Any]]) -> List[Dict[str, Any]]:
    """Turn raw worksheet rows into dicts keyed by header text.

    Raises:
        SpreadsheetFormatError: If no header row is present
    """
    headers: Optional[List[str]] = None
    records: List[Dict[str, Any]] = []

    for row in rows:
        if headers is None:
            if is_header_row(row):
                headers = [canonical_header(v) for v in row]
            continue

        if not row or _is_blank(row[0]):
            break

        records.append(
            {
                header: row[i] if i < len(row) else None
                for i, header in enumerate(headers)
                if header
            }
        )

    if headers is None:
        raise SpreadsheetFormatError(HEADER_NOT_FOUND_MESSAGE)

    logger.info(f"Found {len(records)} data rows after header")
    return records


def read_workbook(content: bytes) -> List[Dict[str, Any]]:
    """Parse workbook bytes into raw certificate records.

    Cells formatted as dates arrive as ``datetime``; unformatted date cells
    stay numeric serials. Both are handled by the normalizer.
    """
    try:
        workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        logger.warning(f"Unreadable workbook upload: {e}")
        raise SpreadsheetFormatError(f"Error processing Excel file: {e}") from e

    try:
        if not workbook.worksheets:
            raise SpreadsheetFormatError(HEADER_NOT_FOUND_MESSAGE)
        sheet = workbook.worksheets[0]
        return rows_to_records(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()
