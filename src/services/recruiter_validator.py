"""
Recruiter Row Validator

Maps sheet header names to column indices and turns each data row into
either a CandidateRecord or a RowError. Validation is total: every data
row ends up in exactly one of the two outputs, and a row never partially
validates.

Cosmetic fields (name, tier, quality_score) are never a reason to drop a
row. They go through parse-or-default helpers that return the value plus
an optional note, and notes are only logged.

Usage:
    from src.services.recruiter_validator import build_column_map, validate_rows

    records, errors = validate_rows(rows[0], rows[1:])
"""

import logging
import re
from typing import Iterable, List, Optional, Tuple

from src.common.dedupe import email_local_part, is_valid_email, normalize_email
from src.common.error_handling import MissingEmailColumnError
from src.common.types import (
    CandidateRecord,
    ColumnMap,
    RawRow,
    RECOGNIZED_COLUMNS,
    RecruiterTier,
    RowError,
)

logger = logging.getLogger(__name__)

DEFAULT_RECRUITER_NAME = "Recruiter"
QUALITY_SCORE_MIN = 0.0
QUALITY_SCORE_MAX = 100.0

# Plain decimal only: no exponents, digit separators, inf or nan
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

# Header is sheet row 1, so the first data row is row 2
FIRST_DATA_ROW_NUMBER = 2


def build_column_map(header: RawRow) -> ColumnMap:
    """
    Resolve recognized column names to indices.

    Header cells are lowercased and trimmed; the first matching column wins.

    Args:
        header: First parsed row of the sheet

    Returns:
        ColumnMap with the email index and any optional columns found

    Raises:
        MissingEmailColumnError: If no header cell matches `email`
    """
    normalized = [(cell or "").strip().lower() for cell in header]

    indices = {}
    for column in RECOGNIZED_COLUMNS:
        if column in normalized:
            indices[column] = normalized.index(column)

    if "email" not in indices:
        raise MissingEmailColumnError(normalized)

    return ColumnMap(
        email=indices["email"],
        name=indices.get("name"),
        company=indices.get("company"),
        domain=indices.get("domain"),
        tier=indices.get("tier"),
        quality_score=indices.get("quality_score"),
        found_columns=normalized,
    )


def _cell(row: RawRow, index: Optional[int]) -> str:
    """Return the trimmed cell at index, or '' when the column or cell is missing."""
    if index is None or index >= len(row):
        return ""
    return (row[index] or "").strip()


def derive_name(raw_name: str, email: str) -> Tuple[str, Optional[str]]:
    """
    Use the sheet name, falling back to the email local part, then "Recruiter".

    Returns:
        Tuple of (name, note)
    """
    if raw_name:
        return raw_name, None
    local = email_local_part(email)
    if local:
        return local, "name missing, derived from email"
    return DEFAULT_RECRUITER_NAME, "name missing, using default"


def parse_tier(raw_tier: str) -> Tuple[RecruiterTier, Optional[str]]:
    """
    Normalize a tier cell; unknown values are coerced to FREE.

    Returns:
        Tuple of (tier, note)
    """
    if not raw_tier:
        return RecruiterTier.FREE, None
    try:
        return RecruiterTier(raw_tier.upper()), None
    except ValueError:
        return RecruiterTier.FREE, f"unknown tier '{raw_tier}' coerced to FREE"


def parse_quality_score(raw_score: str) -> Tuple[Optional[float], Optional[str]]:
    """
    Parse a quality score, keeping it only when it lies within [0, 100].

    Returns:
        Tuple of (score or None, note)
    """
    if not raw_score:
        return None, None
    if not DECIMAL_PATTERN.match(raw_score):
        return None, f"quality_score '{raw_score}' is not a number"
    score = float(raw_score)
    if not QUALITY_SCORE_MIN <= score <= QUALITY_SCORE_MAX:
        return None, f"quality_score {raw_score} outside [0, 100]"
    return score, None


def validate_row(
    column_map: ColumnMap,
    row: RawRow,
    row_number: int,
) -> Tuple[Optional[CandidateRecord], Optional[RowError]]:
    """
    Validate one data row.

    Exactly one element of the returned tuple is set.
    """
    raw_email = _cell(row, column_map.email)
    if not raw_email:
        return None, RowError(row_number, "missing email field")
    if not is_valid_email(raw_email):
        return None, RowError(row_number, f"invalid email format: {raw_email}")

    email = normalize_email(raw_email)
    name, name_note = derive_name(_cell(row, column_map.name), email)
    tier, tier_note = parse_tier(_cell(row, column_map.tier))
    quality_score, score_note = parse_quality_score(_cell(row, column_map.quality_score))

    for note in (name_note, tier_note, score_note):
        if note:
            logger.debug(f"Row {row_number}: {note}")

    record = CandidateRecord(
        name=name,
        email=email,
        company=_cell(row, column_map.company) or None,
        domain=_cell(row, column_map.domain) or None,
        tier=tier,
        quality_score=quality_score,
        row_number=row_number,
    )
    return record, None


def validate_rows(
    header: RawRow,
    rows: Iterable[RawRow],
    first_row_number: int = FIRST_DATA_ROW_NUMBER,
) -> Tuple[List[CandidateRecord], List[RowError]]:
    """
    Validate data rows in source order.

    Args:
        header: Header row used to resolve columns
        rows: Data rows (header excluded)
        first_row_number: Sheet row number of the first data row

    Returns:
        Tuple of (records, errors), both in source order

    Raises:
        MissingEmailColumnError: Before any row is looked at, if the
            header has no `email` column
    """
    column_map = build_column_map(header)
    records: List[CandidateRecord] = []
    errors: List[RowError] = []

    for offset, row in enumerate(rows):
        record, error = validate_row(column_map, row, first_row_number + offset)
        if record is not None:
            records.append(record)
        else:
            errors.append(error)

    logger.info(f"Validated {len(records) + len(errors)} rows: {len(records)} valid, {len(errors)} invalid")
    return records, errors
