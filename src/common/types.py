"""
Canonical Types for the Recruiter Import Pipeline

Defines the data structures that flow between pipeline stages:
parsed rows, validated recruiter candidates, row-level errors,
and the terminal import result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# A parsed CSV row: ordered, trimmed string fields with no semantics yet
RawRow = List[str]


class RecruiterTier(str, Enum):
    """Display tier for a recruiter entry."""
    FREE = "FREE"
    PRO = "PRO"
    PRO_MAX = "PRO_MAX"


# Column names recognized in the sheet header (case-insensitive)
RECOGNIZED_COLUMNS = ("name", "email", "company", "domain", "tier", "quality_score")

SOURCE_PLATFORM = "sheet_import"


@dataclass
class ColumnMap:
    """
    Header name to column index mapping, built once from the header row.

    Only `email` is required; every other column may be absent (None).
    """
    email: int
    name: Optional[int] = None
    company: Optional[int] = None
    domain: Optional[int] = None
    tier: Optional[int] = None
    quality_score: Optional[int] = None
    found_columns: List[str] = field(default_factory=list)


@dataclass
class CandidateRecord:
    """A validated, normalized recruiter entry that has not been persisted yet."""

    name: str
    email: str
    company: Optional[str] = None
    domain: Optional[str] = None
    tier: RecruiterTier = RecruiterTier.FREE
    quality_score: Optional[float] = None
    row_number: Optional[int] = None

    def to_document(self) -> Dict[str, Any]:
        """
        Build the recruiters collection document for this record.

        Timestamps are added by the repository at write time.
        """
        return {
            "name": self.name,
            "email": self.email,
            "company": self.company,
            "domain": self.domain,
            "tier": self.tier.value,
            "quality_score": self.quality_score,
            "source_platform": SOURCE_PLATFORM,
        }


@dataclass
class RowError:
    """A non-fatal validation failure for a single source row."""

    row_index: int
    message: str

    def __str__(self) -> str:
        return f"Row {self.row_index}: {self.message}"


@dataclass
class DedupResult:
    """Output of the deduplication filter."""

    to_insert: List[CandidateRecord] = field(default_factory=list)
    duplicate_count: int = 0
    lookup_failures: int = 0


@dataclass
class InsertOutcome:
    """Output of the batch inserter."""

    inserted_count: int = 0
    duplicate_count: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    """
    Terminal report of one import run.

    Attributes:
        total_rows: Data rows in the source (header excluded)
        valid_count: Rows that produced a CandidateRecord
        inserted_count: Records written to storage
        duplicate_skipped_count: Records skipped as duplicates, before or at insert time
        invalid_skipped_count: Rows dropped by validation
        validation_errors: Capped sample of row-level validation messages
        insert_errors: Capped sample of insert failure messages
        total_error_count: True number of validation + insert errors
        warning: Informational note (e.g. possible upstream truncation)
    """
    total_rows: int = 0
    valid_count: int = 0
    inserted_count: int = 0
    duplicate_skipped_count: int = 0
    invalid_skipped_count: int = 0
    validation_errors: List[str] = field(default_factory=list)
    insert_errors: List[str] = field(default_factory=list)
    total_error_count: int = 0
    warning: Optional[str] = None
    duration_ms: int = 0

    @property
    def errors(self) -> List[str]:
        """Combined error sample, validation errors first."""
        return self.validation_errors + self.insert_errors

    @property
    def message(self) -> str:
        return (
            f"Import completed: {self.inserted_count} inserted, "
            f"{self.duplicate_skipped_count} skipped"
        )

    def stats(self) -> Dict[str, int]:
        """Counters in the shape returned to API callers."""
        return {
            "total_rows": self.total_rows,
            "valid_recruiters": self.valid_count,
            "inserted": self.inserted_count,
            "skipped": self.duplicate_skipped_count,
            "skipped_invalid": self.invalid_skipped_count,
            "errors": self.total_error_count,
        }

    def to_response(self) -> Dict[str, Any]:
        """Convert to the JSON body returned by the bulk import endpoint."""
        response: Dict[str, Any] = {
            "success": True,
            "message": self.message,
            "stats": self.stats(),
        }

        if self.total_error_count > 0:
            sample_size = len(self.validation_errors) + len(self.insert_errors)
            if sample_size < self.total_error_count:
                note = f"Showing first {sample_size} of {self.total_error_count} errors"
            else:
                note = f"{self.total_error_count} rows could not be imported"
            response["errors"] = {
                "validation_errors": self.validation_errors,
                "insert_errors": self.insert_errors,
                "total_count": self.total_error_count,
                "message": note,
            }

        if self.warning:
            response["warning"] = self.warning

        return response
