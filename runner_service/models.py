"""
Shared Pydantic models for the import service.

These models define the structure for API requests and responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BulkImportRequest(BaseModel):
    """Request body for a bulk recruiter import."""

    sheet_url: Optional[str] = Field(
        None, description="Published Google Sheets URL with a header row."
    )
    skip_duplicates: bool = Field(
        True, description="Skip recruiters whose email already exists."
    )


class ImportStats(BaseModel):
    """Counters for one import run."""

    total_rows: int
    valid_recruiters: int
    inserted: int
    skipped: int
    skipped_invalid: int
    errors: int


class ImportErrors(BaseModel):
    """Capped error samples with the true total."""

    validation_errors: List[str] = Field(default_factory=list)
    insert_errors: List[str] = Field(default_factory=list)
    total_count: int
    message: str


class BulkImportResponse(BaseModel):
    """Successful import summary."""

    success: bool = True
    message: Optional[str] = None
    stats: ImportStats
    errors: Optional[ImportErrors] = None
    warning: Optional[str] = None


class ImportFailureResponse(BaseModel):
    """Body returned for 4xx/5xx import failures."""

    success: bool = False
    error: str
    errors: Optional[List[str]] = None
    details: Optional[str] = None


class ImportRunRecord(BaseModel):
    """One entry of the import run history."""

    timestamp: Optional[datetime] = None
    source: Optional[str] = None
    skip_duplicates: Optional[bool] = None
    stats: Dict[str, Any] = Field(default_factory=dict)


class ImportHistoryResponse(BaseModel):
    """Recorded import runs, newest first."""

    runs: List[ImportRunRecord] = Field(default_factory=list)
    total_runs: int = 0


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
