"""
Recruiter Import Routes

Admin endpoints for bulk-importing recruiters from a published
spreadsheet and inspecting past import runs:

- POST /recruiters/bulk-import - Run an import from a sheet URL
- GET /recruiters/import/history - Recorded runs, newest first
"""

import asyncio
import logging
import uuid

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.common.error_handling import ImportPreconditionError
from src.common.repositories import get_recruiter_repository, get_system_state_repository
from src.services.recruiter_import_service import RecruiterImportService

from ..auth import verify_admin_token
from ..config import settings
from ..models import (
    BulkImportRequest,
    BulkImportResponse,
    ImportFailureResponse,
    ImportHistoryResponse,
    ImportRunRecord,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recruiters", tags=["recruiters"])


def get_import_service() -> RecruiterImportService:
    """Build the import service on repositories configured from RunnerSettings."""
    repository_config = settings.repository_config()
    return RecruiterImportService(
        repository=get_recruiter_repository(repository_config),
        system_state_repository=get_system_state_repository(repository_config),
    )


def _failure(status_code: int, error: str, **extra) -> JSONResponse:
    body = ImportFailureResponse(error=error, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "/bulk-import",
    response_model=BulkImportResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ImportFailureResponse}, 500: {"model": ImportFailureResponse}},
    dependencies=[Depends(verify_admin_token)],
)
async def bulk_import_recruiters(request: BulkImportRequest):
    """
    Import recruiters from a Google Sheet.

    This endpoint:
    1. Derives the CSV export URL from the sheet URL and downloads it
    2. Parses rows and validates each one (email required)
    3. Skips emails that already exist (unless skip_duplicates=false)
    4. Inserts the rest in chunks, falling back to single inserts on failure
    5. Returns counts plus capped samples of validation and insert errors

    Returns:
        200 with the import summary, 400 for input problems (bad URL,
        unreachable or empty sheet, missing email column, no valid rows),
        500 for unexpected failures
    """
    if not request.sheet_url or not request.sheet_url.strip():
        return _failure(400, "sheet_url is required")

    run_id = uuid.uuid4().hex
    logger.info(
        f"[run:{run_id[:8]}] Bulk import requested: sheet_url={request.sheet_url}, "
        f"skip_duplicates={request.skip_duplicates}"
    )

    try:
        service = get_import_service()
        result = await asyncio.to_thread(
            service.import_from_sheet,
            request.sheet_url.strip(),
            request.skip_duplicates,
            run_id,
        )
    except ImportPreconditionError as e:
        logger.warning(f"[run:{run_id[:8]}] Import rejected: {e.message}")
        return _failure(e.status_code, e.message, errors=e.errors or None)
    except Exception as e:
        logger.exception(f"[run:{run_id[:8]}] Bulk import failed: {e}")
        return _failure(500, "Import failed", details=str(e))

    return result.to_response()


@router.get(
    "/import/history",
    response_model=ImportHistoryResponse,
    dependencies=[Depends(verify_admin_token)],
)
async def get_import_history(
    limit: int = Query(default=20, ge=1, le=50, description="Number of runs to return"),
):
    """
    Get the recorded bulk import runs.

    Returns the last N runs with timestamps and stats.
    """
    try:
        service = get_import_service()
        runs = await asyncio.to_thread(service.get_run_history, 50)
    except Exception as e:
        logger.error(f"Error getting import history: {e}")
        return _failure(500, "Could not load import history", details=str(e))

    return ImportHistoryResponse(
        runs=[ImportRunRecord(**run) for run in runs[:limit]],
        total_runs=len(runs),
    )
