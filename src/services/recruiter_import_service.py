"""
Recruiter Import Service

Runs the bulk recruiter import pipeline end to end:

    sheet URL -> fetch CSV -> parse -> validate -> dedup -> insert -> report

Used by both:
- Runner endpoint (POST /recruiters/bulk-import)
- CLI script (scripts/import_recruiters.py)

The run is single-pass with no resumability. A failed run is re-submitted
from scratch; skip_duplicates plus the unique email index make that safe.

Usage:
    from src.services.recruiter_import_service import RecruiterImportService

    service = RecruiterImportService()
    result = service.import_from_sheet(sheet_url, skip_duplicates=True)
    print(result.to_response())
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from src.common.csv_parser import parse_csv
from src.common.error_handling import (
    EmptySheetError,
    NoValidRecruitersError,
    RepositoryError,
    StorageUnavailableError,
    log_on_exception,
)
from src.common.import_config import ImportConfig, get_import_config
from src.common.logger import get_logger
from src.common.repositories import (
    get_recruiter_repository,
    RecruiterRepositoryInterface,
    get_system_state_repository,
    SystemStateRepositoryInterface,
)
from src.common.types import ImportResult
from src.services.import_reporter import build_import_result
from src.services.recruiter_dedup import DedupFilter
from src.services.recruiter_inserter import BatchInserter
from src.services.recruiter_validator import validate_rows
from src.services.sheet_source import SheetSource

logger = logging.getLogger(__name__)

# Type alias for log callback
LogCallback = Callable[[str], None]

IMPORT_STATE_ID = "import_recruiters"
RUN_HISTORY_LIMIT = 50


class RecruiterImportService:
    """
    Bulk recruiter import from a spreadsheet.

    Features:
    - Quote-aware CSV parsing
    - Per-row validation with silent normalization of cosmetic fields
    - Batched existing-email lookup with a configurable failure policy
    - Chunked inserts with per-record fallback
    - Run history in the system_state collection
    """

    def __init__(
        self,
        repository: Optional[RecruiterRepositoryInterface] = None,
        system_state_repository: Optional[SystemStateRepositoryInterface] = None,
        sheet_source: Optional[SheetSource] = None,
        config: Optional[ImportConfig] = None,
        log_callback: Optional[LogCallback] = None,
    ):
        """
        Initialize the import service.

        Args:
            repository: Optional recruiter repository (defaults to the configured singleton)
            system_state_repository: Optional state repository for run history
            sheet_source: Optional sheet fetcher
            config: Optional tunables (defaults to environment config)
            log_callback: Optional callback for progress messages (e.g. CLI output)
        """
        self._repository = repository
        self._system_state_repository = system_state_repository
        self._config = config or get_import_config()
        self._sheet_source = sheet_source or SheetSource(timeout=self._config.fetch_timeout)
        self._log_callback = log_callback
        self._indexes_checked = False

    def _get_repository(self) -> RecruiterRepositoryInterface:
        if self._repository is None:
            self._repository = get_recruiter_repository()
        if not self._indexes_checked:
            self._ensure_email_index(self._repository)
        return self._repository

    def _get_system_state_repository(self) -> SystemStateRepositoryInterface:
        if self._system_state_repository is None:
            self._system_state_repository = get_system_state_repository()
        return self._system_state_repository

    def _ensure_email_index(self, repository: RecruiterRepositoryInterface) -> None:
        """
        Make sure the unique email index exists before anything is written.

        An unreachable backend propagates. Any other index failure (for
        example duplicates already stored) is logged and the run continues
        with lookup-based duplicate detection only.
        """
        try:
            repository.ensure_indexes()
        except StorageUnavailableError:
            raise
        except RepositoryError as e:
            logger.error(f"Unique email index unavailable, insert-time duplicate detection is off: {e}")
        self._indexes_checked = True

    def ensure_indexes(self) -> None:
        """Create the unique email index, raising RepositoryError on failure."""
        if self._repository is None:
            self._repository = get_recruiter_repository()
        self._repository.ensure_indexes()
        self._indexes_checked = True

    def _log(self, message: str) -> None:
        """Emit a progress message via callback if available."""
        if self._log_callback:
            self._log_callback(message)

    def import_from_sheet(
        self,
        sheet_url: str,
        skip_duplicates: bool = True,
        run_id: Optional[str] = None,
    ) -> ImportResult:
        """
        Fetch a sheet's CSV export and import its rows.

        Raises:
            InvalidSheetUrlError: URL is not a spreadsheet URL
            SheetFetchError: Export could not be downloaded
            (plus everything import_csv_text raises)
        """
        run_id = run_id or uuid.uuid4().hex
        run_log = get_logger(__name__, run_id=run_id, stage="fetch")

        run_log.info(f"Starting import from {sheet_url} (skip_duplicates={skip_duplicates})")
        self._log(f"[fetch] Downloading {sheet_url}")

        with log_on_exception(logger, "sheet fetch", level=logging.ERROR):
            csv_text = self._sheet_source.fetch_csv(sheet_url)

        return self.import_csv_text(csv_text, skip_duplicates=skip_duplicates, run_id=run_id, source=sheet_url)

    def import_csv_text(
        self,
        csv_text: str,
        skip_duplicates: bool = True,
        run_id: Optional[str] = None,
        source: Optional[str] = None,
    ) -> ImportResult:
        """
        Import recruiters from CSV text with a header row.

        Args:
            csv_text: Raw CSV text
            skip_duplicates: Drop records whose email already exists
            run_id: Optional run identifier for log correlation
            source: Optional source description stored in run history

        Returns:
            ImportResult

        Raises:
            EmptySheetError: No rows at all
            MissingEmailColumnError: Header has no email column
            NoValidRecruitersError: Every data row failed validation
            DedupLookupError: Lookup failed under the abort-run policy
            StorageUnavailableError: Backend unreachable during insert
        """
        start_time = datetime.utcnow()
        run_id = run_id or uuid.uuid4().hex
        run_log = get_logger(__name__, run_id=run_id)

        # Parse
        rows = parse_csv(csv_text)
        if not rows:
            raise EmptySheetError("Sheet is empty or has no data rows")

        header, data_rows = rows[0], rows[1:]
        run_log.for_stage("parse").info(f"Parsed {len(data_rows)} data rows")
        self._log(f"[parse] {len(data_rows)} data rows")

        # Validate
        records, row_errors = validate_rows(header, data_rows)
        run_log.for_stage("validate").info(f"{len(records)} valid, {len(row_errors)} invalid")
        self._log(f"[validate] {len(records)} valid, {len(row_errors)} invalid")

        if not records:
            sample = [str(e) for e in row_errors[:self._config.error_sample_size]]
            raise NoValidRecruitersError("No valid recruiters found", errors=sample)

        # Dedup
        repository = self._get_repository()
        dedup = DedupFilter(
            repository,
            batch_size=self._config.lookup_batch_size,
            on_lookup_failure=self._config.dedup_failure_policy,
        ).filter(records, skip_duplicates=skip_duplicates)
        if dedup.lookup_failures:
            run_log.for_stage("dedup").warning(
                f"{dedup.lookup_failures} lookup batches failed; their records were treated as new"
            )
        self._log(f"[dedup] {len(dedup.to_insert)} new, {dedup.duplicate_count} duplicates")

        # Insert
        insert = BatchInserter(repository, chunk_size=self._config.insert_chunk_size).insert(dedup.to_insert)
        run_log.for_stage("insert").info(
            f"{insert.inserted_count} inserted, {insert.duplicate_count} duplicates at insert, "
            f"{len(insert.errors)} errors"
        )
        self._log(f"[insert] {insert.inserted_count} inserted")

        # Report
        result = build_import_result(
            total_rows=len(data_rows),
            valid_count=len(records),
            validation_errors=row_errors,
            dedup=dedup,
            insert=insert,
            error_sample_size=self._config.error_sample_size,
            row_warning_threshold=self._config.sheet_row_warning,
        )
        result.duration_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)

        if result.warning:
            run_log.warning(result.warning)

        run_log.info(
            f"Import complete: total_rows={result.total_rows}, valid={result.valid_count}, "
            f"inserted={result.inserted_count}, skipped={result.duplicate_skipped_count}, "
            f"invalid={result.invalid_skipped_count}, errors={result.total_error_count}, "
            f"duration={result.duration_ms}ms"
        )
        self._log(f"[summary] {result.message}")

        self.record_run(result, source=source, skip_duplicates=skip_duplicates)
        return result

    def record_run(
        self,
        result: ImportResult,
        source: Optional[str] = None,
        skip_duplicates: bool = True,
    ) -> None:
        """
        Store run stats in system_state (last run + capped history).

        Best effort: a failure here is logged and never fails the import.
        """
        now = datetime.utcnow()
        stats = dict(result.stats(), duration_ms=result.duration_ms)
        try:
            recorded = self._get_system_state_repository().record_run(
                IMPORT_STATE_ID,
                last_run={"last_run_at": now, "last_run_stats": stats, "updated_at": now},
                history_entry={
                    "timestamp": now,
                    "source": source,
                    "skip_duplicates": skip_duplicates,
                    "stats": stats,
                },
                max_history=RUN_HISTORY_LIMIT,
            )
        except Exception as e:
            logger.warning(f"Could not record import run history: {e}")
            return

        if not recorded:
            logger.warning("Import run history was not recorded")

    def get_run_history(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Return recorded runs, newest first."""
        state = self._get_system_state_repository().get_state(IMPORT_STATE_ID)
        if not state:
            return []

        runs = sorted(
            state.get("run_history", []),
            key=lambda run: run.get("timestamp") or datetime.min,
            reverse=True,
        )
        return runs[:limit]
