"""
Centralized error handling for the recruiter import pipeline.

Defines the exception taxonomy used across pipeline stages and the
helpers for logging failures without swallowing them.

Taxonomy:
- ImportPreconditionError: fatal for the run, reported to callers as 4xx
- Repository errors: raised by storage implementations, classified so the
  batch inserter can tell a duplicate from a bad record from an outage
- DedupLookupError: existence check failed under the abort-run policy
"""

import logging
from typing import List, Optional


class RecruiterImportError(Exception):
    """Base class for all import pipeline errors."""


# ===== Fatal precondition errors (4xx) =====


class ImportPreconditionError(RecruiterImportError):
    """Input problem that aborts the whole run before anything is written."""

    status_code: int = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class InvalidSheetUrlError(ImportPreconditionError):
    """The submitted URL is not a recognizable spreadsheet URL."""


class SheetFetchError(ImportPreconditionError):
    """The CSV export could not be downloaded."""


class EmptySheetError(ImportPreconditionError):
    """The fetched document has no rows."""


class MissingEmailColumnError(ImportPreconditionError):
    """The header row has no `email` column."""

    def __init__(self, found_columns: List[str]):
        found = ", ".join(c for c in found_columns if c) or "(none)"
        super().__init__(
            f"Required column 'email' not found in header. Found columns: {found}"
        )
        self.found_columns = found_columns


class NoValidRecruitersError(ImportPreconditionError):
    """Every data row failed validation."""


# ===== Repository errors =====


class RepositoryError(RecruiterImportError):
    """A storage operation failed."""


class DuplicateRecruiterError(RepositoryError):
    """Insert collided with the unique email index."""

    def __init__(self, email: str, message: str = "duplicate email"):
        super().__init__(message)
        self.email = email


class BatchInsertError(RepositoryError):
    """
    A bulk insert failed for part or all of a chunk.

    Attributes:
        inserted_count: Documents the backend reports as written anyway
        failed_indices: Chunk positions that were not written
        duplicate_indices: Subset of failed_indices rejected by the unique index
    """

    def __init__(
        self,
        message: str,
        inserted_count: int = 0,
        failed_indices: Optional[List[int]] = None,
        duplicate_indices: Optional[List[int]] = None,
    ):
        super().__init__(message)
        self.inserted_count = inserted_count
        self.failed_indices = failed_indices
        self.duplicate_indices = duplicate_indices or []


class StorageUnavailableError(RepositoryError):
    """The backend could not be reached. Retrying per record is pointless."""


# ===== Stage errors =====


class DedupLookupError(RecruiterImportError):
    """Existing-email lookup failed and the policy is to abort the run."""


def log_on_exception(
    logger: logging.Logger,
    operation: str,
    level: int = logging.WARNING,
    include_traceback: bool = False,
):
    """
    Context manager for logging exceptions without swallowing them silently.

    Usage:
        with log_on_exception(logger, "recruiter batch lookup", level=logging.ERROR):
            repository.find_existing_emails(batch)

    Args:
        logger: Logger instance to use
        operation: Operation description for the log message
        level: Log level (default: WARNING)
        include_traceback: Whether to include stack trace in log
    """

    class ExceptionLogger:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_val is not None:
                logger.log(level, f"[{operation}] Failed: {exc_val}", exc_info=include_traceback)
            # Return False to not suppress the exception
            return False

    return ExceptionLogger()
