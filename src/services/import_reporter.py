"""
Import Result Reporter

Pure aggregation of the counters produced by each pipeline stage into a
single ImportResult. Error lists are capped so the response stays bounded
regardless of sheet size; the true error total is reported separately.
"""

from typing import List, Optional

from src.common.types import DedupResult, ImportResult, InsertOutcome, RowError

DEFAULT_ERROR_SAMPLE_SIZE = 50
DEFAULT_SHEET_ROW_WARNING = 5000


def truncation_warning(total_rows: int, row_warning_threshold: int) -> Optional[str]:
    """
    Warn when the sheet (header included) reached the size at which
    exports are known to get cut off.
    """
    if total_rows + 1 >= row_warning_threshold:
        return (
            f"Sheet has {total_rows} data rows, at or above the export limit of "
            f"{row_warning_threshold} rows. Some rows may not have been imported; "
            f"split the sheet and import the remainder separately."
        )
    return None


def build_import_result(
    total_rows: int,
    valid_count: int,
    validation_errors: List[RowError],
    dedup: DedupResult,
    insert: InsertOutcome,
    error_sample_size: int = DEFAULT_ERROR_SAMPLE_SIZE,
    row_warning_threshold: int = DEFAULT_SHEET_ROW_WARNING,
) -> ImportResult:
    """
    Combine stage outputs into the terminal report.

    Args:
        total_rows: Data rows in the sheet (header excluded)
        valid_count: Candidate records produced by validation
        validation_errors: All row-level validation errors
        dedup: Dedup filter output
        insert: Batch inserter output
        error_sample_size: Max messages kept per error list
        row_warning_threshold: Row count that triggers the truncation warning

    Returns:
        ImportResult
    """
    return ImportResult(
        total_rows=total_rows,
        valid_count=valid_count,
        inserted_count=insert.inserted_count,
        duplicate_skipped_count=dedup.duplicate_count + insert.duplicate_count,
        invalid_skipped_count=len(validation_errors),
        validation_errors=[str(e) for e in validation_errors[:error_sample_size]],
        insert_errors=insert.errors[:error_sample_size],
        total_error_count=len(validation_errors) + len(insert.errors),
        warning=truncation_warning(total_rows, row_warning_threshold),
    )
