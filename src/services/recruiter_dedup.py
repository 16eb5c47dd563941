"""
Recruiter Deduplication Filter

Drops candidate records whose email already exists in storage before the
insert stage runs. Existing emails are looked up in fixed-size batches to
stay under backend query limits; lookups run sequentially.

A failed lookup batch is handled by DedupLookupFailurePolicy:
- skip-batch-assume-new (default): log and treat the batch as having no
  matches. Duplicates may slip through, but the unique email index still
  catches them at insert time.
- abort-run: raise DedupLookupError and stop the import.
"""

import logging
from typing import List, Optional, Set

from src.common.error_handling import DedupLookupError, RepositoryError
from src.common.import_config import DedupLookupFailurePolicy
from src.common.repositories import RecruiterRepositoryInterface
from src.common.types import CandidateRecord, DedupResult

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_BATCH_SIZE = 200


class DedupFilter:
    """Partition candidate records into new records and duplicates."""

    def __init__(
        self,
        repository: RecruiterRepositoryInterface,
        batch_size: int = DEFAULT_LOOKUP_BATCH_SIZE,
        on_lookup_failure: DedupLookupFailurePolicy = DedupLookupFailurePolicy.SKIP_BATCH_ASSUME_NEW,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self._repository = repository
        self._batch_size = batch_size
        self._on_lookup_failure = on_lookup_failure

    def find_existing(self, emails: List[str], result: Optional[DedupResult] = None) -> Set[str]:
        """
        Look up which emails are already stored, one batch at a time.

        Args:
            emails: Unique normalized emails
            result: Optional result whose lookup_failures counter is updated

        Returns:
            ExistingKeySet: union of matches across all successful batches

        Raises:
            DedupLookupError: On a failed batch when the policy is abort-run
        """
        existing: Set[str] = set()
        total_batches = (len(emails) + self._batch_size - 1) // self._batch_size

        for batch_number, start in enumerate(range(0, len(emails), self._batch_size), start=1):
            batch = emails[start:start + self._batch_size]
            try:
                found = self._repository.find_existing_emails(batch)
            except RepositoryError as e:
                if self._on_lookup_failure == DedupLookupFailurePolicy.ABORT_RUN:
                    logger.error(f"Lookup batch {batch_number}/{total_batches} failed, aborting: {e}")
                    raise DedupLookupError(f"Duplicate check failed: {e}") from e
                logger.warning(
                    f"Lookup batch {batch_number}/{total_batches} failed, "
                    f"assuming {len(batch)} emails are new: {e}"
                )
                if result is not None:
                    result.lookup_failures += 1
                continue

            existing.update(found)
            logger.debug(f"Lookup batch {batch_number}/{total_batches}: {len(found)} existing")

        return existing

    def filter(self, records: List[CandidateRecord], skip_duplicates: bool = True) -> DedupResult:
        """
        Remove records that already exist in storage.

        Repeated emails within the same import are collapsed to their first
        occurrence and counted as duplicates as well.

        Args:
            records: Validated candidates in source order
            skip_duplicates: If False, every record passes through

        Returns:
            DedupResult with records to insert and the duplicate count
        """
        if not skip_duplicates:
            return DedupResult(to_insert=list(records), duplicate_count=0)

        result = DedupResult()

        unique: List[CandidateRecord] = []
        seen: Set[str] = set()
        for record in records:
            if record.email in seen:
                result.duplicate_count += 1
                continue
            seen.add(record.email)
            unique.append(record)

        in_sheet_duplicates = result.duplicate_count
        existing = self.find_existing([r.email for r in unique], result)

        for record in unique:
            if record.email in existing:
                result.duplicate_count += 1
            else:
                result.to_insert.append(record)

        logger.info(
            f"Dedup: {len(records)} candidates, {len(result.to_insert)} new, "
            f"{result.duplicate_count - in_sheet_duplicates} already stored, "
            f"{in_sheet_duplicates} repeated in sheet"
        )
        return result
