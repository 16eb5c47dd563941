"""
Recruiter Batch Inserter

Writes deduplicated candidate records in fixed-size chunks with one bulk
call per chunk. When a chunk fails, records the backend did not write are
retried once individually:

- unique-constraint violation -> silent duplicate (covers a record
  inserted between the dedup lookup and this stage, e.g. by a concurrent
  import)
- any other failure -> "<email>: <message>" insert error, record dropped

Every record ends in exactly one state: inserted, duplicate, or error.

A bulk failure classified as a backend outage (StorageUnavailableError)
is not retried per record and propagates to fail the run.
"""

import logging
from typing import List

from src.common.error_handling import (
    BatchInsertError,
    DuplicateRecruiterError,
    RepositoryError,
    StorageUnavailableError,
)
from src.common.repositories import RecruiterRepositoryInterface
from src.common.types import CandidateRecord, InsertOutcome

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 100


class BatchInserter:
    """Insert candidate records chunk by chunk with a per-record fallback."""

    def __init__(self, repository: RecruiterRepositoryInterface, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._repository = repository
        self._chunk_size = chunk_size

    def insert(self, records: List[CandidateRecord]) -> InsertOutcome:
        """
        Insert all records, chunk by chunk, sequentially.

        Raises:
            StorageUnavailableError: If the backend becomes unreachable
        """
        outcome = InsertOutcome()
        total_chunks = (len(records) + self._chunk_size - 1) // self._chunk_size

        for chunk_number, start in enumerate(range(0, len(records), self._chunk_size), start=1):
            chunk = records[start:start + self._chunk_size]
            self._insert_chunk(chunk, outcome)
            logger.info(
                f"Chunk {chunk_number}/{total_chunks}: "
                f"{outcome.inserted_count} inserted so far"
            )

        return outcome

    def _insert_chunk(self, chunk: List[CandidateRecord], outcome: InsertOutcome) -> None:
        """Bulk insert one chunk, falling back to single inserts on failure."""
        try:
            inserted = self._repository.insert_recruiters([r.to_document() for r in chunk])
            outcome.inserted_count += inserted
            return
        except StorageUnavailableError:
            raise
        except BatchInsertError as e:
            logger.warning(f"Bulk insert of {len(chunk)} records failed, retrying individually: {e}")
            failed_indices = e.failed_indices
            duplicate_indices = set(e.duplicate_indices)
            outcome.inserted_count += e.inserted_count

        if failed_indices is None:
            failed_indices = list(range(len(chunk)))

        for index in failed_indices:
            record = chunk[index]
            if index in duplicate_indices:
                outcome.duplicate_count += 1
                continue
            self._insert_single(record, outcome)

    def _insert_single(self, record: CandidateRecord, outcome: InsertOutcome) -> None:
        try:
            self._repository.insert_recruiter(record.to_document())
            outcome.inserted_count += 1
        except DuplicateRecruiterError:
            logger.debug(f"{record.email} already exists, skipping")
            outcome.duplicate_count += 1
        except StorageUnavailableError:
            raise
        except RepositoryError as e:
            logger.error(f"Insert failed for {record.email}: {e}")
            outcome.errors.append(f"{record.email}: {e}")
