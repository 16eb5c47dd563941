"""
In-memory repositories for import pipeline tests.

FakeRecruiterRepository enforces the unique email constraint the same way
the MongoDB implementation does (unordered bulk insert, duplicate and
failed indices reported on BatchInsertError) and lets tests inject
lookup and insert failures.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

from src.common.error_handling import (
    BatchInsertError,
    DuplicateRecruiterError,
    RepositoryError,
    StorageUnavailableError,
)
from src.common.repositories import RecruiterRepositoryInterface, SystemStateRepositoryInterface


class FakeRecruiterRepository(RecruiterRepositoryInterface):
    """Recruiters keyed by email, with optional failure injection."""

    def __init__(self, existing_emails: Iterable[str] = ()):
        self.documents: Dict[str, Dict[str, Any]] = {
            email: {"email": email, "name": email.split("@")[0]} for email in existing_emails
        }
        self.lookup_batches: List[List[str]] = []
        self.bulk_calls: List[int] = []
        self.single_calls: List[str] = []
        self.ensure_index_calls = 0

        # Failure injection
        self.failing_lookup_batches: Set[int] = set()  # 1-based batch numbers
        self.rejected_emails: Set[str] = set()         # non-duplicate write errors
        self.fail_bulk_without_details = False
        self.unavailable = False
        self.index_error: Optional[Exception] = None

    def find_existing_emails(self, emails: Iterable[str]) -> Set[str]:
        batch = list(emails)
        self.lookup_batches.append(batch)
        if self.unavailable:
            raise StorageUnavailableError("MongoDB unreachable")
        if len(self.lookup_batches) in self.failing_lookup_batches:
            raise RepositoryError("lookup timed out")
        return {email for email in batch if email in self.documents}

    def insert_recruiters(self, documents: List[Dict[str, Any]]) -> int:
        self.bulk_calls.append(len(documents))
        if self.unavailable:
            raise StorageUnavailableError("MongoDB unreachable")
        if self.fail_bulk_without_details:
            raise BatchInsertError("bulk write rejected")

        inserted = 0
        failed: List[int] = []
        duplicates: List[int] = []
        for index, doc in enumerate(documents):
            email = doc["email"]
            if email in self.documents:
                failed.append(index)
                duplicates.append(index)
            elif email in self.rejected_emails:
                failed.append(index)
            else:
                self.documents[email] = dict(doc)
                inserted += 1

        if failed:
            raise BatchInsertError(
                f"Bulk insert failed for {len(failed)} of {len(documents)} documents",
                inserted_count=inserted,
                failed_indices=failed,
                duplicate_indices=duplicates,
            )
        return inserted

    def insert_recruiter(self, document: Dict[str, Any]) -> Optional[str]:
        email = document["email"]
        self.single_calls.append(email)
        if self.unavailable:
            raise StorageUnavailableError("MongoDB unreachable")
        if email in self.documents:
            raise DuplicateRecruiterError(email)
        if email in self.rejected_emails:
            raise RepositoryError("document failed validation")
        self.documents[email] = dict(document)
        return email

    def count_documents(self, filter: Dict[str, Any]) -> int:
        if not filter:
            return len(self.documents)
        return sum(
            1 for doc in self.documents.values()
            if all(doc.get(key) == value for key, value in filter.items())
        )

    def ensure_indexes(self) -> None:
        self.ensure_index_calls += 1
        if self.index_error is not None:
            raise self.index_error


class FakeSystemStateRepository(SystemStateRepositoryInterface):
    """State documents held in a dict."""

    def __init__(self, fail_writes: bool = False):
        self.states: Dict[str, Dict[str, Any]] = {}
        self.fail_writes = fail_writes

    def get_state(self, state_id: str) -> Optional[Dict[str, Any]]:
        return self.states.get(state_id)

    def record_run(
        self,
        state_id: str,
        last_run: Dict[str, Any],
        history_entry: Dict[str, Any],
        max_history: Optional[int] = None,
    ) -> bool:
        if self.fail_writes:
            raise RuntimeError("state write failed")
        state = self.states.setdefault(state_id, {"_id": state_id})
        state.update(last_run)
        history = state.setdefault("run_history", [])
        history.append(history_entry)
        if max_history is not None:
            del history[:-max_history]
        return True
