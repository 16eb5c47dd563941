"""
Tests for src/services/recruiter_inserter.py
"""

import pytest
from unittest.mock import MagicMock

from src.common.error_handling import BatchInsertError, StorageUnavailableError
from src.common.types import CandidateRecord
from src.services.recruiter_inserter import BatchInserter
from tests.fixtures.fake_repository import FakeRecruiterRepository


def make_records(*emails):
    return [CandidateRecord(name=e.split("@")[0], email=e) for e in emails]


class TestBatchInserter:
    """Tests for chunked inserts and the per-record fallback."""

    def test_all_records_inserted(self):
        repo = FakeRecruiterRepository()

        outcome = BatchInserter(repo).insert(make_records("a@x.io", "b@x.io"))

        assert outcome.inserted_count == 2
        assert outcome.duplicate_count == 0
        assert outcome.errors == []
        assert set(repo.documents) == {"a@x.io", "b@x.io"}

    def test_records_are_chunked(self):
        repo = FakeRecruiterRepository()
        records = make_records(*[f"r{i}@x.io" for i in range(250)])

        outcome = BatchInserter(repo, chunk_size=100).insert(records)

        assert repo.bulk_calls == [100, 100, 50]
        assert outcome.inserted_count == 250

    def test_empty_input(self):
        repo = FakeRecruiterRepository()

        outcome = BatchInserter(repo).insert([])

        assert outcome.inserted_count == 0
        assert repo.bulk_calls == []

    def test_duplicate_at_insert_time_counted_not_errored(self):
        # Simulates a record written by a concurrent import after dedup ran
        repo = FakeRecruiterRepository(existing_emails=["b@x.io"])

        outcome = BatchInserter(repo).insert(make_records("a@x.io", "b@x.io", "c@x.io"))

        assert outcome.inserted_count == 2
        assert outcome.duplicate_count == 1
        assert outcome.errors == []
        # Known duplicates are not retried
        assert repo.single_calls == []

    def test_rejected_record_becomes_error(self):
        repo = FakeRecruiterRepository()
        repo.rejected_emails = {"b@x.io"}

        outcome = BatchInserter(repo).insert(make_records("a@x.io", "b@x.io", "c@x.io"))

        assert outcome.inserted_count == 2
        assert outcome.errors == ["b@x.io: document failed validation"]
        assert repo.single_calls == ["b@x.io"]

    def test_bulk_failure_without_details_retries_each_record(self):
        repo = FakeRecruiterRepository(existing_emails=["b@x.io"])
        repo.fail_bulk_without_details = True
        repo.rejected_emails = {"c@x.io"}

        outcome = BatchInserter(repo).insert(make_records("a@x.io", "b@x.io", "c@x.io"))

        assert repo.single_calls == ["a@x.io", "b@x.io", "c@x.io"]
        assert outcome.inserted_count == 1
        assert outcome.duplicate_count == 1
        assert len(outcome.errors) == 1

    def test_every_record_ends_in_exactly_one_state(self):
        repo = FakeRecruiterRepository(existing_emails=["r1@x.io", "r7@x.io"])
        repo.rejected_emails = {"r4@x.io"}
        records = make_records(*[f"r{i}@x.io" for i in range(10)])

        outcome = BatchInserter(repo, chunk_size=3).insert(records)

        assert outcome.inserted_count + outcome.duplicate_count + len(outcome.errors) == len(records)

    def test_partial_write_is_not_double_counted(self):
        repo = MagicMock()
        repo.insert_recruiters.side_effect = BatchInsertError(
            "partial", inserted_count=2, failed_indices=[1], duplicate_indices=[]
        )
        repo.insert_recruiter.return_value = "id"

        outcome = BatchInserter(repo).insert(make_records("a@x.io", "b@x.io", "c@x.io"))

        assert outcome.inserted_count == 3
        repo.insert_recruiter.assert_called_once()

    def test_backend_outage_propagates(self):
        repo = FakeRecruiterRepository()
        repo.unavailable = True

        with pytest.raises(StorageUnavailableError):
            BatchInserter(repo).insert(make_records("a@x.io"))

        assert repo.single_calls == []

    def test_outage_during_fallback_propagates(self):
        repo = MagicMock()
        repo.insert_recruiters.side_effect = BatchInsertError("bulk failed")
        repo.insert_recruiter.side_effect = StorageUnavailableError("gone")

        with pytest.raises(StorageUnavailableError):
            BatchInserter(repo).insert(make_records("a@x.io", "b@x.io"))

        repo.insert_recruiter.assert_called_once()

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            BatchInserter(FakeRecruiterRepository(), chunk_size=0)
