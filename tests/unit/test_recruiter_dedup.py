"""
Tests for src/services/recruiter_dedup.py
"""

import pytest

from src.common.error_handling import DedupLookupError
from src.common.import_config import DedupLookupFailurePolicy
from src.common.types import CandidateRecord
from src.services.recruiter_dedup import DedupFilter
from tests.fixtures.fake_repository import FakeRecruiterRepository


def make_records(*emails):
    return [CandidateRecord(name=e.split("@")[0], email=e, row_number=i + 2) for i, e in enumerate(emails)]


class TestDedupFilter:
    """Tests for DedupFilter.filter."""

    def test_existing_emails_are_dropped(self):
        repo = FakeRecruiterRepository(existing_emails=["bob@existing.com"])
        records = make_records("jane@acme.com", "bob@existing.com", "ann@new.io")

        result = DedupFilter(repo).filter(records)

        assert [r.email for r in result.to_insert] == ["jane@acme.com", "ann@new.io"]
        assert result.duplicate_count == 1
        assert result.lookup_failures == 0

    def test_partition_covers_every_record(self):
        repo = FakeRecruiterRepository(existing_emails=["b@x.io", "d@x.io"])
        records = make_records("a@x.io", "b@x.io", "c@x.io", "d@x.io")

        result = DedupFilter(repo).filter(records)

        assert len(result.to_insert) + result.duplicate_count == len(records)

    def test_skip_duplicates_false_passes_everything_through(self):
        repo = FakeRecruiterRepository(existing_emails=["bob@existing.com"])
        records = make_records("jane@acme.com", "bob@existing.com")

        result = DedupFilter(repo).filter(records, skip_duplicates=False)

        assert result.to_insert == records
        assert result.duplicate_count == 0
        assert repo.lookup_batches == []

    def test_repeated_email_in_sheet_keeps_first_occurrence(self):
        repo = FakeRecruiterRepository()
        records = make_records("jane@acme.com", "ann@new.io", "jane@acme.com")

        result = DedupFilter(repo).filter(records)

        assert [r.row_number for r in result.to_insert] == [2, 3]
        assert result.duplicate_count == 1
        # Each email looked up once
        assert repo.lookup_batches == [["jane@acme.com", "ann@new.io"]]

    def test_lookups_are_batched(self):
        repo = FakeRecruiterRepository()
        records = make_records(*[f"r{i}@x.io" for i in range(450)])

        DedupFilter(repo, batch_size=200).filter(records)

        assert [len(batch) for batch in repo.lookup_batches] == [200, 200, 50]

    def test_no_records_no_lookup(self):
        repo = FakeRecruiterRepository()

        result = DedupFilter(repo).filter([])

        assert result.to_insert == []
        assert repo.lookup_batches == []

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            DedupFilter(FakeRecruiterRepository(), batch_size=0)


class TestLookupFailurePolicy:
    """Tests for the failed lookup batch policies."""

    @pytest.fixture
    def repo(self):
        repo = FakeRecruiterRepository(existing_emails=["r0@x.io", "r3@x.io"])
        repo.failing_lookup_batches = {1}
        return repo

    def test_skip_batch_assumes_new(self, repo):
        records = make_records("r0@x.io", "r1@x.io", "r2@x.io", "r3@x.io")

        result = DedupFilter(repo, batch_size=2).filter(records)

        # r0 exists but its batch failed, so it passes through
        assert [r.email for r in result.to_insert] == ["r0@x.io", "r1@x.io", "r2@x.io"]
        assert result.duplicate_count == 1
        assert result.lookup_failures == 1

    def test_abort_run_raises(self, repo):
        records = make_records("r0@x.io", "r1@x.io", "r2@x.io")
        dedup = DedupFilter(repo, batch_size=2, on_lookup_failure=DedupLookupFailurePolicy.ABORT_RUN)

        with pytest.raises(DedupLookupError, match="Duplicate check failed"):
            dedup.filter(records)

        assert len(repo.lookup_batches) == 1

    def test_unreachable_backend_follows_policy(self):
        repo = FakeRecruiterRepository()
        repo.unavailable = True

        result = DedupFilter(repo).filter(make_records("a@x.io"))

        assert len(result.to_insert) == 1
        assert result.lookup_failures == 1
