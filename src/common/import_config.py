"""
Recruiter Import Configuration

Loads the pipeline tunables (batch sizes, error sample caps, fetch
timeout, dedup failure policy) from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class DedupLookupFailurePolicy(str, Enum):
    """What the dedup filter does when an existing-email lookup batch fails."""
    SKIP_BATCH_ASSUME_NEW = "skip-batch-assume-new"  # fail-open: insert anyway
    ABORT_RUN = "abort-run"                          # fail-closed: stop the import


@dataclass
class ImportConfig:
    """Configuration for recruiter bulk imports."""

    lookup_batch_size: int = 200      # Emails per existing-email query
    insert_chunk_size: int = 100      # Records per bulk insert
    error_sample_size: int = 50       # Max messages returned per error list
    sheet_row_warning: int = 5000     # Row count suggesting the export was truncated
    fetch_timeout: int = 30           # Seconds for the CSV download
    dedup_failure_policy: DedupLookupFailurePolicy = DedupLookupFailurePolicy.SKIP_BATCH_ASSUME_NEW

    @classmethod
    def from_env(cls) -> "ImportConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            IMPORT_LOOKUP_BATCH_SIZE: Emails per lookup query (default: 200)
            IMPORT_INSERT_CHUNK_SIZE: Records per bulk insert (default: 100)
            IMPORT_ERROR_SAMPLE_SIZE: Error messages returned per list (default: 50)
            IMPORT_SHEET_ROW_WARNING: Truncation warning threshold (default: 5000)
            IMPORT_FETCH_TIMEOUT: CSV download timeout in seconds (default: 30)
            IMPORT_DEDUP_FAILURE_POLICY: skip-batch-assume-new | abort-run
        """
        def parse_int(val: Optional[str], default: int) -> int:
            if not val:
                return default
            try:
                parsed = int(val)
            except ValueError:
                return default
            return parsed if parsed > 0 else default

        policy_str = os.getenv("IMPORT_DEDUP_FAILURE_POLICY", "skip-batch-assume-new").lower()
        try:
            policy = DedupLookupFailurePolicy(policy_str)
        except ValueError:
            logger.warning(
                f"Invalid IMPORT_DEDUP_FAILURE_POLICY '{policy_str}', defaulting to skip-batch-assume-new"
            )
            policy = DedupLookupFailurePolicy.SKIP_BATCH_ASSUME_NEW

        return cls(
            lookup_batch_size=parse_int(os.getenv("IMPORT_LOOKUP_BATCH_SIZE"), 200),
            insert_chunk_size=parse_int(os.getenv("IMPORT_INSERT_CHUNK_SIZE"), 100),
            error_sample_size=parse_int(os.getenv("IMPORT_ERROR_SAMPLE_SIZE"), 50),
            sheet_row_warning=parse_int(os.getenv("IMPORT_SHEET_ROW_WARNING"), 5000),
            fetch_timeout=parse_int(os.getenv("IMPORT_FETCH_TIMEOUT"), 30),
            dedup_failure_policy=policy,
        )


# Global config instance (lazily loaded)
_config: Optional[ImportConfig] = None


def get_import_config() -> ImportConfig:
    """Get the global import configuration."""
    global _config
    if _config is None:
        _config = ImportConfig.from_env()
    return _config


def reload_config() -> ImportConfig:
    """Reload configuration from environment."""
    global _config
    _config = ImportConfig.from_env()
    return _config
