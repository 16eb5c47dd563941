"""
Atlas Recruiter Repository

MongoDB implementation of the recruiter repository. Translates pymongo
errors into the repository error taxonomy so callers never have to
inspect driver exceptions.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set

from pymongo import ASCENDING, MongoClient
from pymongo.collation import Collation, CollationStrength
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import BulkWriteError, ConnectionFailure, DuplicateKeyError, PyMongoError

from src.common.dedupe import normalize_email
from src.common.error_handling import (
    BatchInsertError,
    DuplicateRecruiterError,
    RepositoryError,
    StorageUnavailableError,
)

from .base import RecruiterRepositoryInterface

logger = logging.getLogger(__name__)

# MongoDB duplicate key error code
DUPLICATE_KEY_CODE = 11000

EMAIL_INDEX_NAME = "email_unique"

# Case-insensitive comparison for the email index and lookups
EMAIL_COLLATION = Collation(locale="en", strength=CollationStrength.SECONDARY)


class AtlasRecruiterRepository(RecruiterRepositoryInterface):
    """
    MongoDB-backed recruiter repository.

    Connection Management:
    - Uses singleton MongoClient for connection pooling
    - Client is created once and reused across requests
    - PyMongo handles connection pool internally

    Error Handling:
    - ConnectionFailure (and subclasses such as ServerSelectionTimeoutError)
      becomes StorageUnavailableError
    - Everything else is mapped to a RepositoryError subclass
    """

    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None
    _collection: Optional[Collection] = None
    _indexes_ensured: bool = False

    def __init__(self, mongodb_uri: str, database: str = "jobs", collection: str = "recruiters"):
        """
        Initialize repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name (default: "jobs")
            collection: Collection name (default: "recruiters")
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection

    def _get_collection(self) -> Collection:
        """
        Get the MongoDB collection, creating client if needed.

        Uses class-level singleton for connection pooling.
        """
        if AtlasRecruiterRepository._collection is None:
            AtlasRecruiterRepository._client = MongoClient(self._mongodb_uri)
            AtlasRecruiterRepository._db = AtlasRecruiterRepository._client[self._database_name]
            AtlasRecruiterRepository._collection = AtlasRecruiterRepository._db[self._collection_name]
            logger.info(
                f"Recruiter repository connected: {self._database_name}.{self._collection_name}"
            )
        return AtlasRecruiterRepository._collection

    def find_existing_emails(self, emails: Iterable[str]) -> Set[str]:
        """
        Return the subset of emails already stored, normalized.

        The match runs under EMAIL_COLLATION, so a stored "Jane@Co.com"
        written outside this pipeline still counts as "jane@co.com".
        """
        email_list = list(emails)
        if not email_list:
            return set()

        collection = self._get_collection()
        try:
            cursor = collection.find(
                {"email": {"$in": email_list}},
                {"email": 1, "_id": 0},
                collation=EMAIL_COLLATION,
            )
            return {normalize_email(doc.get("email")) for doc in cursor if doc.get("email")}
        except ConnectionFailure as e:
            raise StorageUnavailableError(f"MongoDB unreachable: {e}") from e
        except PyMongoError as e:
            raise RepositoryError(f"Email lookup failed: {e}") from e

    def insert_recruiters(self, documents: List[Dict[str, Any]]) -> int:
        """
        Insert a chunk with ordered=False so one bad document does not
        stop the rest; failures are reported per index.
        """
        if not documents:
            return 0

        now = datetime.utcnow()
        docs = [dict(doc, created_at=now, updated_at=now) for doc in documents]

        collection = self._get_collection()
        try:
            result = collection.insert_many(docs, ordered=False)
            return len(result.inserted_ids)
        except BulkWriteError as e:
            details = e.details or {}
            write_errors = details.get("writeErrors", [])
            failed = sorted(err["index"] for err in write_errors)
            duplicates = [err["index"] for err in write_errors if err.get("code") == DUPLICATE_KEY_CODE]
            raise BatchInsertError(
                f"Bulk insert failed for {len(failed)} of {len(docs)} documents",
                inserted_count=details.get("nInserted", 0),
                failed_indices=failed,
                duplicate_indices=duplicates,
            ) from e
        except ConnectionFailure as e:
            raise StorageUnavailableError(f"MongoDB unreachable: {e}") from e
        except PyMongoError as e:
            # Nothing is known about which documents were written
            raise BatchInsertError(f"Bulk insert failed: {e}") from e

    def insert_recruiter(self, document: Dict[str, Any]) -> Optional[str]:
        """Insert a single recruiter document."""
        now = datetime.utcnow()
        doc = dict(document, created_at=now, updated_at=now)

        collection = self._get_collection()
        try:
            result = collection.insert_one(doc)
            return str(result.inserted_id) if result.inserted_id else None
        except DuplicateKeyError as e:
            raise DuplicateRecruiterError(doc.get("email", ""), str(e)) from e
        except ConnectionFailure as e:
            raise StorageUnavailableError(f"MongoDB unreachable: {e}") from e
        except PyMongoError as e:
            raise RepositoryError(str(e)) from e

    def count_documents(self, filter: Dict[str, Any]) -> int:
        """Count documents matching the filter."""
        collection = self._get_collection()
        return collection.count_documents(filter)

    def ensure_indexes(self) -> None:
        """
        Create the unique, case-insensitive email index.

        Runs create_index once per process; later calls return early.
        """
        if AtlasRecruiterRepository._indexes_ensured:
            return

        collection = self._get_collection()
        try:
            collection.create_index(
                [("email", ASCENDING)],
                unique=True,
                name=EMAIL_INDEX_NAME,
                collation=EMAIL_COLLATION,
            )
        except ConnectionFailure as e:
            raise StorageUnavailableError(f"MongoDB unreachable: {e}") from e
        except PyMongoError as e:
            raise RepositoryError(f"Could not create email index: {e}") from e

        AtlasRecruiterRepository._indexes_ensured = True
        logger.info(f"Ensured index {EMAIL_INDEX_NAME} on {self._collection_name}")

    @classmethod
    def reset_connection(cls) -> None:
        """
        Reset the connection pool.

        Used for testing or connection recovery.
        """
        if cls._client:
            cls._client.close()
        cls._client = None
        cls._db = None
        cls._collection = None
        cls._indexes_ensured = False
        logger.info("Recruiter repository connection reset")
