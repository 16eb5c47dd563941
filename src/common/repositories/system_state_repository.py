"""
System State Repository

Stores import run bookkeeping in the system_state collection, one
document per state id:

    {
        "_id": "import_recruiters",
        "last_run_at": ...,
        "last_run_stats": {...},
        "run_history": [{...}, ...]   # oldest first, capped
    }
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pymongo import MongoClient
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class SystemStateRepositoryInterface(ABC):
    """
    Abstract interface for run state.

    record_run is best effort: implementations log failures and return
    False, since a lost history entry must never fail an import whose
    records were already written.
    """

    @abstractmethod
    def get_state(self, state_id: str) -> Optional[Dict[str, Any]]:
        """Get a state document by ID (e.g., "import_recruiters")."""
        pass

    @abstractmethod
    def record_run(
        self,
        state_id: str,
        last_run: Dict[str, Any],
        history_entry: Dict[str, Any],
        max_history: Optional[int] = None,
    ) -> bool:
        """
        Set the last-run fields and append to run_history in one write.

        Args:
            state_id: State document ID
            last_run: Fields to $set on the document
            history_entry: Entry appended to run_history
            max_history: Keep only the newest N history entries
        """
        pass


class AtlasSystemStateRepository(SystemStateRepositoryInterface):
    """MongoDB implementation; shares one MongoClient across instances."""

    _client: Optional[MongoClient] = None

    def __init__(
        self,
        mongodb_uri: str,
        database: str = "jobs",
        collection: str = "system_state",
    ):
        if not mongodb_uri:
            raise ValueError("MongoDB URI is required")

        self._mongodb_uri = mongodb_uri
        self._database = database
        self._collection_name = collection

    def _get_collection(self):
        if AtlasSystemStateRepository._client is None:
            AtlasSystemStateRepository._client = MongoClient(self._mongodb_uri)
            logger.info("Created new MongoDB client for system_state repository")
        return AtlasSystemStateRepository._client[self._database][self._collection_name]

    @classmethod
    def reset_connection(cls) -> None:
        """Reset the MongoDB client connection."""
        if cls._client is not None:
            cls._client.close()
            cls._client = None
            logger.info("System state repository connection reset")

    def get_state(self, state_id: str) -> Optional[Dict[str, Any]]:
        return self._get_collection().find_one({"_id": state_id})

    def record_run(
        self,
        state_id: str,
        last_run: Dict[str, Any],
        history_entry: Dict[str, Any],
        max_history: Optional[int] = None,
    ) -> bool:
        push: Dict[str, Any] = {"$each": [history_entry]}
        if max_history is not None:
            push["$slice"] = -max_history  # Keep last N items

        update: Dict[str, Any] = {"$push": {"run_history": push}}
        if last_run:
            update["$set"] = last_run

        try:
            result = self._get_collection().update_one({"_id": state_id}, update, upsert=True)
            return result.modified_count > 0 or result.upserted_id is not None
        except PyMongoError as e:
            logger.error(f"Error recording run for {state_id}: {e}")
            return False
