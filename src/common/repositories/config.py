"""
Repository Configuration and Factory

Provides factory functions returning the configured repository
implementations. Instances are singletons so the MongoClient
connection pool is shared across requests.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from .base import RecruiterRepositoryInterface
from .system_state_repository import SystemStateRepositoryInterface

logger = logging.getLogger(__name__)


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    Loaded from environment variables with sensible defaults.
    """
    mongodb_uri: str
    database: str = "jobs"
    recruiters_collection: str = "recruiters"
    system_state_collection: str = "system_state"

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - MONGO_DB_NAME: Database name (default: jobs)
        - RECRUITERS_COLLECTION: Recruiter collection (default: recruiters)
        - SYSTEM_STATE_COLLECTION: State collection (default: system_state)

        Raises:
            ValueError: If MONGODB_URI is not set
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("MONGO_DB_NAME", "jobs"),
            recruiters_collection=os.getenv("RECRUITERS_COLLECTION", "recruiters"),
            system_state_collection=os.getenv("SYSTEM_STATE_COLLECTION", "system_state"),
        )


# Singleton repository instances
_recruiter_repository: Optional[RecruiterRepositoryInterface] = None
_system_state_repository: Optional[SystemStateRepositoryInterface] = None


def get_recruiter_repository(config: Optional[RepositoryConfig] = None) -> RecruiterRepositoryInterface:
    """
    Get the recruiter repository instance.

    Args:
        config: Connection settings used when the singleton is first
            created (defaults to RepositoryConfig.from_env)

    Raises:
        ValueError: If MongoDB URI is not configured
    """
    global _recruiter_repository

    if _recruiter_repository is None:
        config = config or RepositoryConfig.from_env()

        from .atlas_repository import AtlasRecruiterRepository
        _recruiter_repository = AtlasRecruiterRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.recruiters_collection,
        )
        logger.info("Initialized recruiter repository")

    return _recruiter_repository


def reset_repository() -> None:
    """
    Reset the recruiter repository singleton.

    Used for testing or when configuration changes.
    """
    global _recruiter_repository

    if _recruiter_repository is not None:
        from .atlas_repository import AtlasRecruiterRepository
        if isinstance(_recruiter_repository, AtlasRecruiterRepository):
            AtlasRecruiterRepository.reset_connection()

    _recruiter_repository = None
    logger.info("Recruiter repository singleton reset")


def get_system_state_repository(config: Optional[RepositoryConfig] = None) -> SystemStateRepositoryInterface:
    """
    Get the system state repository instance.

    Args:
        config: Connection settings used when the singleton is first created

    Raises:
        ValueError: If MongoDB URI is not configured
    """
    global _system_state_repository

    if _system_state_repository is None:
        config = config or RepositoryConfig.from_env()

        from .system_state_repository import AtlasSystemStateRepository
        _system_state_repository = AtlasSystemStateRepository(
            mongodb_uri=config.mongodb_uri,
            database=config.database,
            collection=config.system_state_collection,
        )
        logger.info("Initialized system state repository")

    return _system_state_repository


def reset_system_state_repository() -> None:
    """Reset the system state repository singleton."""
    global _system_state_repository

    if _system_state_repository is not None:
        from .system_state_repository import AtlasSystemStateRepository
        if isinstance(_system_state_repository, AtlasSystemStateRepository):
            AtlasSystemStateRepository.reset_connection()

    _system_state_repository = None
    logger.info("System state repository singleton reset")
