"""
Repository Pattern for MongoDB Operations

Provides a typed abstraction layer over MongoDB so pipeline stages never
handle untyped driver results or driver exceptions.

Public API:
- get_recruiter_repository(): Factory for the recruiters collection
- get_system_state_repository(): Factory for the system_state collection
- RecruiterRepositoryInterface: Abstract interface for recruiters
- SystemStateRepositoryInterface: Abstract interface for run state

Usage:
    from src.common.repositories import get_recruiter_repository

    repo = get_recruiter_repository()
    existing = repo.find_existing_emails(["jane@co.com"])
"""

from .base import RecruiterRepositoryInterface
from .system_state_repository import SystemStateRepositoryInterface
from .config import (
    get_recruiter_repository,
    reset_repository,
    get_system_state_repository,
    reset_system_state_repository,
    RepositoryConfig,
)

__all__ = [
    "get_recruiter_repository",
    "reset_repository",
    "RecruiterRepositoryInterface",
    "get_system_state_repository",
    "reset_system_state_repository",
    "SystemStateRepositoryInterface",
    "RepositoryConfig",
]
