"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- MongoDB connection attempts (would cause 5-30s timeout per test)
- Environment variable isolation (prevents credential leakage)
- Repository and config singletons leaking between tests
- Root log handlers left pointing at captured output

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import logging
import os
import pytest
from unittest.mock import patch, MagicMock

# Set test environment BEFORE any imports to prevent Config from loading real values
os.environ["ENVIRONMENT"] = "development"

from src.common.import_config import ImportConfig
from src.common.repositories import reset_repository, reset_system_state_repository
from tests.fixtures.fake_repository import FakeRecruiterRepository, FakeSystemStateRepository


@pytest.fixture(autouse=True)
def mock_mongodb():
    """
    Prevent MongoDB connection attempts in all unit tests.

    MongoClient("") defaults to localhost:27017, causing 5-30s timeout per test.
    """
    with patch("pymongo.MongoClient") as mock_client:
        mock_instance = MagicMock()
        mock_db = MagicMock()
        mock_collection = MagicMock()

        # Setup chain: client["db"]["collection"]
        mock_instance.__getitem__ = MagicMock(return_value=mock_db)
        mock_db.__getitem__ = MagicMock(return_value=mock_collection)
        mock_collection.find_one = MagicMock(return_value=None)
        mock_collection.find = MagicMock(return_value=[])

        mock_client.return_value = mock_instance
        yield mock_client


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    Import tunables are removed so every test sees the defaults.
    """
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017/test")
    for name in list(os.environ):
        if name.startswith("IMPORT_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Drop root handlers added by setup_logging and restore the root level."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        # pytest's capture handlers are StreamHandler subclasses
        if type(handler) is logging.StreamHandler and handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def reset_repository_singletons():
    """Drop cached repositories so no test sees another test's client."""
    yield
    reset_repository()
    reset_system_state_repository()


@pytest.fixture
def recruiter_repo():
    """Empty in-memory recruiter repository."""
    return FakeRecruiterRepository()


@pytest.fixture
def state_repo():
    """In-memory system_state repository."""
    return FakeSystemStateRepository()


@pytest.fixture
def import_config():
    """Default tunables, independent of the environment."""
    return ImportConfig()
