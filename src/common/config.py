"""
Configuration loader for the recruiter import pipeline.

Loads storage settings from environment variables (.env file).
Pipeline tunables live in import_config.py.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Centralized storage configuration.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== MongoDB =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "jobs")
    RECRUITERS_COLLECTION: str = os.getenv("RECRUITERS_COLLECTION", "recruiters")
    SYSTEM_STATE_COLLECTION: str = os.getenv("SYSTEM_STATE_COLLECTION", "system_state")

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")

    @classmethod
    def validate(cls) -> List[str]:
        """
        Return a list of configuration problems (empty when valid).
        """
        problems = []
        if not cls.MONGODB_URI:
            problems.append("MONGODB_URI is not set")
        elif not cls.MONGODB_URI.startswith(("mongodb://", "mongodb+srv://")):
            problems.append(f"MONGODB_URI has an unsupported scheme: {cls.MONGODB_URI.split(':', 1)[0]}")
        if cls.LOG_FORMAT not in ("simple", "json"):
            problems.append(f"LOG_FORMAT must be 'simple' or 'json', got '{cls.LOG_FORMAT}'")
        return problems
