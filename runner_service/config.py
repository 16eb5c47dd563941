"""
Runner Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.common.repositories import RepositoryConfig


class RunnerSettings(BaseSettings):
    """
    Import service configuration with validation.

    All settings can be overridden via environment variables
    (case-insensitive, no prefix: ADMIN_API_SECRET -> admin_api_secret).
    """

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")

    # === Security ===
    admin_api_secret: Optional[str] = Field(
        default=None,
        min_length=16,
        description="Admin bearer secret for import endpoints (min 16 chars)"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # === CORS ===
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (admin UI)"
    )

    # === MongoDB ===
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    mongo_db_name: str = Field(
        default="jobs",
        description="MongoDB database name"
    )
    recruiters_collection: str = Field(
        default="recruiters",
        description="Collection holding recruiter documents"
    )
    system_state_collection: str = Field(
        default="system_state",
        description="Collection holding import run history"
    )

    # === Logging ===
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("admin_api_secret")
    @classmethod
    def validate_secret_strength(cls, v: Optional[str]) -> Optional[str]:
        """Reject well-known weak secrets."""
        if v is None:
            return None
        weak_secrets = {"secret", "password", "12345678901234567", "changeme"}
        if v.lower() in weak_secrets or len(set(v)) < 4:
            raise ValueError("API secret is too weak - use a secure random string")
        return v

    @field_validator("mongodb_uri")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Basic URL format validation."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(f"Invalid MongoDB URI format: {v}")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def repository_config(self) -> RepositoryConfig:
        """Connection settings for the recruiter and system_state repositories."""
        return RepositoryConfig(
            mongodb_uri=self.mongodb_uri,
            database=self.mongo_db_name,
            recruiters_collection=self.recruiters_collection,
            system_state_collection=self.system_state_collection,
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_required(self) -> bool:
        """Auth is required in production or whenever a secret is configured."""
        return self.is_production or self.admin_api_secret is not None

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.is_production:
            if not self.admin_api_secret:
                issues.append("CRITICAL: ADMIN_API_SECRET required in production")
            if not self.cors_origins:
                issues.append("WARNING: CORS_ORIGINS not configured")
            if "localhost" in self.mongodb_uri:
                issues.append("WARNING: Using localhost MongoDB in production")

        return issues


@lru_cache()
def get_settings() -> RunnerSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached.
    """
    return RunnerSettings()


def validate_config_on_startup() -> None:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    # Log loaded configuration (redact secrets)
    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  mongodb_uri={'*****' if 'localhost' not in settings.mongodb_uri else settings.mongodb_uri}")
    logger.info(f"  auth_required={settings.auth_required}")


# Convenience exports
settings = get_settings()
