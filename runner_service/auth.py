"""
Authentication Module

Guards admin-only endpoints with a shared admin bearer secret.
Uses centralized config for settings validation.
"""

import hmac
import logging

from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import settings


logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_admin_secret() -> str:
    """Get the admin API secret from validated config."""
    if not settings.admin_api_secret:
        raise ValueError(
            "ADMIN_API_SECRET environment variable is required for authentication"
        )
    return settings.admin_api_secret


async def verify_admin_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> HTTPAuthorizationCredentials:
    """
    Verify the admin bearer token.

    Raises:
        HTTPException: 401 if the header is missing or the token is wrong,
            500 if auth is required but no secret is configured
    """
    if not settings.auth_required:
        # Auth not required in development without secret
        return credentials

    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Unauthorized: No authorization header"
        )

    try:
        expected_secret = get_admin_secret()
    except ValueError:
        raise HTTPException(
            status_code=500,
            detail="Server authentication not configured"
        )

    if not hmac.compare_digest(credentials.credentials, expected_secret):
        logger.warning("Rejected request with invalid admin token")
        raise HTTPException(
            status_code=401,
            detail="Unauthorized: Invalid token"
        )

    return credentials
