"""
Authentication Module

Optional shared-secret bearer authentication. When AUTH_REQUIRED is off
(local single-user mode) every request is accepted.
"""

import hmac
import logging
from typing import Optional

from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.common.errors import AppError, ErrorCode

from .config import get_settings

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


async def verify_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> Optional[HTTPAuthorizationCredentials]:
    """
    Verify the shared secret bearer token.

    Returns:
        The credentials (None when auth is not required and none were sent)

    Raises:
        AppError: 401 UNAUTHORIZED on a missing or wrong token,
            500 when auth is required but no secret is configured
    """
    settings = get_settings()
    if not settings.auth_required:
        return credentials

    if not settings.api_secret_key:
        raise AppError(ErrorCode.INTERNAL_ERROR, "Server authentication not configured", 500)

    if credentials is None:
        raise AppError(ErrorCode.UNAUTHORIZED, "Authentication required", 401)

    if not hmac.compare_digest(credentials.credentials, settings.api_secret_key):
        logger.warning("Rejected request with invalid bearer token")
        raise AppError(ErrorCode.UNAUTHORIZED, "Invalid authentication token", 401)

    return credentials
