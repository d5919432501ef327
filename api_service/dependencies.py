"""
Shared route dependencies: the current user, per-bucket rate limits and
AI feature flags.
"""

import logging
from typing import Any, Callable, Dict

from fastapi import Request
from fastapi.concurrency import run_in_threadpool

from src.common.ai_config import get_feature_flags
from src.common.errors import AppError, ErrorCode
from src.common.rate_limiter import (
    LimitType,
    RateLimitExceededError,
    check_rate_limit,
    get_client_identifier,
)
from src.services.user_service import get_or_create_local_user

from .config import get_settings

logger = logging.getLogger(__name__)


async def get_current_user() -> Dict[str, Any]:
    """The local user document (created on first request)."""
    return await run_in_threadpool(get_or_create_local_user)


def rate_limit(limit_type: LimitType) -> Callable:
    """
    Build a dependency that consumes one request from a rate limit bucket.

    Raises RateLimitExceededError when the client is over its quota; the
    app turns it into a 429 with Retry-After. No-op when rate limiting is
    disabled.
    """
    async def dependency(request: Request) -> None:
        if not get_settings().rate_limit_enabled:
            return
        identifier = get_client_identifier(request.headers)
        result = check_rate_limit(identifier, limit_type.value)
        if not result.success:
            logger.warning(f"Rate limit exceeded for {identifier} ({limit_type.value})")
            raise RateLimitExceededError(
                identifier,
                limit_type.value,
                result.limit,
                result.limit,
                retry_after=result.retry_after_seconds,
                result=result,
            )

    return dependency


api_rate_limit = rate_limit(LimitType.API)
upload_rate_limit = rate_limit(LimitType.UPLOAD)
ai_rate_limit = rate_limit(LimitType.AI)


def require_feature(flag: str) -> Callable:
    """
    Build a dependency that rejects the request when an AI feature flag is off.

    Args:
        flag: AIFeatureFlags field name, e.g. "enable_tailoring"

    Raises AppError(FEATURE_DISABLED, 503) when the flag is false.
    """
    async def dependency() -> None:
        if not getattr(get_feature_flags(), flag):
            logger.info(f"Rejected request: {flag} is off")
            raise AppError(ErrorCode.FEATURE_DISABLED, "This AI feature is disabled", 503)

    return dependency


tailoring_enabled = require_feature("enable_tailoring")
job_match_enabled = require_feature("enable_job_match_analysis")
bullet_optimization_enabled = require_feature("enable_bullet_optimization")
