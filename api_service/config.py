"""
API Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ApiSettings(BaseSettings):
    """
    API service configuration with validation.

    All settings can be overridden via environment variables
    (ENVIRONMENT, CORS_ORIGINS, API_SECRET_KEY, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # === Environment ===
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # === Security ===
    api_secret_key: Optional[str] = Field(
        default=None,
        min_length=16,
        description="Bearer token secret (min 16 chars)"
    )
    auth_required: bool = Field(
        default=False,
        description="Require a bearer token on every /api route except health"
    )

    # === CORS ===
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # === Rate limiting ===
    rate_limit_enabled: bool = Field(
        default=True,
        description="Apply per-client rate limits"
    )

    # === Logging ===
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="simple",
        description="simple or json"
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

    @field_validator("api_secret_key")
    @classmethod
    def validate_secret_strength(cls, v: Optional[str]) -> Optional[str]:
        """Reject obviously weak secrets."""
        if v is None:
            return None
        weak_secrets = {"secret", "password", "changeme"}
        if v.lower() in weak_secrets or len(set(v)) < 4:
            raise ValueError("API secret is too weak - use a secure random string")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("simple", "json"):
            raise ValueError("log_format must be 'simple' or 'json'")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate_production_config(self) -> List[str]:
        """
        Validate configuration is suitable for production.

        Returns list of warning/error messages.
        """
        issues = []

        if self.auth_required and not self.api_secret_key:
            issues.append("CRITICAL: API_SECRET_KEY required when AUTH_REQUIRED is set")

        if self.is_production:
            if not self.cors_origins:
                issues.append("WARNING: CORS_ORIGINS not configured")
            if not self.auth_required:
                issues.append("WARNING: AUTH_REQUIRED is off in production")
            if not self.rate_limit_enabled:
                issues.append("WARNING: rate limiting disabled in production")

        return issues


@lru_cache()
def get_settings() -> ApiSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for performance.
    """
    return ApiSettings()


def validate_config_on_startup() -> ApiSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    for issue in settings.validate_production_config():
        if issue.startswith("CRITICAL"):
            raise ValueError(issue)
        logger.warning(issue)

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  auth_required={settings.auth_required}")
    logger.info(f"  rate_limit_enabled={settings.rate_limit_enabled}")
    logger.info(f"  cors_origins={settings.cors_origins_list}")
    return settings
