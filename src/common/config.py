"""
Configuration loader for the resume tailoring service.

Loads all settings from environment variables (.env file).
AI provider settings live in src.common.ai_config; this module covers
storage, caching and third-party integrations.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """
    Centralized configuration for storage and integrations.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== Environment =====
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # ===== MongoDB =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGO_DB_NAME: str = os.getenv("MONGO_DB_NAME", "resume_tailor")

    # ===== Redis (rate limiting) =====
    REDIS_URL: str = os.getenv("REDIS_URL", "")

    # ===== LinkedIn search (Apify) =====
    APIFY_API_KEY: str = os.getenv("APIFY_API_KEY", "")

    # ===== Local single-user mode =====
    LOCAL_USER_EMAIL: str = os.getenv("LOCAL_USER_EMAIL", "local@resume-tailor.dev")
    LOCAL_USER_NAME: str = os.getenv("LOCAL_USER_NAME", "Local User")

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def validate(cls) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of human-readable problems (empty when valid)
        """
        problems = []
        if not cls.MONGODB_URI:
            problems.append("MONGODB_URI is not set")
        if cls.is_production() and not cls.REDIS_URL:
            problems.append("REDIS_URL is not set; rate limiting falls back to in-memory")
        if not cls.APIFY_API_KEY:
            problems.append("APIFY_API_KEY is not set; LinkedIn search disabled")
        return problems

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  Environment: {cls.ENVIRONMENT}
  MongoDB: {'✓ Configured' if cls.MONGODB_URI else '✗ Missing'} (db={cls.MONGO_DB_NAME})
  Redis: {'✓ Configured' if cls.REDIS_URL else '✗ In-memory fallback'}
  Apify: {'✓ Configured' if cls.APIFY_API_KEY else '✗ Missing'}
        """.strip()
