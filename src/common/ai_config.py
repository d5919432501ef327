"""
AI provider configuration.

Reads the provider, API key, model and generation defaults from the
environment and validates them with pydantic. Loaded values are cached
until reset_ai_config_cache() is called (tests change env between runs).

Environment variables:
    AI_PROVIDER: "anthropic" (default) or "openai"
    ANTHROPIC_API_KEY / OPENAI_API_KEY: key for the active provider
    AI_MODEL: Model name (defaults to the provider's flagship model)
    AI_TEMPERATURE: 0-2 (default 0.7)
    AI_MAX_TOKENS: Positive int (default 4000)
    AI_TIMEOUT: Request timeout in ms (default 60000)
    ENABLE_AI_TAILORING / ENABLE_AI_SUMMARY / ENABLE_AI_SKILL_EXTRACTION /
    ENABLE_AI_BULLET_OPTIMIZATION / ENABLE_AI_JOB_MATCH: "false" disables
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

AIProvider = Literal["anthropic", "openai"]
AIModel = Literal[
    "claude-sonnet-4-5-20250929",
    "claude-3-5-haiku-20241022",
    "gpt-4o",
    "gpt-4o-mini",
]

AI_PROVIDERS = ("anthropic", "openai")
AI_MODELS = (
    "claude-sonnet-4-5-20250929",
    "claude-3-5-haiku-20241022",
    "gpt-4o",
    "gpt-4o-mini",
)

DEFAULT_MODELS: Dict[str, str] = {
    "anthropic": "claude-sonnet-4-5-20250929",
    "openai": "gpt-4o",
}


class AIConfig(BaseModel):
    """Validated AI provider configuration."""

    provider: AIProvider = "anthropic"
    api_key: str = Field(..., min_length=1)
    model: AIModel = "claude-sonnet-4-5-20250929"
    temperature: float = Field(default=0.7, ge=0, le=2)
    max_tokens: int = Field(default=4000, gt=0)
    timeout: int = Field(default=60000, gt=0, description="Per-request timeout in ms")


class AIFeatureFlags(BaseModel):
    """Toggles for individual AI features."""

    enable_tailoring: bool = True
    enable_summary_generation: bool = True
    enable_skill_extraction: bool = True
    enable_bullet_optimization: bool = True
    enable_job_match_analysis: bool = True


@dataclass(frozen=True)
class ModelConfig:
    """Per-use-case generation settings; the model itself comes from AI_MODEL."""

    temperature: float
    max_tokens: int


MODEL_CONFIGS: Dict[str, ModelConfig] = {
    "resume_tailoring": ModelConfig(0.7, 4000),
    "resume_parsing": ModelConfig(0.1, 4000),
    "context_analysis": ModelConfig(0.3, 4000),
    "uniqueness_analysis": ModelConfig(0.4, 2500),
    "impact_analysis": ModelConfig(0.4, 4000),
    "company_research": ModelConfig(0.5, 4000),
    "soft_skills_coach": ModelConfig(0.7, 1000),
}


_ai_config: Optional[AIConfig] = None
_feature_flags: Optional[AIFeatureFlags] = None


def _env_flag(name: str) -> bool:
    return os.getenv(name, "true").lower() != "false"


def load_ai_config() -> AIConfig:
    """
    Load AI configuration from the environment.

    Returns:
        Validated AIConfig

    Raises:
        ValueError: If the active provider has no API key or a value is invalid
    """
    provider = os.getenv("AI_PROVIDER", "anthropic").lower()
    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY", "")
    else:
        api_key = os.getenv("ANTHROPIC_API_KEY", "")

    raw = {
        "provider": provider,
        "api_key": api_key,
        "model": os.getenv("AI_MODEL") or DEFAULT_MODELS.get(provider, DEFAULT_MODELS["anthropic"]),
        "temperature": os.getenv("AI_TEMPERATURE", "0.7"),
        "max_tokens": os.getenv("AI_MAX_TOKENS", "4000"),
        "timeout": os.getenv("AI_TIMEOUT", "60000"),
    }

    try:
        return AIConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid AI configuration: {e}") from e


def load_feature_flags() -> AIFeatureFlags:
    """Load AI feature flags from the environment."""
    return AIFeatureFlags(
        enable_tailoring=_env_flag("ENABLE_AI_TAILORING"),
        enable_summary_generation=_env_flag("ENABLE_AI_SUMMARY"),
        enable_skill_extraction=_env_flag("ENABLE_AI_SKILL_EXTRACTION"),
        enable_bullet_optimization=_env_flag("ENABLE_AI_BULLET_OPTIMIZATION"),
        enable_job_match_analysis=_env_flag("ENABLE_AI_JOB_MATCH"),
    )


def get_ai_config() -> AIConfig:
    """Get the cached AI configuration, loading it on first use."""
    global _ai_config
    if _ai_config is None:
        _ai_config = load_ai_config()
        logger.info(f"AI configured: provider={_ai_config.provider} model={_ai_config.model}")
    return _ai_config


def get_feature_flags() -> AIFeatureFlags:
    """Get the cached feature flags."""
    global _feature_flags
    if _feature_flags is None:
        _feature_flags = load_feature_flags()
    return _feature_flags


def reset_ai_config_cache() -> None:
    """Reset cached configuration (for testing)."""
    global _ai_config, _feature_flags
    _ai_config = None
    _feature_flags = None


def is_ai_configured() -> bool:
    """Check whether a usable AI configuration exists."""
    try:
        get_ai_config()
        return True
    except ValueError:
        return False


def get_model_config(use_case: str) -> ModelConfig:
    """
    Get generation settings for a use case.

    Raises:
        KeyError: If the use case is unknown
    """
    return MODEL_CONFIGS[use_case]
