"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that keep tests away from real
external services:
- Environment isolation (mock AI keys, no Apify key, no Redis)
- Fresh AI / retry configuration caches per test
- In-memory repositories instead of MongoDB

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import os

# Set test environment BEFORE any imports to prevent Config from loading real values
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/test")

import pytest

from src.common.ai_config import reset_ai_config_cache
from src.common.rate_limiter import reset_global_registry
from src.common.retry import reset_retry_config_cache
from tests.helpers.fake_repository import install_fake_repositories, uninstall_fake_repositories


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    Mock API keys prevent accidental real LLM calls; every cached
    configuration is dropped so env changes take effect.
    """
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("AI_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-mock-key")
    monkeypatch.delenv("AI_MODEL", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    for name in [n for n in os.environ if n.startswith("AI_RETRY_")]:
        monkeypatch.delenv(name, raising=False)

    reset_ai_config_cache()
    reset_retry_config_cache()
    reset_global_registry()
    yield
    reset_ai_config_cache()
    reset_retry_config_cache()
    reset_global_registry()


@pytest.fixture(autouse=True)
def fake_repositories():
    """Every collection backed by an in-memory repository."""
    fakes = install_fake_repositories()
    yield fakes
    uninstall_fake_repositories()
