"""
Pytest fixtures for API tests.
"""

import os

# IMPORTANT: Set environment variables BEFORE any imports from api_service
# so ApiSettings is configured correctly when the app module loads.
os.environ["ENVIRONMENT"] = "development"
os.environ["AUTH_REQUIRED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/test")

import pytest
from fastapi.testclient import TestClient

from api_service.config import get_settings
from src.common.ai_config import reset_ai_config_cache
from src.common.rate_limiter import reset_global_registry
from src.common.retry import reset_retry_config_cache
from src.services.user_service import get_or_create_local_user
from tests.helpers.fake_repository import install_fake_repositories, uninstall_fake_repositories

TEST_SECRET = "test-secret-key-1234"


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Mock AI key, fresh caches and the default (open, unlimited) settings."""
    monkeypatch.setenv("AI_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-test-mock-key")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    get_settings.cache_clear()
    reset_ai_config_cache()
    reset_retry_config_cache()
    reset_global_registry()
    yield
    get_settings.cache_clear()
    reset_ai_config_cache()
    reset_retry_config_cache()
    reset_global_registry()


@pytest.fixture(autouse=True)
def repos():
    """Every collection backed by an in-memory repository."""
    fakes = install_fake_repositories()
    yield fakes
    uninstall_fake_repositories()


@pytest.fixture
def client():
    """FastAPI test client; server errors come back as 500 responses."""
    from api_service.app import app
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def user():
    """The local user the API acts as."""
    return get_or_create_local_user()


@pytest.fixture
def auth_enabled(monkeypatch):
    """Require the shared-secret bearer token."""
    monkeypatch.setenv("AUTH_REQUIRED", "true")
    monkeypatch.setenv("API_SECRET_KEY", TEST_SECRET)
    get_settings.cache_clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {TEST_SECRET}"}


@pytest.fixture
def rate_limits_enabled(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    get_settings.cache_clear()

