"""
Tests for /api/linkedin routes.

The Apify client is patched in the route module; no network calls.
"""

from unittest.mock import patch

import pytest

from src.common.repositories import Collections
from src.services.linkedin_client import (
    LinkedInNotConfiguredError,
    LinkedInRateLimitError,
    LinkedInTimeoutError,
)

LINKEDIN = "api_service.routes.linkedin"

APIFY_ITEMS = [
    {
        "jobId": "3912345678",
        "title": "Backend Engineer",
        "companyName": "Stripe",
        "location": "Seattle, WA",
        "postedTime": "2 hours ago",
        "descriptionText": "Build payment APIs.",
        "link": "https://www.linkedin.com/jobs/view/3912345678",
    },
    {"jobId": "3912345679", "title": "No company listed"},
]


def _import_body(**overrides):
    body = {
        "id": "c6b1f7a2-5f0e-4f1e-9a55-3c1f0f3b8a11",
        "externalId": "3912345678",
        "title": "Backend Engineer",
        "companyName": "Stripe",
        "location": "Seattle, WA",
        "salary": "$150K - $200K",
        "postedAt": "2024-01-15",
        "description": "Build payment APIs.",
        "url": "https://www.linkedin.com/jobs/view/3912345678",
    }
    body.update(overrides)
    return body


# ===== TESTS: Search =====

class TestSearch:
    """POST /api/linkedin/search"""

    def test_success(self, client):
        with patch(f"{LINKEDIN}.search_linkedin_jobs", return_value=APIFY_ITEMS) as search:
            response = client.post("/api/linkedin/search", json={"keywords": " python ", "location": "Seattle"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["totalCount"] == 1
        assert data["jobs"][0]["externalId"] == "3912345678"
        assert data["searchParams"] == {"keywords": "python", "location": "Seattle", "timeFrame": "24h"}
        search.assert_called_once_with("python", "Seattle", "24h", 25, None)

    def test_invalid_request(self, client):
        with patch(f"{LINKEDIN}.search_linkedin_jobs") as search:
            response = client.post("/api/linkedin/search", json={"keywords": "p", "timeFrame": "2d"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        search.assert_not_called()

    @pytest.mark.parametrize(
        "error,status,code",
        [
            (LinkedInNotConfiguredError("APIFY_API_KEY is not configured"), 503, "NOT_CONFIGURED"),
            (LinkedInTimeoutError("timed out"), 504, "TIMEOUT"),
            (LinkedInRateLimitError("limited"), 429, "RATE_LIMITED"),
            (RuntimeError("Actor run failed"), 500, "SEARCH_ERROR"),
        ],
    )
    def test_errors(self, client, error, status, code):
        with patch(f"{LINKEDIN}.search_linkedin_jobs", side_effect=error):
            response = client.post("/api/linkedin/search", json={"keywords": "python"})

        assert response.status_code == status
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == code

    def test_generic_error_keeps_message(self, client):
        with patch(f"{LINKEDIN}.search_linkedin_jobs", side_effect=RuntimeError("Actor run failed")):
            response = client.post("/api/linkedin/search", json={"keywords": "python"})
        assert response.json()["error"]["message"] == "Actor run failed"


# ===== TESTS: Import =====

class TestImport:
    """POST /api/linkedin/import"""

    def test_creates_job(self, client, repos):
        response = client.post("/api/linkedin/import", json=_import_body())

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["platform"] == "linkedin"
        assert data["salary"] == {"raw": "$150K - $200K"}
        assert data["postedAt"].startswith("2024-01-15")
        stored = repos[Collections.JOBS].find_one({"external_id": "3912345678"})
        assert stored["company_name"] == "Stripe"

    def test_duplicate(self, client):
        client.post("/api/linkedin/import", json=_import_body())
        response = client.post("/api/linkedin/import", json=_import_body())

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE"

    def test_missing_fields(self, client):
        response = client.post("/api/linkedin/import", json={"title": "Backend Engineer"})
        assert response.status_code == 400

    def test_store_failure(self, client, repos):
        repos[Collections.JOBS].fail_with = RuntimeError("mongo down")
        response = client.post("/api/linkedin/import", json=_import_body())
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CREATE_ERROR"


# ===== TESTS: Status =====

class TestStatus:
    """GET /api/linkedin/status"""

    def test_passes_through_key_check(self, client):
        result = {"status": "valid", "username": "jane", "message": "Apify API key is valid and working"}
        with patch(f"{LINKEDIN}.validate_api_key", return_value=result):
            response = client.get("/api/linkedin/status")

        assert response.status_code == 200
        assert response.json() == result
