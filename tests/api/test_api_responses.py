"""
Tests for the envelope helpers in api_service/responses.py
"""

import json
import time

from api_service.responses import (
    error_response,
    forbidden_response,
    not_found_response,
    rate_limit_response,
    sanitize_filename,
    success_with_meta,
    unauthorized_response,
    validation_error_response,
)
from src.common.rate_limiter import RateLimitResult


def _body(response):
    return json.loads(response.body)


class TestEnvelopes:
    """Status codes and error shapes."""

    def test_error_defaults_from_code(self):
        response = error_response("DUPLICATE")
        assert response.status_code == 409
        assert _body(response) == {"success": False, "error": {"code": "DUPLICATE", "message": "Resource already exists"}}

    def test_success_with_meta(self):
        assert _body(success_with_meta([1], {"total": 1})) == {"success": True, "data": [1], "meta": {"total": 1}}

    def test_not_found(self):
        assert _body(not_found_response("Resume"))["error"]["message"] == "Resume not found"

    def test_validation_error_details(self):
        response = validation_error_response("name: required", [{"loc": ["name"]}])
        assert response.status_code == 400
        assert _body(response)["error"]["details"] == [{"loc": ["name"]}]

    def test_auth_responses(self):
        assert unauthorized_response().status_code == 401
        assert _body(unauthorized_response())["error"]["message"] == "Authentication required"
        assert forbidden_response().status_code == 403
        assert _body(forbidden_response())["error"]["code"] == "FORBIDDEN"

    def test_rate_limit_headers(self):
        result = RateLimitResult(success=False, limit=20, remaining=0, reset=time.time() + 30)
        response = rate_limit_response(result)
        assert response.status_code == 429
        assert response.headers["x-ratelimit-limit"] == "20"
        assert "retry-after" in response.headers


class TestSanitizeFilename:
    """Content-Disposition safe names."""

    def test_drops_directories_and_unsafe_characters(self):
        assert sanitize_filename("../../etc/My Resume (1).pdf") == "My_Resume__1_.pdf"

    def test_windows_paths(self):
        assert sanitize_filename("C:\\Users\\jane\\cv.pdf") == "cv.pdf"

    def test_hidden_and_empty(self):
        assert sanitize_filename(".bashrc") == "bashrc"
        assert sanitize_filename("...") == "file"
