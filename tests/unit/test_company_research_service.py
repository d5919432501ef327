"""
Unit tests for CompanyResearchService.

research_company is patched in the service namespace; the companies
collection is the in-memory fake from conftest.
"""

import uuid
from datetime import timedelta
from unittest.mock import patch

import pytest

from src.common.errors import CompanyResearchError, ErrorCode
from src.common.repositories import Collections, CompanyCacheRepository, utcnow
from src.services.company_research_service import CompanyResearchService
from tests.helpers.factories import make_company_research


# ===== FIXTURES =====

@pytest.fixture
def companies(fake_repositories):
    return fake_repositories[Collections.COMPANIES]


@pytest.fixture
def service():
    return CompanyResearchService()


@pytest.fixture
def mock_research():
    with patch("src.services.company_research_service.research_company") as mock:
        mock.return_value = make_company_research()
        yield mock


# ===== TESTS: research() =====

class TestResearch:
    """Cache-aware synchronous research."""

    def test_cache_miss_researches_and_stores(self, service, companies, mock_research):
        result = service.research("Stripe")

        assert result["cached"] is False
        assert result["data"]["companyName"] == "Stripe"
        stored = companies.find_one({"name": "stripe"})
        assert stored["culture_signals"]["industry"] == "Financial Technology"
        assert stored["status"] == "completed"

    def test_fresh_cache_hit(self, service, companies, mock_research):
        CompanyCacheRepository(companies).upsert_research("Stripe", make_company_research(industry="Cached"))

        result = service.research("  STRIPE ")

        assert result == {"data": make_company_research(industry="Cached"), "cached": True}
        mock_research.assert_not_called()

    def test_stale_cache_refreshed(self, service, companies, mock_research):
        CompanyCacheRepository(companies).upsert_research("Stripe", make_company_research(industry="Old"))
        companies.update_one({"name": "stripe"}, {"$set": {"cached_at": utcnow() - timedelta(days=8)}})

        result = service.research("Stripe")

        assert result["cached"] is False
        assert companies.count_documents({"name": "stripe"}) == 1
        assert companies.find_one({"name": "stripe"})["culture_signals"]["industry"] == "Financial Technology"

    def test_force_refresh(self, service, companies, mock_research):
        CompanyCacheRepository(companies).upsert_research("Stripe", make_company_research())
        assert service.research("Stripe", force_refresh=True)["cached"] is False
        mock_research.assert_called_once_with("Stripe")

    def test_cache_write_failure_still_returns(self, service, companies, mock_research):
        companies.fail_with = RuntimeError("mongo down")
        result = service.research("Stripe", force_refresh=True)
        assert result["data"]["companyName"] == "Stripe"

    def test_research_error_propagates(self, service, mock_research):
        mock_research.side_effect = CompanyResearchError("limited", ErrorCode.RATE_LIMIT)
        with pytest.raises(CompanyResearchError):
            service.research("Stripe")


# ===== TESTS: process() / get_status() =====

class TestProcessAndStatus:
    """Tracked research requests."""

    def test_process_completes(self, service, mock_research):
        request_id = str(uuid.uuid4())

        service.process(request_id, "Stripe")

        status = service.get_status(request_id)
        assert status["status"] == "completed"
        assert status["data"]["companyName"] == "Stripe"

    def test_process_failure_marks_failed(self, service, companies, mock_research):
        request_id = str(uuid.uuid4())
        mock_research.side_effect = CompanyResearchError("provider down", ErrorCode.API_ERROR)

        with pytest.raises(CompanyResearchError):
            service.process(request_id, "Stripe")

        assert service.get_status(request_id) == {"status": "failed", "error": "provider down"}
        assert companies.find_one({"_id": request_id})["status"] == "failed"

    def test_reuses_existing_company_row(self, service, companies, mock_research):
        company_id = CompanyCacheRepository(companies).upsert_research("Stripe", make_company_research())
        request_id = str(uuid.uuid4())

        service.process(request_id, "Stripe")

        assert companies.count_documents({}) == 1
        assert service.get_status(company_id)["status"] == "completed"

    def test_status_processing(self, service, companies):
        request_id = str(uuid.uuid4())
        companies.insert_one({"_id": request_id, "name": "acme", "status": "processing"})
        assert service.get_status(request_id) == {"status": "processing"}

    def test_status_unknown(self, service):
        assert service.get_status(str(uuid.uuid4())) is None

    def test_status_invalid_id(self, service):
        with pytest.raises(ValueError):
            service.get_status("not-a-uuid")
