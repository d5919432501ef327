"""
Company Research Service.

Cache-aware company research. Results live on the companies collection
for CACHE_TTL_DAYS; a fresh cached report is served without an LLM call.

Two flows are supported:
- research(): synchronous lookup-or-research used by POST /api/modules/company
- process() / get_status(): a request id is recorded up front so a client
  can poll /api/modules/company/status/{id} while research runs

Usage:
    service = CompanyResearchService()
    result = service.research("Stripe")
    # {"data": {...}, "cached": False}
"""

import logging
from typing import Any, Dict, Optional

from src.analyzers.company_researcher import research_company
from src.common.repositories import (
    CompanyCacheRepository,
    is_valid_uuid,
    normalize_company_name,
    utcnow,
)

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


class CompanyResearchService:
    """
    Research companies with a 7-day cache on the companies collection.

    The cache repository is injectable for tests.
    """

    def __init__(self, cache_repository: Optional[CompanyCacheRepository] = None):
        self._cache_repository = cache_repository

    @property
    def cache(self) -> CompanyCacheRepository:
        if self._cache_repository is None:
            self._cache_repository = CompanyCacheRepository()
        return self._cache_repository

    # ===== SYNCHRONOUS RESEARCH =====

    def research(self, company_name: str, force_refresh: bool = False) -> Dict[str, Any]:
        """
        Return research for a company, from cache when fresh.

        Args:
            company_name: Company name as entered
            force_refresh: Skip the cache

        Returns:
            {"data": research result, "cached": bool}

        Raises:
            CompanyResearchError: When the LLM research fails
        """
        if not force_refresh:
            cached = self.cache.get_cached_research(company_name)
            if cached is not None:
                return {"data": cached, "cached": True}

        research = research_company(company_name)
        try:
            self.cache.upsert_research(company_name, research)
        except Exception as e:
            # A cache write failure still returns the fresh research
            logger.error(f"Failed to cache research for {company_name}: {e}")

        return {"data": research, "cached": False}

    # ===== ASYNC PROCESS / STATUS =====

    def _mark_processing(self, request_id: str, company_name: str) -> str:
        """Record that research started; returns the company document id."""
        repo = self.cache.repository
        key = normalize_company_name(company_name)
        existing = repo.find_one({"name": key})
        company_id = existing["_id"] if existing else request_id

        repo.update_one(
            {"_id": company_id},
            {
                "$set": {
                    "name": key,
                    "display_name": company_name.strip(),
                    "request_id": request_id,
                    "status": STATUS_PROCESSING,
                    "error_message": None,
                    "updated_at": utcnow(),
                }
            },
            upsert=True,
        )
        return company_id

    def process(self, request_id: str, company_name: str) -> Dict[str, Any]:
        """
        Run research for a tracked request.

        The company row is marked processing first, then completed with the
        research, or failed with the error message.

        Args:
            request_id: Client-generated id used for status polling
            company_name: Company to research

        Returns:
            Research result

        Raises:
            CompanyResearchError: When research fails (row is marked failed)
        """
        company_id = self._mark_processing(request_id, company_name)
        logger.info(f"Processing company research {request_id} for {company_name}")

        try:
            research = research_company(company_name)
        except Exception as e:
            self.cache.repository.update_one(
                {"_id": company_id},
                {"$set": {"status": STATUS_FAILED, "error_message": str(e), "updated_at": utcnow()}},
            )
            logger.error(f"Company research {request_id} failed: {e}")
            raise

        self.cache.upsert_research(company_name, research)
        return research

    def get_status(self, research_id: str) -> Optional[Dict[str, Any]]:
        """
        Look up a research request by company id or request id.

        Args:
            research_id: Company document id or the request id given to process()

        Returns:
            {"status", "data"?, "error"?} or None when unknown

        Raises:
            ValueError: When research_id is not a UUID
        """
        if not is_valid_uuid(research_id):
            raise ValueError("Invalid research ID format")

        document = self.cache.repository.find_one(
            {"$or": [{"_id": research_id}, {"request_id": research_id}]}
        )
        if document is None:
            return None

        status = document.get("status") or STATUS_PENDING
        if status == STATUS_COMPLETED:
            return {"status": status, "data": document.get("culture_signals")}
        if status == STATUS_FAILED:
            return {"status": status, "error": document.get("error_message") or "Company research failed"}
        return {"status": status}
