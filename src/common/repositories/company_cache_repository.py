"""
Company Cache Repository

Company research results are cached on the companies collection under
``culture_signals`` with a ``cached_at`` timestamp. Entries older than
CACHE_TTL_DAYS are treated as stale and re-researched.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from .base import DocumentRepositoryInterface
from .config import Collections, get_repository
from .documents import as_aware, new_id, utcnow

logger = logging.getLogger(__name__)

CACHE_TTL_DAYS = 7


def normalize_company_name(name: str) -> str:
    """Cache key for a company: trimmed, lowercased name."""
    return name.strip().lower()


class CompanyCacheRepository:
    """
    Cache-aware access to the companies collection.

    The companies collection stores:
    - name (normalized, unique), display_name
    - culture_signals: the full research result
    - glassdoor_data, funding_data, competitors: extracted sections
    - cached_at: research timestamp (7 day TTL)
    - status / error_message: async research progress
    """

    def __init__(self, repository: Optional[DocumentRepositoryInterface] = None):
        self._repository = repository

    @property
    def repository(self) -> DocumentRepositoryInterface:
        if self._repository is None:
            self._repository = get_repository(Collections.COMPANIES)
        return self._repository

    def find_by_name(self, company_name: str) -> Optional[Dict[str, Any]]:
        """
        Find a company by name (case and whitespace insensitive).

        Args:
            company_name: Company name as entered

        Returns:
            Company document or None
        """
        return self.repository.find_one({"name": normalize_company_name(company_name)})

    @staticmethod
    def is_fresh(document: Optional[Dict[str, Any]]) -> bool:
        """Check whether a company document holds unexpired research."""
        if not document or not document.get("culture_signals"):
            return False
        cached_at = as_aware(document.get("cached_at"))
        if cached_at is None:
            return False
        return utcnow() - cached_at < timedelta(days=CACHE_TTL_DAYS)

    def get_cached_research(self, company_name: str) -> Optional[Dict[str, Any]]:
        """Return cached research for a company when still fresh."""
        document = self.find_by_name(company_name)
        if self.is_fresh(document):
            logger.info(f"Company cache hit: {company_name}")
            return document["culture_signals"]
        return None

    def upsert_research(self, company_name: str, research: Dict[str, Any]) -> str:
        """
        Store research for a company, updating the existing row if present.

        Args:
            company_name: Company name as entered
            research: Research result (API shape)

        Returns:
            Company document id
        """
        key = normalize_company_name(company_name)
        now = utcnow()
        fields = {
            "display_name": company_name.strip(),
            "culture_signals": research,
            "glassdoor_data": research.get("glassdoorData"),
            "funding_data": research.get("fundingData"),
            "competitors": research.get("competitors"),
            "cached_at": now,
            "status": "completed",
            "error_message": None,
        }

        existing = self.repository.find_one({"name": key})
        if existing:
            self.repository.update_one({"_id": existing["_id"]}, {"$set": fields})
            logger.info(f"Updated company research: {key}")
            return existing["_id"]

        company_id = new_id()
        self.repository.insert_one({"_id": company_id, "name": key, **fields})
        logger.info(f"Inserted company research: {key}")
        return company_id
