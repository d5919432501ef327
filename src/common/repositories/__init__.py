"""
Repository Pattern for MongoDB Operations

Provides an abstraction layer over MongoDB so services and routes depend on
an interface instead of pymongo.

Public API:
- get_repository(collection): Factory returning a collection repository
- Collections: Collection name constants
- DocumentRepositoryInterface: Abstract interface for a collection
- WriteResult: Result dataclass for write operations
- CompanyCacheRepository: Cache-aware company research access

Usage:
    from src.common.repositories import Collections, get_repository

    resumes = get_repository(Collections.RESUMES)
    resume = resumes.find_one({"_id": resume_id, "user_id": user_id})
"""

from .base import DocumentRepositoryInterface, WriteResult
from .company_cache_repository import (
    CACHE_TTL_DAYS,
    CompanyCacheRepository,
    normalize_company_name,
)
from .config import (
    Collections,
    RepositoryConfig,
    ensure_indexes,
    get_repository,
    reset_repositories,
)
from .documents import as_aware, is_valid_uuid, new_id, to_api, to_document, utcnow

__all__ = [
    "DocumentRepositoryInterface",
    "WriteResult",
    "CACHE_TTL_DAYS",
    "CompanyCacheRepository",
    "normalize_company_name",
    "Collections",
    "RepositoryConfig",
    "ensure_indexes",
    "get_repository",
    "reset_repositories",
    "as_aware",
    "is_valid_uuid",
    "new_id",
    "to_api",
    "to_document",
    "utcnow",
]
