"""
Repository Configuration and Factory

Provides factory functions returning the repository for each collection,
plus index management for the uniqueness constraints the data model
relies on.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Optional

from pymongo import ASCENDING, DESCENDING

from .base import DocumentRepositoryInterface
from .mongo_repository import MongoRepository

logger = logging.getLogger(__name__)


class Collections:
    """Collection names."""
    USERS = "users"
    USER_SETTINGS = "user_settings"
    RESUMES = "resumes"
    JOBS = "jobs"
    COMPANIES = "companies"
    SOFT_SKILLS = "soft_skills"
    APPLICATIONS = "applications"


@dataclass
class RepositoryConfig:
    """
    Configuration for repository initialization.

    Loaded from environment variables with sensible defaults.
    """
    mongodb_uri: str
    database: str = "resume_tailor"

    @classmethod
    def from_env(cls) -> "RepositoryConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - MONGODB_URI (required): MongoDB connection string
        - MONGO_DB_NAME: Database name (default: resume_tailor)

        Raises:
            ValueError: If MONGODB_URI is not set
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")
        return cls(
            mongodb_uri=mongodb_uri,
            database=os.getenv("MONGO_DB_NAME", "resume_tailor"),
        )


# Singleton repository instances, one per collection
_repositories: Dict[str, DocumentRepositoryInterface] = {}
_config: Optional[RepositoryConfig] = None


def get_repository(collection: str) -> DocumentRepositoryInterface:
    """
    Get the repository for a collection.

    Uses singleton instances sharing one MongoClient.

    Args:
        collection: Collection name (see Collections)

    Returns:
        DocumentRepositoryInterface implementation

    Raises:
        ValueError: If MongoDB URI is not configured
    """
    global _config

    if collection not in _repositories:
        if _config is None:
            _config = RepositoryConfig.from_env()
        _repositories[collection] = MongoRepository(
            mongodb_uri=_config.mongodb_uri,
            database=_config.database,
            collection=collection,
        )
        logger.debug(f"Initialized repository for {collection}")

    return _repositories[collection]


def reset_repositories() -> None:
    """
    Reset repository singletons and the shared connection.

    Used for testing or when configuration changes.
    """
    global _config
    MongoRepository.reset_connection()
    _repositories.clear()
    _config = None
    logger.info("Repository singletons reset")


def ensure_indexes() -> None:
    """
    Create the indexes backing uniqueness constraints and common lookups.

    Safe to call repeatedly (create_index is idempotent).
    """
    def _index(collection: str, keys, **kwargs) -> None:
        repo = get_repository(collection)
        if isinstance(repo, MongoRepository):
            repo.create_index(keys, **kwargs)

    _index(Collections.USERS, [("email", ASCENDING)], unique=True)
    _index(Collections.USER_SETTINGS, [("user_id", ASCENDING)], unique=True)
    _index(Collections.RESUMES, [("user_id", ASCENDING), ("updated_at", DESCENDING)])
    _index(Collections.JOBS, [("created_at", DESCENDING)])
    _index(Collections.JOBS, [("platform", ASCENDING), ("external_id", ASCENDING)])
    _index(Collections.COMPANIES, [("name", ASCENDING)], unique=True)
    _index(Collections.COMPANIES, [("cached_at", DESCENDING)])
    _index(
        Collections.SOFT_SKILLS,
        [("user_id", ASCENDING), ("skill_name", ASCENDING)],
        unique=True,
    )
    _index(
        Collections.APPLICATIONS,
        [("user_id", ASCENDING), ("job_id", ASCENDING)],
        unique=True,
    )
    logger.info("MongoDB indexes ensured")
