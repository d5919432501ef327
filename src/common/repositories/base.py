"""
Repository Interface Definitions

Defines the abstract interface for document collection operations so
route handlers and services never touch pymongo directly and tests can
substitute mocks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class WriteResult:
    """
    Result of a write operation.

    Attributes:
        matched_count: Number of documents that matched the filter
        modified_count: Number of documents actually modified
        upserted_id: ID of upserted document (if any)
        inserted_id: ID of inserted document (if any)
        deleted_count: Number of documents deleted
    """
    matched_count: int = 0
    modified_count: int = 0
    upserted_id: Optional[str] = None
    inserted_id: Optional[str] = None
    deleted_count: int = 0


class DocumentRepositoryInterface(ABC):
    """
    Abstract interface for a single MongoDB collection.

    Documents use string UUID ``_id`` values. All methods follow fail-fast
    semantics: driver errors propagate to the caller.
    """

    @abstractmethod
    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Find a single document.

        Args:
            filter: MongoDB query filter (e.g., {"_id": "uuid", "user_id": "uuid"})

        Returns:
            Document dict if found, None otherwise
        """
        pass

    @abstractmethod
    def find(
        self,
        filter: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        """
        Find multiple documents.

        Args:
            filter: MongoDB query filter
            projection: Fields to include/exclude
            sort: List of (field, direction) tuples
            limit: Maximum documents to return (0 = no limit)
            skip: Number of documents to skip

        Returns:
            List of document dicts
        """
        pass

    @abstractmethod
    def count_documents(self, filter: Dict[str, Any]) -> int:
        """Count documents matching filter."""
        pass

    @abstractmethod
    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        """Insert a single document."""
        pass

    @abstractmethod
    def update_one(
        self,
        filter: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
    ) -> WriteResult:
        """
        Update a single document.

        Args:
            filter: MongoDB query filter
            update: Update operations (e.g., {"$set": {...}})
            upsert: Insert if no match
        """
        pass

    @abstractmethod
    def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        """Update multiple documents."""
        pass

    @abstractmethod
    def delete_one(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete a single document."""
        pass

    @abstractmethod
    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        """Delete multiple documents."""
        pass

    @abstractmethod
    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Run an aggregation pipeline."""
        pass

    @abstractmethod
    def ping(self) -> None:
        """Check the backing store is reachable (raises on failure)."""
        pass
