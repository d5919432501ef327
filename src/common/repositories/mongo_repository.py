"""
MongoDB Document Repository

Thin wrapper around a pymongo collection implementing
DocumentRepositoryInterface. One MongoClient is shared by every
collection for connection pooling.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from .base import DocumentRepositoryInterface, WriteResult

logger = logging.getLogger(__name__)


class MongoRepository(DocumentRepositoryInterface):
    """
    Repository for one MongoDB collection.

    Connection Management:
    - Uses a class-level MongoClient shared across all collections
    - Client is created on first use and reused across requests
    - PyMongo handles connection pooling internally

    Error Handling:
    - Fail-fast: All errors propagate to caller
    """

    _client: Optional[MongoClient] = None
    _db: Optional[Database] = None

    def __init__(self, mongodb_uri: str, database: str, collection: str):
        """
        Initialize repository with connection parameters.

        Args:
            mongodb_uri: MongoDB connection string
            database: Database name
            collection: Collection name
        """
        self._mongodb_uri = mongodb_uri
        self._database_name = database
        self._collection_name = collection

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def _get_collection(self) -> Collection:
        """
        Get the MongoDB collection, creating the shared client if needed.

        Returns:
            MongoDB collection instance
        """
        if MongoRepository._db is None:
            MongoRepository._client = MongoClient(self._mongodb_uri)
            MongoRepository._db = MongoRepository._client[self._database_name]
            logger.info(f"MongoDB connected: database={self._database_name}")
        return MongoRepository._db[self._collection_name]

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._get_collection().find_one(filter)

    def find(
        self,
        filter: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None,
        sort: Optional[List[tuple]] = None,
        limit: int = 0,
        skip: int = 0,
    ) -> List[Dict[str, Any]]:
        cursor = self._get_collection().find(filter, projection)
        if sort:
            cursor = cursor.sort(sort)
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    def count_documents(self, filter: Dict[str, Any]) -> int:
        return self._get_collection().count_documents(filter)

    def insert_one(self, document: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().insert_one(document)
        return WriteResult(inserted_id=str(result.inserted_id))

    def update_one(
        self,
        filter: Dict[str, Any],
        update: Dict[str, Any],
        upsert: bool = False,
    ) -> WriteResult:
        result = self._get_collection().update_one(filter, update, upsert=upsert)
        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=str(result.upserted_id) if result.upserted_id else None,
        )

    def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().update_many(filter, update)
        return WriteResult(
            matched_count=result.matched_count,
            modified_count=result.modified_count,
        )

    def delete_one(self, filter: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().delete_one(filter)
        return WriteResult(deleted_count=result.deleted_count)

    def delete_many(self, filter: Dict[str, Any]) -> WriteResult:
        result = self._get_collection().delete_many(filter)
        return WriteResult(deleted_count=result.deleted_count)

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return list(self._get_collection().aggregate(pipeline))

    def create_index(self, keys: Any, **kwargs: Any) -> str:
        """Create an index on this collection."""
        return self._get_collection().create_index(keys, **kwargs)

    def ping(self) -> None:
        """Round-trip to the server (raises on failure)."""
        self._get_collection().database.command("ping")

    @classmethod
    def reset_connection(cls) -> None:
        """Close and reset the shared client."""
        if cls._client is not None:
            cls._client.close()
        cls._client = None
        cls._db = None
