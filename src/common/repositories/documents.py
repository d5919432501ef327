"""
Document helpers shared by repositories and routes.

Documents are stored with snake_case top-level fields and a string UUID
``_id``. API payloads use camelCase with ``id``; nested JSON values
(resume content, research results) are stored exactly as the API shapes
them and are not renamed.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic.alias_generators import to_camel, to_snake


def new_id() -> str:
    """Generate a new document id."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def is_valid_uuid(value: Any) -> bool:
    """Check whether a value is a UUID string."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
        return True
    except ValueError:
        return False


def to_api(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert a stored document into an API payload.

    ``_id`` becomes ``id`` and top-level keys become camelCase.
    """
    if document is None:
        return None
    payload: Dict[str, Any] = {}
    for key, value in document.items():
        if key == "_id":
            payload["id"] = value
        else:
            payload[to_camel(key)] = value
    return payload


def to_document(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Convert top-level camelCase API keys to stored snake_case fields."""
    return {to_snake(key): value for key, value in payload.items()}


def as_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes read back from MongoDB as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
