"""
Base model for API payloads.

Request and response bodies use camelCase keys; Python code uses
snake_case attributes. Models accept either form on input.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Pydantic model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self, **kwargs: Any) -> Dict[str, Any]:
        """Dump with camelCase keys, JSON-compatible values."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


def format_validation_errors(error: ValidationError) -> str:
    """
    Render pydantic errors as ``path: message`` pairs.

    Example:
        "resumeId: Invalid resume ID, contact.email: value is not a valid email address"
    """
    parts: List[str] = []
    for issue in error.errors():
        path = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        parts.append(f"{path}: {message}" if path else message)
    return ", ".join(parts)
