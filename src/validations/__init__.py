"""Request and result schemas (pydantic, camelCase on the wire)."""

from .base import ApiModel, format_validation_errors

__all__ = ["ApiModel", "format_validation_errors"]
