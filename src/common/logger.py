"""
Centralized logging configuration for the resume tailoring service.

Provides structured logging with request/resource context tagging for easy
debugging. Development output is human readable; production output is one
JSON object per line for log aggregators.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Global debug mode flag - can be set via environment
_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def is_debug_mode() -> bool:
    """Check if debug mode is enabled globally."""
    return _GLOBAL_DEBUG_MODE


class JsonFormatter(logging.Formatter):
    """Formats records as single-line JSON, including structured context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "name": record.name,
            "message": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context
        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            entry["error"] = {"name": type(exc).__name__, "message": str(exc)}
        return json.dumps(entry, default=str)


class StructuredLogger:
    """
    Structured logger carrying a context dict.

    Context keys are rendered as a ``[key:value]`` prefix in text mode and
    attached as ``context`` in JSON mode.
    """

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        debug_mode: Optional[bool] = None
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name (usually __name__)
            context: Key/value pairs attached to every message
            debug_mode: If True, enables DEBUG level for this logger.
                       If None, uses global debug mode setting.
        """
        self.name = name
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = dict(context or {})

        self._debug_mode = debug_mode if debug_mode is not None else is_debug_mode()
        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

    def child(self, **context: Any) -> "StructuredLogger":
        """Create a logger that adds context on top of this one."""
        merged = {**self.context, **context}
        return StructuredLogger(self.name, merged, self._debug_mode)

    def for_request(self, request_id: str, path: str, method: str) -> "StructuredLogger":
        """Create a logger tagged with HTTP request details."""
        return self.child(request_id=request_id, path=path, method=method)

    def _format_message(self, message: str, extra_context: Optional[Dict[str, Any]] = None) -> str:
        """Add contextual prefix to message."""
        context = {**self.context, **(extra_context or {})}
        if not context:
            return message
        prefix = " ".join(f"[{key}:{value}]" for key, value in context.items())
        return f"{prefix} {message}"

    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]], **kwargs):
        merged = {**self.context, **(context or {})}
        kwargs.setdefault("extra", {})["context"] = merged
        self.logger.log(level, self._format_message(message, context), **kwargs)

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Log debug message."""
        self._log(logging.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Log info message."""
        self._log(logging.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Log warning message."""
        self._log(logging.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Log error message."""
        self._log(logging.ERROR, message, context, **kwargs)

    def exception(self, message: str, context: Optional[Dict[str, Any]] = None, **kwargs):
        """Log exception with traceback."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, context, **kwargs)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    debug_mode: Optional[bool] = None,
    **context: Any
) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
        debug_mode: If True, enables DEBUG level. If None, uses global setting.
        **context: Initial context (e.g. resume_id="...")

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name, context, debug_mode)
