"""
Application error types and HTTP status mapping.

Every error surfaced through the API carries a stable string code. The code
determines the HTTP status (ERROR_STATUS_MAP) and a default user-facing
message (ERROR_MESSAGES). Analyzer failures derive from AnalysisError so
routes can map them uniformly.
"""

import logging
import traceback
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode:
    """Stable error codes shared by services and routes."""

    # Generic
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Request validation
    INVALID_JSON = "INVALID_JSON"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_ID = "INVALID_ID"
    INVALID_RESUME = "INVALID_RESUME"
    INVALID_JOB = "INVALID_JOB"
    INVALID_CONTENT = "INVALID_CONTENT"

    # Auth
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    AUTH_ERROR = "AUTH_ERROR"

    # Lookup
    NOT_FOUND = "NOT_FOUND"
    RESUME_NOT_FOUND = "RESUME_NOT_FOUND"
    JOB_NOT_FOUND = "JOB_NOT_FOUND"
    SKILL_NOT_FOUND = "SKILL_NOT_FOUND"
    DUPLICATE = "DUPLICATE"

    # Throttling / upstream
    RATE_LIMIT = "RATE_LIMIT"
    RATE_LIMITED = "RATE_LIMITED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    AI_NOT_CONFIGURED = "AI_NOT_CONFIGURED"
    NOT_CONFIGURED = "NOT_CONFIGURED"
    FEATURE_DISABLED = "FEATURE_DISABLED"
    API_ERROR = "API_ERROR"
    TIMEOUT = "TIMEOUT"

    # Analyzer outcomes
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    PARSE_ERROR = "PARSE_ERROR"
    INSUFFICIENT_CONTENT = "INSUFFICIENT_CONTENT"
    INSUFFICIENT_TEXT = "INSUFFICIENT_TEXT"
    SCHEMA_VALIDATION_FAILED = "SCHEMA_VALIDATION_FAILED"

    # Module outcomes
    ANALYSIS_ERROR = "ANALYSIS_ERROR"
    RESEARCH_ERROR = "RESEARCH_ERROR"
    RESEARCH_FAILED = "RESEARCH_FAILED"
    ASSESSMENT_ERROR = "ASSESSMENT_ERROR"
    CHAT_ERROR = "CHAT_ERROR"
    ALREADY_COMPLETE = "ALREADY_COMPLETE"
    ALL_ANALYSES_FAILED = "ALL_ANALYSES_FAILED"
    TAILOR_ERROR = "TAILOR_ERROR"

    # Uploads
    NO_FILE = "NO_FILE"
    INVALID_TYPE = "INVALID_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    PDF_EXTRACTION_FAILED = "PDF_EXTRACTION_FAILED"
    UPLOAD_TIMEOUT = "UPLOAD_TIMEOUT"
    UPLOAD_ERROR = "UPLOAD_ERROR"
    GENERATION_ERROR = "GENERATION_ERROR"
    PDF_ERROR = "PDF_ERROR"

    # LinkedIn search
    SEARCH_ERROR = "SEARCH_ERROR"

    # CRUD failures
    FETCH_ERROR = "FETCH_ERROR"
    CREATE_ERROR = "CREATE_ERROR"
    UPDATE_ERROR = "UPDATE_ERROR"
    DELETE_ERROR = "DELETE_ERROR"


ERROR_STATUS_MAP: Dict[str, int] = {
    ErrorCode.INVALID_JSON: 400,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INVALID_ID: 400,
    ErrorCode.INVALID_RESUME: 400,
    ErrorCode.INVALID_JOB: 400,
    ErrorCode.INVALID_CONTENT: 400,
    ErrorCode.INSUFFICIENT_CONTENT: 400,
    ErrorCode.ALREADY_COMPLETE: 400,
    ErrorCode.NO_FILE: 400,
    ErrorCode.INVALID_TYPE: 400,
    ErrorCode.FILE_TOO_LARGE: 400,
    ErrorCode.PDF_EXTRACTION_FAILED: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.AUTH_ERROR: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RESUME_NOT_FOUND: 404,
    ErrorCode.JOB_NOT_FOUND: 404,
    ErrorCode.SKILL_NOT_FOUND: 404,
    ErrorCode.DUPLICATE: 409,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
    ErrorCode.API_ERROR: 502,
    ErrorCode.AI_NOT_CONFIGURED: 503,
    ErrorCode.NOT_CONFIGURED: 503,
    ErrorCode.FEATURE_DISABLED: 503,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.TIMEOUT: 504,
    ErrorCode.UPLOAD_TIMEOUT: 504,
}

ERROR_MESSAGES: Dict[str, str] = {
    ErrorCode.UNKNOWN_ERROR: "An unexpected error occurred. Please try again.",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
    ErrorCode.NETWORK_ERROR: "Network error. Please check your connection.",
    ErrorCode.SERVICE_UNAVAILABLE: "Service temporarily unavailable",
    ErrorCode.INVALID_JSON: "Invalid JSON in request body",
    ErrorCode.VALIDATION_ERROR: "Invalid request data",
    ErrorCode.INVALID_INPUT: "Invalid input",
    ErrorCode.INVALID_ID: "Invalid identifier",
    ErrorCode.INVALID_RESUME: "Resume content is incomplete",
    ErrorCode.INVALID_JOB: "Job posting is missing required details",
    ErrorCode.INVALID_CONTENT: "Content is invalid",
    ErrorCode.UNAUTHORIZED: "Authentication required",
    ErrorCode.FORBIDDEN: "You do not have access to this resource",
    ErrorCode.AUTH_ERROR: "AI service authentication failed",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.RESUME_NOT_FOUND: "Resume not found",
    ErrorCode.JOB_NOT_FOUND: "Job not found",
    ErrorCode.SKILL_NOT_FOUND: "Soft skill assessment not found",
    ErrorCode.DUPLICATE: "Resource already exists",
    ErrorCode.RATE_LIMIT: "AI service rate limit reached. Please wait and try again.",
    ErrorCode.RATE_LIMITED: "Too many requests. Please slow down.",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Too many requests. Please try again later.",
    ErrorCode.AI_NOT_CONFIGURED: "AI service is not configured",
    ErrorCode.NOT_CONFIGURED: "Service is not configured",
    ErrorCode.FEATURE_DISABLED: "This AI feature is disabled",
    ErrorCode.API_ERROR: "Upstream API error",
    ErrorCode.TIMEOUT: "The request timed out",
    ErrorCode.EMPTY_RESPONSE: "AI returned an empty response",
    ErrorCode.PARSE_ERROR: "Failed to parse AI response",
    ErrorCode.INSUFFICIENT_CONTENT: "Not enough content to analyze",
    ErrorCode.INSUFFICIENT_TEXT: "Extracted text is too short to parse as a resume",
    ErrorCode.SCHEMA_VALIDATION_FAILED: "AI response does not match expected resume format",
    ErrorCode.ANALYSIS_ERROR: "Failed to complete analysis",
    ErrorCode.RESEARCH_ERROR: "Failed to research company",
    ErrorCode.RESEARCH_FAILED: "Company research failed",
    ErrorCode.ASSESSMENT_ERROR: "Failed to start assessment",
    ErrorCode.CHAT_ERROR: "Failed to continue assessment",
    ErrorCode.ALREADY_COMPLETE: "This assessment is already complete",
    ErrorCode.ALL_ANALYSES_FAILED: "All analyses failed",
    ErrorCode.TAILOR_ERROR: "Failed to tailor resume",
    ErrorCode.NO_FILE: "No file provided",
    ErrorCode.INVALID_TYPE: "Only PDF files are allowed",
    ErrorCode.FILE_TOO_LARGE: "File size must be less than 10MB",
    ErrorCode.PDF_EXTRACTION_FAILED: "Could not extract text from PDF. The file may be corrupted or password-protected.",
    ErrorCode.UPLOAD_TIMEOUT: "Upload timed out. Please try again.",
    ErrorCode.UPLOAD_ERROR: "Failed to upload resume",
    ErrorCode.GENERATION_ERROR: "Failed to generate PDF",
    ErrorCode.PDF_ERROR: "Failed to generate PDF",
    ErrorCode.SEARCH_ERROR: "LinkedIn search failed",
    ErrorCode.FETCH_ERROR: "Failed to fetch data",
    ErrorCode.CREATE_ERROR: "Failed to create resource",
    ErrorCode.UPDATE_ERROR: "Failed to update resource",
    ErrorCode.DELETE_ERROR: "Failed to delete resource",
}


def get_status_from_code(code: Optional[str]) -> int:
    """Map an error code to its HTTP status (500 when unmapped)."""
    if not code:
        return 500
    return ERROR_STATUS_MAP.get(code, 500)


def get_error_message(code: Optional[str]) -> str:
    """Default message for a code, falling back to the unknown-error message."""
    if not code:
        return ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR]
    return ERROR_MESSAGES.get(code, ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])


class AppError(Exception):
    """
    Error that maps directly onto an API error envelope.

    Raise from routes or dependencies; the app's exception handler turns it
    into ``{"success": false, "error": {...}}`` with ``status_code``.
    """

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.message = message or get_error_message(code)
        self.status_code = status_code or get_status_from_code(code)
        self.details = details
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return error


class AnalysisError(Exception):
    """Base for analyzer failures carrying an error code and optional cause."""

    def __init__(self, message: str, code: str = ErrorCode.UNKNOWN_ERROR, cause: Optional[BaseException] = None):
        self.message = message
        self.code = code
        self.cause = cause
        super().__init__(message)


class ContextAnalysisError(AnalysisError):
    """Raised when resume/job context analysis fails."""


class UniquenessAnalysisError(AnalysisError):
    """Raised when uniqueness analysis fails."""


class ImpactAnalysisError(AnalysisError):
    """Raised when impact analysis fails."""


class CompanyResearchError(AnalysisError):
    """Raised when company research fails."""


class SoftSkillsError(AnalysisError):
    """Raised when a soft-skill assessment turn fails."""


class ResumeParseError(AnalysisError):
    """Raised when AI resume parsing fails."""


class PreAnalysisError(AnalysisError):
    """Raised when every pre-analysis step fails."""


class TailorError(AnalysisError):
    """Raised when resume tailoring fails."""


AI_ERROR_STATUS_MAP: Dict[str, int] = {
    ErrorCode.AI_NOT_CONFIGURED: 503,
    ErrorCode.FEATURE_DISABLED: 503,
    ErrorCode.RATE_LIMIT: 429,
    ErrorCode.AUTH_ERROR: 401,
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.INSUFFICIENT_CONTENT: 400,
    ErrorCode.API_ERROR: 502,
    ErrorCode.TIMEOUT: 504,
}


def status_for_ai_error(code: Optional[str]) -> int:
    """HTTP status for an analyzer error code (500 when unmapped)."""
    return AI_ERROR_STATUS_MAP.get(code or "", 500)


def is_network_error(error: Any) -> bool:
    """
    Check whether an error looks like a client-side network failure.

    Args:
        error: Any value (non-exceptions return False)

    Returns:
        True for connection failures, "Failed to fetch" and aborted requests
    """
    if not isinstance(error, BaseException):
        return False
    if isinstance(error, ConnectionError):
        return True
    if type(error).__name__ == "AbortError":
        return True
    return "Failed to fetch" in str(error)


def get_error_info(error: Any) -> Dict[str, Any]:
    """
    Extract a loggable summary from any raised value.

    Returns:
        Dict with name, message, code (None unless the error has one) and stack
    """
    if isinstance(error, BaseException):
        return {
            "name": type(error).__name__,
            "message": str(error),
            "code": getattr(error, "code", None),
            "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
    return {"name": "UnknownError", "message": str(error), "code": None, "stack": None}


def log_error(error: Any, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an error with its summary and optional context."""
    info = get_error_info(error)
    logger.error(f"{info['name']}: {info['message']} context={context or {}}")
