"""
Standard API response helpers.

Every route answers with the same envelope:

    {"success": true, "data": ..., "meta": {...}}
    {"success": false, "error": {"code": ..., "message": ..., "details": ...}}
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from src.common.errors import AppError, ErrorCode, get_error_message, get_status_from_code
from src.common.rate_limiter import RateLimitResult
from src.validations.base import format_validation_errors

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def success_response(
    data: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "data": data}),
        headers=headers,
    )


def success_with_meta(data: Any, meta: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": True, "data": data, "meta": meta}),
    )


def error_response(
    code: str,
    message: Optional[str] = None,
    status_code: Optional[int] = None,
    details: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Build an error envelope.

    Status defaults to the code's mapped status (500 when unmapped) and the
    message to the code's default message.
    """
    error: Dict[str, Any] = {"code": code, "message": message or get_error_message(code)}
    if details is not None:
        error["details"] = details
    return JSONResponse(
        status_code=status_code or get_status_from_code(code),
        content=jsonable_encoder({"success": False, "error": error}),
        headers=headers,
    )


def app_error_response(error: AppError) -> JSONResponse:
    return error_response(error.code, error.message, error.status_code, error.details, error.headers)


def not_found_response(resource: str = "Resource") -> JSONResponse:
    return error_response(ErrorCode.NOT_FOUND, f"{resource} not found", 404)


def validation_error_response(message: str, details: Any = None) -> JSONResponse:
    return error_response(ErrorCode.VALIDATION_ERROR, message, 400, details)


def unauthorized_response(message: str = "Authentication required") -> JSONResponse:
    return error_response(ErrorCode.UNAUTHORIZED, message, 401)


def forbidden_response(message: str = "Access denied") -> JSONResponse:
    return error_response(ErrorCode.FORBIDDEN, message, 403)


def rate_limit_response(result: RateLimitResult) -> JSONResponse:
    return error_response(
        ErrorCode.RATE_LIMIT_EXCEEDED,
        "Too many requests. Please try again later.",
        429,
        headers=result.headers(),
    )


def sanitize_filename(filename: str) -> str:
    """
    Make a user-supplied filename safe for Content-Disposition.

    Directory parts are dropped, characters outside [A-Za-z0-9._-] become "_",
    leading dots are stripped and the result is at most 255 characters.
    """
    name = filename.replace("\\", "/").split("/")[-1]
    name = re.sub(r"[^A-Za-z0-9._-]", "_", name).lstrip(".")
    return name[:255] or "file"


async def parse_request_body(request: Request, model: Type[ModelT]) -> ModelT:
    """
    Read and validate a JSON request body.

    Raises:
        AppError: INVALID_JSON when the body is not JSON, VALIDATION_ERROR
            with field details when it fails the model
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise AppError(ErrorCode.INVALID_JSON, "Invalid JSON in request body", 400)

    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise AppError(
            ErrorCode.VALIDATION_ERROR,
            format_validation_errors(e),
            400,
            details=e.errors(include_url=False, include_context=False, include_input=False),
        )
