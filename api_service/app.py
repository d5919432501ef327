"""
FastAPI application for the resume tailoring backend.

Wires the /api routers, CORS, optional bearer auth and the exception
handlers that keep every error in the ``{"success": false, "error": ...}``
envelope.

Run locally:
    uvicorn api_service.app:app --reload --port 8000
"""

import logging
import time
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.common.errors import AppError, ErrorCode, log_error
from src.common.logger import get_logger, setup_logging
from src.common.rate_limiter import RateLimitExceededError
from src.common.repositories import ensure_indexes, reset_repositories
from version import __version__

from .auth import verify_token
from .config import validate_config_on_startup
from .responses import app_error_response, error_response, rate_limit_response
from .routes import (
    applications_router,
    companies_router,
    health_router,
    jobs_router,
    linkedin_router,
    modules_router,
    resumes_router,
    soft_skills_router,
    users_router,
)

# Validate configuration at startup
settings = validate_config_on_startup()

setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)
request_logger = get_logger("api_service.requests")

app = FastAPI(title="Resume Tailor API", version=__version__)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Tag each request with an id and log its outcome."""
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
    log = request_logger.for_request(request_id, request.url.path, request.method)
    started = time.perf_counter()

    response = await call_next(request)

    duration_ms = int((time.perf_counter() - started) * 1000)
    log.info(f"{response.status_code} in {duration_ms}ms")
    response.headers["X-Request-ID"] = request_id
    return response


# Health stays open for load balancers
app.include_router(health_router)

for router in (
    resumes_router,
    jobs_router,
    companies_router,
    applications_router,
    users_router,
    soft_skills_router,
    modules_router,
    linkedin_router,
):
    app.include_router(router, dependencies=[Depends(verify_token)])


# =============================================================================
# Lifecycle
# =============================================================================


@app.on_event("startup")
async def startup_indexes():
    """Ensure MongoDB indexes; the API still serves if the database is down."""
    try:
        await run_in_threadpool(ensure_indexes)
    except Exception as e:
        logger.error(f"Failed to ensure MongoDB indexes: {e}")


@app.on_event("shutdown")
async def shutdown_repositories():
    reset_repositories()
    logger.info("Repository connections closed")


# =============================================================================
# Exception handlers
# =============================================================================


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError):
    return app_error_response(exc)


@app.exception_handler(RateLimitExceededError)
async def handle_rate_limit(request: Request, exc: RateLimitExceededError):
    return rate_limit_response(exc.result)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return error_response(ErrorCode.INVALID_JSON, "Invalid JSON in request body", 400)

    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in errors
    ]
    return error_response(ErrorCode.VALIDATION_ERROR, "Invalid request parameters", 400, details)


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException):
    code = {
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        429: ErrorCode.RATE_LIMIT_EXCEEDED,
    }.get(exc.status_code, ErrorCode.INTERNAL_ERROR if exc.status_code >= 500 else ErrorCode.INVALID_INPUT)
    message = exc.detail if isinstance(exc.detail, str) else None
    return error_response(code, message, exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    log_error(exc, {"method": request.method, "path": request.url.path})
    return error_response(ErrorCode.INTERNAL_ERROR, "An unexpected error occurred", 500)


logger.info(f"Resume Tailor API {__version__} started (environment={settings.environment})")
