"""
Retry wrapper for AI provider calls.

Exponential backoff with jitter on top of tenacity. Transient network
failures and retryable HTTP statuses (429/5xx by default) are retried;
a Retry-After value on the error's response overrides the computed
delay. Configuration comes from AI_RETRY_* environment variables and is
cached until reset_retry_config_cache().
"""

import errno
import logging
import os
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, List, Optional, TypeVar

from pydantic import BaseModel, Field, ValidationError
from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, stop_after_attempt

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RETRYABLE_STATUS_CODES = [429, 500, 502, 503, 529]

TRANSIENT_MESSAGE_PATTERNS = ("econnreset", "timeout", "socket hang up", "network")

TRANSIENT_ERRNO_CODES = {
    "ECONNRESET",
    "ETIMEDOUT",
    "ECONNREFUSED",
    "EPIPE",
    "EHOSTUNREACH",
    "ENOTFOUND",
}


class RetryConfig(BaseModel):
    """Backoff settings for retried operations."""

    max_retries: int = Field(default=2, ge=0, le=10)
    initial_delay_ms: int = Field(default=1000, ge=0)
    max_delay_ms: int = Field(default=10000, ge=0)
    backoff_multiplier: float = Field(default=2, ge=1, le=4)
    jitter_factor: float = Field(default=0.1, ge=0, le=1)
    retryable_status_codes: List[int] = Field(default_factory=lambda: list(DEFAULT_RETRYABLE_STATUS_CODES))
    respect_retry_after: bool = True


DEFAULT_RETRY_CONFIG = RetryConfig()


@dataclass
class RetryEvent:
    """One failed attempt, reported to logging and the on_retry callback."""

    attempt: int
    max_attempts: int
    error: BaseException
    delay_ms: float
    will_retry: bool
    error_code: str
    retry_after_ms: Optional[float] = None


class RetryExhaustedError(Exception):
    """Raised when every attempt failed with a retryable error."""

    def __init__(self, last_error: BaseException, attempts: int, error_code: str):
        self.last_error = last_error
        self.attempts = attempts
        self.error_code = error_code
        self.status_code = _get_status_code(last_error)
        super().__init__(f"{last_error} (failed after {attempts} attempts)")


_retry_config: Optional[RetryConfig] = None


def load_retry_config() -> RetryConfig:
    """
    Load retry configuration from AI_RETRY_* environment variables.

    Raises:
        ValueError: If any value is out of range or not a number
    """
    raw: dict = {}
    env_fields = {
        "AI_RETRY_MAX_ATTEMPTS": "max_retries",
        "AI_RETRY_INITIAL_DELAY_MS": "initial_delay_ms",
        "AI_RETRY_MAX_DELAY_MS": "max_delay_ms",
        "AI_RETRY_BACKOFF_MULTIPLIER": "backoff_multiplier",
        "AI_RETRY_JITTER_FACTOR": "jitter_factor",
    }
    for env_name, field_name in env_fields.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            raw[field_name] = value

    status_codes = os.getenv("AI_RETRY_STATUS_CODES")
    if status_codes:
        raw["retryable_status_codes"] = [
            int(code.strip()) for code in status_codes.split(",") if code.strip()
        ]

    raw["respect_retry_after"] = os.getenv("AI_RETRY_RESPECT_RETRY_AFTER", "true").lower() != "false"

    try:
        return RetryConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid retry configuration: {e}") from e


def get_retry_config() -> RetryConfig:
    """Get the cached retry configuration."""
    global _retry_config
    if _retry_config is None:
        _retry_config = load_retry_config()
    return _retry_config


def reset_retry_config_cache() -> None:
    """Reset cached retry configuration (for testing)."""
    global _retry_config
    _retry_config = None


def calculate_delay(
    attempt: int,
    initial_delay_ms: float,
    max_delay_ms: float,
    multiplier: float,
    jitter_factor: float,
) -> float:
    """
    Compute the backoff delay for a 0-indexed attempt.

    Returns:
        min(initial * multiplier**attempt, max) plus up to jitter_factor of it
    """
    base = min(initial_delay_ms * (multiplier ** attempt), max_delay_ms)
    if jitter_factor <= 0:
        return base
    return base + random.random() * base * jitter_factor


def parse_retry_after(value: Any) -> Optional[float]:
    """
    Parse a Retry-After header value into milliseconds.

    Accepts delta-seconds or an HTTP date. Returns None when unparseable.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        seconds = float(text)
        return max(seconds, 0) * 1000
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max((when - datetime.now(timezone.utc)).total_seconds(), 0) * 1000


def _get_status_code(error: Any) -> Optional[int]:
    status = getattr(error, "status_code", None)
    if status is None:
        status = getattr(error, "status", None)
    if status is None:
        response = getattr(error, "response", None)
        status = getattr(response, "status_code", None)
    return status if isinstance(status, int) else None


def _get_errno_name(error: BaseException) -> Optional[str]:
    code = getattr(error, "code", None)
    if isinstance(code, str) and code.upper() in TRANSIENT_ERRNO_CODES:
        return code.upper()
    number = getattr(error, "errno", None)
    if isinstance(number, int):
        return errno.errorcode.get(number)
    return None


def get_retry_after_ms(error: Any) -> Optional[float]:
    """Read Retry-After from the error's response headers, if any."""
    headers = getattr(error, "headers", None)
    if headers is None:
        headers = getattr(getattr(error, "response", None), "headers", None)
    if not headers:
        return None
    try:
        value = headers.get("retry-after") or headers.get("Retry-After")
    except AttributeError:
        return None
    return parse_retry_after(value)


def is_transient_error(error: Any, retryable_status_codes: Optional[List[int]] = None) -> bool:
    """
    Check whether an error is worth retrying.

    Args:
        error: Raised value (non-exceptions return False)
        retryable_status_codes: HTTP statuses treated as transient

    Returns:
        True for network failures, timeouts and retryable HTTP statuses
    """
    if not isinstance(error, BaseException):
        return False

    if retryable_status_codes:
        status = _get_status_code(error)
        if status is not None and status in retryable_status_codes:
            return True

    if type(error).__name__ in ("TimeoutError", "AbortError") or isinstance(error, TimeoutError):
        return True

    message = str(error)
    if "Failed to fetch" in message:
        return True
    lowered = message.lower()
    if any(pattern in lowered for pattern in TRANSIENT_MESSAGE_PATTERNS):
        return True

    return _get_errno_name(error) in TRANSIENT_ERRNO_CODES


def is_retryable_error(error: Any, config: RetryConfig) -> bool:
    """Transient error or a configured retryable status."""
    return is_transient_error(error, config.retryable_status_codes)


def get_error_code(error: Any) -> str:
    """
    Classify an error for logs and retry metadata.

    Returns:
        TIMEOUT, ABORTED, NETWORK_ERROR, an errno name, HTTP_<status>,
        or UNKNOWN_ERROR
    """
    if not isinstance(error, BaseException):
        return "UNKNOWN_ERROR"
    name = type(error).__name__
    if name == "TimeoutError" or isinstance(error, TimeoutError):
        return "TIMEOUT"
    if name == "AbortError":
        return "ABORTED"
    if "Failed to fetch" in str(error):
        return "NETWORK_ERROR"
    errno_name = _get_errno_name(error)
    if errno_name:
        return errno_name
    status = _get_status_code(error)
    if status is not None:
        return f"HTTP_{status}"
    return "UNKNOWN_ERROR"


def has_retry_metadata(error: Any) -> bool:
    """Check whether an error was produced by an exhausted retry loop."""
    return isinstance(error, RetryExhaustedError)


def _log_retry_event(event: RetryEvent) -> None:
    if event.will_retry:
        logger.warning(
            f"AI call failed (attempt {event.attempt}/{event.max_attempts}, "
            f"code={event.error_code}); retrying in {event.delay_ms:.0f}ms: {event.error}"
        )
    else:
        logger.error(
            f"AI call failed (attempt {event.attempt}/{event.max_attempts}, "
            f"code={event.error_code}); giving up: {event.error}"
        )


def with_retry(
    operation: Callable[[], T],
    config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[RetryEvent], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Execute an operation with automatic retry on transient failures.

    Args:
        operation: Zero-argument callable to execute
        config: Retry settings (defaults to the env-loaded config)
        on_retry: Called with a RetryEvent after every failed attempt
        sleep: Sleep function in seconds (overridable in tests)

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error
        Exception: Non-retryable errors propagate unchanged on first failure
    """
    cfg = config or get_retry_config()
    max_attempts = cfg.max_retries + 1

    def _delay_ms(error: BaseException, attempt_index: int) -> float:
        retry_after = get_retry_after_ms(error) if cfg.respect_retry_after else None
        if retry_after is not None:
            return min(retry_after, cfg.max_delay_ms)
        return calculate_delay(
            attempt_index,
            cfg.initial_delay_ms,
            cfg.max_delay_ms,
            cfg.backoff_multiplier,
            cfg.jitter_factor,
        )

    def _emit(error: BaseException, attempt: int, delay_ms: float, will_retry: bool) -> None:
        event = RetryEvent(
            attempt=attempt,
            max_attempts=max_attempts,
            error=error,
            delay_ms=delay_ms,
            will_retry=will_retry,
            error_code=get_error_code(error),
            retry_after_ms=get_retry_after_ms(error) if cfg.respect_retry_after else None,
        )
        _log_retry_event(event)
        if on_retry:
            on_retry(event)

    def _wait(retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception()
        return _delay_ms(error, retry_state.attempt_number - 1) / 1000.0

    def _before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        _emit(error, retry_state.attempt_number, retry_state.next_action.sleep * 1000.0, True)

    retrying = Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=_wait,
        retry=retry_if_exception(lambda e: is_retryable_error(e, cfg)),
        before_sleep=_before_sleep,
        sleep=sleep,
    )

    attempts_made = [0]

    def _attempt() -> T:
        attempts_made[0] += 1
        return operation()

    try:
        return retrying(_attempt)
    except RetryError as e:
        last_error = e.last_attempt.exception()
        attempts = e.last_attempt.attempt_number
        _emit(last_error, attempts, 0, False)
        raise RetryExhaustedError(last_error, attempts, get_error_code(last_error)) from last_error
    except Exception as e:
        _emit(e, attempts_made[0], 0, False)
        raise


def create_retry_wrapper(
    base_config: Optional[RetryConfig] = None,
    on_retry: Optional[Callable[[RetryEvent], None]] = None,
) -> Callable[..., Any]:
    """
    Create a retry function with fixed settings.

    Example:
        >>> retry_ai = create_retry_wrapper(RetryConfig(max_retries=5))
        >>> retry_ai(lambda: llm.invoke(messages))
    """
    def wrapper(operation: Callable[[], T], config: Optional[RetryConfig] = None) -> T:
        return with_retry(operation, config or base_config, on_retry=on_retry)

    return wrapper
