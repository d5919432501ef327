"""
Rate Limiting Module.

Per-client request quotas for the HTTP API. Three buckets are defined:

    api     100 requests / minute   (default for every route)
    upload   10 requests / minute   (PDF upload and parsing)
    ai       20 requests / minute   (LLM-backed analysis routes)

Uses a sliding window per (bucket, client identifier). Backed by Redis
sorted sets when REDIS_URL is configured in production so limits are
shared across workers; otherwise an in-process deque window is used.

Usage:
    result = check_rate_limit(client_id, "ai")
    if not result.success:
        ...  # respond 429 with Retry-After
"""

import logging
import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Dict, Mapping, Optional, Union

import redis

from src.common.config import Config

logger = logging.getLogger(__name__)


class LimitType(str, Enum):
    """Rate limit buckets."""
    API = "api"
    UPLOAD = "upload"
    AI = "ai"


# Limits per bucket
RATE_LIMITS = {
    LimitType.API: {"requests_per_window": 100, "window_seconds": 60},
    LimitType.UPLOAD: {"requests_per_window": 10, "window_seconds": 60},
    LimitType.AI: {"requests_per_window": 20, "window_seconds": 60},
}


@dataclass
class RateLimitResult:
    """Outcome of a rate limit check."""
    success: bool
    limit: int
    remaining: int
    reset: float  # epoch seconds when the oldest counted request expires

    @property
    def retry_after_seconds(self) -> int:
        """Seconds until a request may succeed (at least 1 when limited)."""
        if self.success:
            return 0
        return max(1, int(round(self.reset - time.time())))

    def headers(self) -> Dict[str, str]:
        """Standard X-RateLimit-* response headers."""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset)),
        }
        if not self.success:
            headers["Retry-After"] = str(self.retry_after_seconds)
        return headers


class RateLimitExceededError(Exception):
    """Raised when a client exceeds its quota."""

    def __init__(
        self,
        identifier: str,
        limit_type: str,
        current: int,
        limit: int,
        retry_after: int = 60,
        result: Optional[RateLimitResult] = None,
    ):
        self.identifier = identifier
        self.limit_type = limit_type
        self.current = current
        self.limit = limit
        self.retry_after = retry_after
        self.result = result
        super().__init__(
            f"Rate limit exceeded for {identifier}: {current}/{limit} ({limit_type})"
        )


class RateLimiter:
    """
    Thread-safe in-memory rate limiter using a sliding window.

    Tracks request timestamps per identifier. Suitable for a single
    process (development, tests). Identifiers whose window has emptied are
    dropped when next touched and by a periodic sweep.
    """

    SWEEP_INTERVAL = 1000

    def __init__(self, limit_type: str, requests_per_window: int = 100, window_seconds: float = 60.0):
        """
        Initialize rate limiter.

        Args:
            limit_type: Bucket name for logging/stats
            requests_per_window: Maximum requests per window
            window_seconds: Window length
        """
        self.limit_type = limit_type
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds

        self._windows: Dict[str, Deque[float]] = {}
        self._lock = threading.Lock()
        self._total_requests = 0
        self._rejected_requests = 0

    def _clean_window(self, window: Deque[float], now: float) -> None:
        """Remove entries older than the window from a sliding window."""
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

    def _trimmed_window(self, identifier: str, now: float) -> Deque[float]:
        """The identifier's live window; fully expired windows stop being tracked."""
        window = self._windows.get(identifier)
        if window is None:
            return deque()
        self._clean_window(window, now)
        if not window:
            del self._windows[identifier]
        return window

    def _sweep(self, now: float) -> None:
        """Drop every identifier whose window has fully expired."""
        for identifier in list(self._windows):
            self._trimmed_window(identifier, now)

    def _result(self, window: Deque[float], success: bool, now: float) -> RateLimitResult:
        reset = (window[0] + self.window_seconds) if window else (now + self.window_seconds)
        return RateLimitResult(
            success=success,
            limit=self.requests_per_window,
            remaining=max(0, self.requests_per_window - len(window)),
            reset=reset,
        )

    def check(self, identifier: str) -> RateLimitResult:
        """
        Check the quota without consuming it.

        Args:
            identifier: Client identifier

        Returns:
            RateLimitResult describing whether a request would be allowed
        """
        now = time.time()
        with self._lock:
            window = self._trimmed_window(identifier, now)
            return self._result(window, len(window) < self.requests_per_window, now)

    def acquire(self, identifier: str) -> RateLimitResult:
        """
        Consume one request from the identifier's quota.

        Returns:
            RateLimitResult; success is False when the quota is exhausted
            (the rejected request is not counted)
        """
        now = time.time()
        with self._lock:
            self._total_requests += 1
            if self._total_requests % self.SWEEP_INTERVAL == 0:
                self._sweep(now)
            window = self._trimmed_window(identifier, now)

            if len(window) >= self.requests_per_window:
                self._rejected_requests += 1
                return self._result(window, False, now)

            window.append(now)
            self._windows[identifier] = window
            return self._result(window, True, now)

    def get_stats(self) -> Dict[str, Any]:
        """Get rate limiting statistics."""
        with self._lock:
            return {
                "limit_type": self.limit_type,
                "requests_per_window": self.requests_per_window,
                "window_seconds": self.window_seconds,
                "tracked_identifiers": len(self._windows),
                "total_requests": self._total_requests,
                "rejected_requests": self._rejected_requests,
            }

    def reset(self, identifier: Optional[str] = None) -> None:
        """Reset tracking for one identifier, or everything."""
        with self._lock:
            if identifier is None:
                self._windows.clear()
                self._total_requests = 0
                self._rejected_requests = 0
            else:
                self._windows.pop(identifier, None)


class RedisRateLimiter:
    """
    Sliding-window rate limiter shared across processes via Redis.

    Each identifier is a sorted set of request timestamps keyed
    ``ratelimit:{limit_type}:{identifier}``. Acquire runs as one Lua
    script so concurrent workers cannot both take the last slot.
    """

    KEY_PREFIX = "ratelimit"

    # KEYS[1]=key ARGV: now, window_seconds, limit, member
    # returns {allowed, count, reset}; reset as a string to keep decimals
    ACQUIRE_SCRIPT = """
local now = tonumber(ARGV[1])
local window = tonumber(ARGV[2])
local limit = tonumber(ARGV[3])
redis.call('ZREMRANGEBYSCORE', KEYS[1], 0, now - window)
local count = redis.call('ZCARD', KEYS[1])
local allowed = 0
if count < limit then
    redis.call('ZADD', KEYS[1], now, ARGV[4])
    redis.call('EXPIRE', KEYS[1], math.floor(window) + 1)
    count = count + 1
    allowed = 1
end
local reset = now + window
local oldest = redis.call('ZRANGE', KEYS[1], 0, 0, 'WITHSCORES')
if oldest[2] then
    reset = tonumber(oldest[2]) + window
end
return {allowed, count, tostring(reset)}
"""

    def __init__(
        self,
        client: "redis.Redis",
        limit_type: str,
        requests_per_window: int = 100,
        window_seconds: float = 60.0,
    ):
        self.client = client
        self.limit_type = limit_type
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds
        self._acquire_script = client.register_script(self.ACQUIRE_SCRIPT)

    def _key(self, identifier: str) -> str:
        return f"{self.KEY_PREFIX}:{self.limit_type}:{identifier}"

    def _reset_time(self, key: str, now: float) -> float:
        oldest = self.client.zrange(key, 0, 0, withscores=True)
        if oldest:
            return float(oldest[0][1]) + self.window_seconds
        return now + self.window_seconds

    def check(self, identifier: str) -> RateLimitResult:
        """Check the quota without consuming it."""
        key = self._key(identifier)
        now = time.time()
        self.client.zremrangebyscore(key, 0, now - self.window_seconds)
        count = self.client.zcard(key)
        return RateLimitResult(
            success=count < self.requests_per_window,
            limit=self.requests_per_window,
            remaining=max(0, self.requests_per_window - count),
            reset=self._reset_time(key, now),
        )

    def acquire(self, identifier: str) -> RateLimitResult:
        """Consume one request from the identifier's quota."""
        now = time.time()
        allowed, count, reset = self._acquire_script(
            keys=[self._key(identifier)],
            args=[now, self.window_seconds, self.requests_per_window, f"{now}:{uuid.uuid4().hex[:8]}"],
        )
        return RateLimitResult(
            success=bool(allowed),
            limit=self.requests_per_window,
            remaining=max(0, self.requests_per_window - int(count)),
            reset=float(reset),
        )

    def get_stats(self) -> Dict[str, Any]:
        return {
            "limit_type": self.limit_type,
            "requests_per_window": self.requests_per_window,
            "window_seconds": self.window_seconds,
            "backend": "redis",
        }

    def reset(self, identifier: Optional[str] = None) -> None:
        if identifier is None:
            for key in self.client.scan_iter(f"{self.KEY_PREFIX}:{self.limit_type}:*"):
                self.client.delete(key)
        else:
            self.client.delete(self._key(identifier))


AnyRateLimiter = Union[RateLimiter, RedisRateLimiter]


def _get_redis_client() -> Optional["redis.Redis"]:
    """Redis client when configured for production, else None."""
    if not (Config.REDIS_URL and Config.is_production()):
        return None
    try:
        return redis.from_url(Config.REDIS_URL, decode_responses=True)
    except redis.RedisError as e:
        logger.warning(f"Failed to connect to Redis, using in-memory rate limiting: {e}")
        return None


class RateLimiterRegistry:
    """
    Registry for managing rate limiters across buckets.

    Provides a single point of access for all rate limiters in the application.
    """

    def __init__(self, redis_client: Optional["redis.Redis"] = None):
        """Initialize the registry."""
        self._limiters: Dict[str, AnyRateLimiter] = {}
        self._lock = threading.Lock()
        self._redis = redis_client

    def get_or_create(self, limit_type: str) -> AnyRateLimiter:
        """
        Get existing limiter or create new one for a bucket.

        Args:
            limit_type: Bucket name (api, upload, ai)

        Returns:
            Rate limiter for the bucket
        """
        key = LimitType(limit_type)
        with self._lock:
            if key.value not in self._limiters:
                limits = RATE_LIMITS[key]
                if self._redis is not None:
                    self._limiters[key.value] = RedisRateLimiter(self._redis, key.value, **limits)
                else:
                    self._limiters[key.value] = RateLimiter(key.value, **limits)
            return self._limiters[key.value]

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get stats for all registered limiters."""
        with self._lock:
            return {name: limiter.get_stats() for name, limiter in self._limiters.items()}

    def reset_all(self) -> None:
        """Reset all limiters."""
        with self._lock:
            for limiter in self._limiters.values():
                limiter.reset()


# Global registry instance
_global_registry: Optional[RateLimiterRegistry] = None
_registry_lock = threading.Lock()


def get_rate_limiter_registry() -> RateLimiterRegistry:
    """Get the global rate limiter registry."""
    global _global_registry
    with _registry_lock:
        if _global_registry is None:
            _global_registry = RateLimiterRegistry(_get_redis_client())
        return _global_registry


def reset_global_registry() -> None:
    """Reset the global registry (for testing)."""
    global _global_registry
    with _registry_lock:
        _global_registry = None


def check_rate_limit(identifier: str, limit_type: str = "api") -> RateLimitResult:
    """
    Consume one request for a client in a bucket.

    Args:
        identifier: Client identifier (see get_client_identifier)
        limit_type: Bucket name

    Returns:
        RateLimitResult
    """
    limiter = get_rate_limiter_registry().get_or_create(limit_type)
    result = limiter.acquire(identifier)
    if not result.success:
        logger.warning(f"Rate limit hit: bucket={limit_type} client={identifier}")
    return result


def get_client_identifier(headers: Mapping[str, str]) -> str:
    """
    Derive a client identifier from proxy headers.

    Checks x-forwarded-for (first address), x-real-ip, then
    cf-connecting-ip; falls back to "anonymous".
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    cf_ip = headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip.strip()
    return "anonymous"
