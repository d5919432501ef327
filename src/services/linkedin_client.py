"""
LinkedIn Job Search via Apify

Runs the bebity LinkedIn jobs scraper actor on Apify and returns the raw
dataset items. One search is three calls:

    1. POST /acts/{actor}/runs           start a run
    2. GET  /actor-runs/{run_id}         poll until SUCCEEDED (3s interval)
    3. GET  /datasets/{dataset_id}/items fetch results

API Reference:
- https://docs.apify.com/api/v2
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests

from src.common.config import Config

logger = logging.getLogger(__name__)

APIFY_API_BASE = "https://api.apify.com/v2"
LINKEDIN_SCRAPER_ACTOR = "bebity~linkedin-jobs-scraper"

POLL_INTERVAL_SECONDS = 3
MAX_POLL_ATTEMPTS = 60  # 3 minutes max wait
REQUEST_TIMEOUT = 30
MAX_ROWS = 25

TIME_FRAME_OPTIONS: Dict[str, Dict[str, Any]] = {
    "1h": {"label": "Past hour", "value": 1, "unit": "hours"},
    "24h": {"label": "Past 24 hours", "value": 24, "unit": "hours"},
    "1w": {"label": "Past week", "value": 7, "unit": "days"},
    "1m": {"label": "Past month", "value": 30, "unit": "days"},
}
DEFAULT_TIME_FRAME = "24h"

# LinkedIn f_TPR values; the actor has no hourly filter so 1h maps to 24h
PUBLISHED_AT_FILTERS = {
    "1h": "r86400",
    "24h": "r86400",
    "1w": "r604800",
    "1m": "r2592000",
}

# LinkedIn f_E experience level values
EXPERIENCE_LEVEL_OPTIONS: Dict[str, Dict[str, str]] = {
    "internship": {
        "label": "Internship",
        "value": "1",
        "description": "For students and recent graduates seeking internship opportunities",
    },
    "entry_level": {
        "label": "Entry Level",
        "value": "2",
        "description": "For freshers with 0-2 years of experience",
    },
    "associate": {
        "label": "Associate",
        "value": "3",
        "description": "For professionals with 2-5 years of experience",
    },
}
DEFAULT_EXPERIENCE_LEVELS = ["internship", "entry_level"]

FAILED_RUN_STATUSES = ("FAILED", "ABORTED", "TIMED-OUT")


class LinkedInSearchError(Exception):
    """Base exception for LinkedIn search errors."""
    pass


class LinkedInNotConfiguredError(LinkedInSearchError):
    """Raised when APIFY_API_KEY is missing."""
    pass


class LinkedInTimeoutError(LinkedInSearchError):
    """Raised when the actor run does not finish in time."""
    pass


class LinkedInRateLimitError(LinkedInSearchError):
    """Raised when Apify rate limits the request."""
    pass


def is_linkedin_search_available() -> bool:
    return bool(Config.APIFY_API_KEY)


def _headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


def _check_response(response: requests.Response, action: str) -> None:
    if response.status_code == 429:
        raise LinkedInRateLimitError(f"Apify rate limit hit while trying to {action}")
    if not response.ok:
        raise LinkedInSearchError(f"Failed to {action}: {response.status_code} {response.text[:200]}")


def build_actor_input(
    keywords: str,
    location: Optional[str] = None,
    time_frame: str = DEFAULT_TIME_FRAME,
    limit: int = MAX_ROWS,
    experience_levels: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Build the actor input for a search.

    Returns:
        Dict with title, location, publishedAt, rows (capped at 25), proxy
        and, when levels are given, experienceLevel as comma-joined f_E codes
    """
    actor_input: Dict[str, Any] = {
        "title": keywords,
        "location": location or "",
        "publishedAt": PUBLISHED_AT_FILTERS.get(time_frame, "r86400"),
        "rows": min(limit, MAX_ROWS),
        "proxy": {"useApifyProxy": True},
    }
    codes = [
        EXPERIENCE_LEVEL_OPTIONS[level]["value"]
        for level in experience_levels or []
        if level in EXPERIENCE_LEVEL_OPTIONS
    ]
    if codes:
        actor_input["experienceLevel"] = ",".join(codes)
    return actor_input


def start_actor_run(api_key: str, actor_input: Dict[str, Any]) -> Dict[str, Any]:
    """Start an actor run; returns the run data (id, defaultDatasetId, status)."""
    url = f"{APIFY_API_BASE}/acts/{LINKEDIN_SCRAPER_ACTOR}/runs"
    logger.info(f"Starting Apify run: title={actor_input.get('title')!r} rows={actor_input.get('rows')}")

    response = requests.post(url, headers=_headers(api_key), json=actor_input, timeout=REQUEST_TIMEOUT)
    _check_response(response, "start LinkedIn search")

    data = response.json().get("data") or {}
    logger.info(f"Apify run started: {data.get('id')}")
    return data


def wait_for_run_completion(api_key: str, run_id: str) -> None:
    """
    Poll a run until it succeeds.

    Raises:
        LinkedInSearchError: Run failed, aborted or timed out on Apify
        LinkedInTimeoutError: Still running after MAX_POLL_ATTEMPTS polls
    """
    url = f"{APIFY_API_BASE}/actor-runs/{run_id}"

    for attempt in range(MAX_POLL_ATTEMPTS):
        response = requests.get(url, headers=_headers(api_key), timeout=REQUEST_TIMEOUT)
        _check_response(response, "check run status")

        status = (response.json().get("data") or {}).get("status")
        if status == "SUCCEEDED":
            logger.info(f"Apify run {run_id} succeeded after {attempt + 1} poll(s)")
            return
        if status in FAILED_RUN_STATUSES:
            raise LinkedInSearchError(f"LinkedIn search failed with status: {status}")

        time.sleep(POLL_INTERVAL_SECONDS)

    raise LinkedInTimeoutError("LinkedIn search timed out. Please try again.")


def get_dataset_items(api_key: str, dataset_id: str) -> List[Dict[str, Any]]:
    url = f"{APIFY_API_BASE}/datasets/{dataset_id}/items"
    response = requests.get(url, headers=_headers(api_key), timeout=REQUEST_TIMEOUT)
    _check_response(response, "get search results")

    items = response.json()
    return items if isinstance(items, list) else []


def search_linkedin_jobs(
    keywords: str,
    location: Optional[str] = None,
    time_frame: str = DEFAULT_TIME_FRAME,
    limit: int = MAX_ROWS,
    experience_levels: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Search LinkedIn jobs via Apify.

    Returns:
        Raw Apify job items (see linkedin_transform for normalization)

    Raises:
        LinkedInNotConfiguredError: APIFY_API_KEY is not set
        LinkedInTimeoutError: Run or HTTP request timed out
        LinkedInRateLimitError: Apify returned 429
        LinkedInSearchError: Any other failure
    """
    if not is_linkedin_search_available():
        raise LinkedInNotConfiguredError("LinkedIn search is not configured. Please add APIFY_API_KEY.")

    api_key = Config.APIFY_API_KEY
    actor_input = build_actor_input(keywords, location, time_frame, limit, experience_levels)

    try:
        run = start_actor_run(api_key, actor_input)
        wait_for_run_completion(api_key, run["id"])
        items = get_dataset_items(api_key, run["defaultDatasetId"])
    except requests.exceptions.Timeout as e:
        raise LinkedInTimeoutError(f"Request timed out after {REQUEST_TIMEOUT}s") from e
    except requests.exceptions.RequestException as e:
        raise LinkedInSearchError(f"Network error: {str(e)}") from e
    except KeyError as e:
        raise LinkedInSearchError(f"Unexpected Apify run response: missing {e}") from e

    logger.info(f"LinkedIn search returned {len(items)} raw jobs")
    return items


def validate_api_key() -> Dict[str, Any]:
    """
    Check the configured Apify key against /users/me.

    Returns:
        {status: valid|invalid|not_configured|error, message, [username]}
    """
    if not is_linkedin_search_available():
        return {
            "status": "not_configured",
            "message": "APIFY_API_KEY is not set in environment variables",
        }

    try:
        response = requests.get(
            f"{APIFY_API_BASE}/users/me",
            headers=_headers(Config.APIFY_API_KEY),
            timeout=REQUEST_TIMEOUT,
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"Error checking Apify API key: {e}")
        return {"status": "error", "message": str(e) or "Unknown error occurred"}

    if response.ok:
        username = (response.json().get("data") or {}).get("username") or "unknown"
        return {
            "status": "valid",
            "username": username,
            "message": "Apify API key is valid and working",
        }
    if response.status_code == 401:
        return {"status": "invalid", "message": "Apify API key is invalid or expired"}
    return {
        "status": "invalid",
        "message": f"API key validation failed with status: {response.status_code}",
    }
