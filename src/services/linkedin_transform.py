"""
Normalize Apify LinkedIn job items.

The scraper actor's output field names drift between versions (title vs
jobTitle, link vs jobUrl, ...), so every field is read from a list of
candidate keys. Descriptions arrive as HTML and are flattened to plain
text with BeautifulSoup.
"""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup

from src.validations.linkedin import LinkedInJobResult

logger = logging.getLogger(__name__)

_JOB_ID_IN_URL = re.compile(r"/jobs/view/(\d+)")
_RELATIVE_TIME = re.compile(r"(\d+)\s*(minute|hour|day|week|month)s?\s+ago", re.IGNORECASE)

_UNIT_DELTAS = {
    "minute": timedelta(minutes=1),
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
    "week": timedelta(weeks=1),
    "month": timedelta(days=30),
}


def _first(raw: Dict[str, Any], *keys: str) -> Optional[str]:
    """First non-empty value among keys, as a string."""
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def clean_description(html: Optional[str]) -> Optional[str]:
    """Strip tags, decode entities and collapse whitespace to single spaces."""
    if not html:
        return None
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    text = re.sub(r"\s+", " ", text).strip()
    return text or None


def _external_id(raw: Dict[str, Any]) -> str:
    job_id = _first(raw, "jobId", "job_id")
    if job_id:
        return job_id
    for key in ("link", "jobUrl", "url"):
        match = _JOB_ID_IN_URL.search(str(raw.get(key) or ""))
        if match:
            return match.group(1)
    return str(uuid.uuid4())


def transform_apify_job(raw: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Normalize one Apify item into a LinkedInJobResult dict.

    Returns:
        API dict, or None when the item has no title or no company
    """
    title = _first(raw, "title", "jobTitle")
    company = _first(raw, "company", "companyName")
    if not title or not company:
        return None

    return LinkedInJobResult(
        id=str(uuid.uuid4()),
        external_id=_external_id(raw),
        title=title,
        company_name=company,
        location=_first(raw, "location", "jobLocation"),
        salary=_first(raw, "salary", "salaryInfo", "job_salary_info"),
        posted_at=_first(raw, "postedTime", "postedAt", "publishedAt", "job_published_at"),
        description=clean_description(_first(raw, "description", "descriptionText", "description_text")),
        url=_first(raw, "link", "jobUrl", "url"),
    ).to_api()


def transform_apify_jobs(raw_jobs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Normalize a list of items, dropping those without title or company."""
    jobs = [job for job in (transform_apify_job(raw) for raw in raw_jobs) if job]
    if len(jobs) < len(raw_jobs):
        logger.info(f"Dropped {len(raw_jobs) - len(jobs)} LinkedIn items without title or company")
    return jobs


def parse_posted_at(value: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse LinkedIn posted times.

    Accepts relative times ("2 hours ago", "3 weeks ago"; a month is 30
    days) and ISO dates ("2024-01-15"). Anything else returns None.
    """
    if not value:
        return None
    now = now or datetime.now(timezone.utc)

    match = _RELATIVE_TIME.search(value)
    if match:
        amount = int(match.group(1))
        return now - amount * _UNIT_DELTAS[match.group(2).lower()]

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def to_job_insert(job: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a LinkedInJobResult dict into job document fields.

    Salary strings are kept raw as {"raw": salary}; requirements and
    skills start empty.
    """
    return {
        "platform": "linkedin",
        "external_id": job.get("externalId"),
        "title": job.get("title"),
        "company_name": job.get("companyName"),
        "location": job.get("location"),
        "description": job.get("description"),
        "salary": {"raw": job["salary"]} if job.get("salary") else None,
        "url": job.get("url"),
        "posted_at": parse_posted_at(job.get("postedAt")),
        "requirements": [],
        "skills": [],
    }
