"""
LinkedIn job search routes (Apify).

- POST /api/linkedin/search  - Search LinkedIn jobs
- POST /api/linkedin/import  - Save a search result as a job
- GET  /api/linkedin/status  - Check the Apify API key
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from src.common.errors import ErrorCode
from src.common.repositories import Collections, get_repository, new_id, to_api, utcnow
from src.services.linkedin_client import (
    LinkedInNotConfiguredError,
    LinkedInRateLimitError,
    LinkedInTimeoutError,
    search_linkedin_jobs,
    validate_api_key,
)
from src.services.linkedin_transform import to_job_insert, transform_apify_jobs
from src.validations.linkedin import LinkedInJobResult, LinkedInSearchRequest

from ..dependencies import api_rate_limit
from ..responses import error_response, parse_request_body, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/linkedin", tags=["linkedin"], dependencies=[Depends(api_rate_limit)])


@router.post("/search")
async def search(request: Request):
    body = await parse_request_body(request, LinkedInSearchRequest)

    try:
        raw_jobs = await run_in_threadpool(
            search_linkedin_jobs,
            body.keywords,
            body.location,
            body.time_frame,
            body.limit,
            body.experience_levels,
        )
    except LinkedInNotConfiguredError as e:
        return error_response(ErrorCode.NOT_CONFIGURED, str(e), 503)
    except LinkedInTimeoutError:
        return error_response(ErrorCode.TIMEOUT, "LinkedIn search timed out. Please try again.", 504)
    except LinkedInRateLimitError:
        return error_response(ErrorCode.RATE_LIMITED, "Too many searches. Please wait and try again.", 429)
    except Exception as e:
        logger.error(f"LinkedIn search failed: {e}")
        return error_response(ErrorCode.SEARCH_ERROR, str(e) or "Failed to search LinkedIn jobs", 500)

    jobs = transform_apify_jobs(raw_jobs)
    return success_response({
        "jobs": jobs,
        "totalCount": len(jobs),
        "searchParams": {
            "keywords": body.keywords,
            "location": body.location,
            "timeFrame": body.time_frame,
        },
    })


@router.post("/import")
async def import_job(request: Request):
    """Store a search result on the jobs collection (once per LinkedIn id)."""
    body = await parse_request_body(request, LinkedInJobResult)

    repo = get_repository(Collections.JOBS)
    fields = to_job_insert(body.to_api())
    try:
        existing = repo.find_one({"platform": "linkedin", "external_id": fields["external_id"]})
        if existing:
            return error_response(ErrorCode.DUPLICATE, "This job has already been saved", 409)

        now = utcnow()
        job = {"_id": new_id(), **fields, "cached_at": now, "created_at": now, "updated_at": now}
        repo.insert_one(job)
    except Exception as e:
        logger.error(f"Error importing LinkedIn job: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to save job", 500)

    logger.info(f"Imported LinkedIn job {fields['external_id']} as {job['_id']}")
    return success_response(to_api(job), 201)


@router.get("/status")
async def status():
    return await run_in_threadpool(validate_api_key)
