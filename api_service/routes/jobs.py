"""
Job posting routes.

- GET    /api/jobs        - List jobs (limit <= 100, offset >= 0)
- POST   /api/jobs        - Create a job (manual entry)
- GET    /api/jobs/{id}   - Get a job
- PATCH  /api/jobs/{id}   - Update a job
- DELETE /api/jobs/{id}   - Delete a job
"""

import logging

from fastapi import APIRouter, Depends, Request

from src.common.errors import ErrorCode
from src.common.repositories import Collections, get_repository, new_id, to_api, to_document, utcnow
from src.validations.job import JobCreate, JobUpdate

from ..dependencies import api_rate_limit
from ..responses import (
    error_response,
    not_found_response,
    parse_request_body,
    success_response,
    success_with_meta,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/jobs", tags=["jobs"], dependencies=[Depends(api_rate_limit)])

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


@router.get("")
async def list_jobs(limit: int = DEFAULT_LIMIT, offset: int = 0):
    limit = min(max(limit, 1), MAX_LIMIT)
    offset = max(offset, 0)
    try:
        jobs = get_repository(Collections.JOBS).find(
            {}, sort=[("created_at", -1)], limit=limit, skip=offset
        )
    except Exception as e:
        logger.error(f"Error fetching jobs: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch jobs", 500)

    return success_with_meta(
        [to_api(job) for job in jobs],
        {"limit": limit, "offset": offset, "total": len(jobs)},
    )


@router.post("")
async def create_job(request: Request):
    body = await parse_request_body(request, JobCreate)

    now = utcnow()
    job = {
        "_id": new_id(),
        **to_document(body.model_dump(by_alias=True)),
        "cached_at": now,
        "created_at": now,
        "updated_at": now,
    }
    try:
        get_repository(Collections.JOBS).insert_one(job)
    except Exception as e:
        logger.error(f"Error creating job: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to create job", 500)

    logger.info(f"Created job {job['_id']}: {job['title']}")
    return success_response(to_api(job), 201)


@router.get("/{job_id}")
async def get_job(job_id: str):
    try:
        job = get_repository(Collections.JOBS).find_one({"_id": job_id})
    except Exception as e:
        logger.error(f"Error fetching job: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch job", 500)

    if not job:
        return not_found_response("Job")
    return success_response(to_api(job))


@router.patch("/{job_id}")
async def update_job(job_id: str, request: Request):
    body = await parse_request_body(request, JobUpdate)

    try:
        repo = get_repository(Collections.JOBS)
        if not repo.find_one({"_id": job_id}):
            return not_found_response("Job")

        changes = to_document(body.model_dump(by_alias=True, exclude_none=True))
        changes["updated_at"] = utcnow()
        repo.update_one({"_id": job_id}, {"$set": changes})
        job = repo.find_one({"_id": job_id})
    except Exception as e:
        logger.error(f"Error updating job: {e}")
        return error_response(ErrorCode.UPDATE_ERROR, "Failed to update job", 500)

    return success_response(to_api(job))


@router.delete("/{job_id}")
async def delete_job(job_id: str):
    try:
        repo = get_repository(Collections.JOBS)
        if not repo.find_one({"_id": job_id}):
            return not_found_response("Job")
        repo.delete_one({"_id": job_id})
        # applications cascade with their job
        removed = get_repository(Collections.APPLICATIONS).delete_many({"job_id": job_id})
    except Exception as e:
        logger.error(f"Error deleting job: {e}")
        return error_response(ErrorCode.DELETE_ERROR, "Failed to delete job", 500)

    logger.info(f"Deleted job {job_id} and {removed.deleted_count} application(s)")
    return success_response({"deleted": True})
