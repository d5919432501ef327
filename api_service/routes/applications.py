"""
Job application tracking routes.

- GET    /api/applications         - List the user's applications (?status= filter)
- POST   /api/applications         - Track a job (one application per user and job)
- GET    /api/applications/{id}    - Get an application
- PATCH  /api/applications/{id}    - Update status, resume, notes
- DELETE /api/applications/{id}    - Delete an application
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request

from src.common.errors import ErrorCode
from src.common.repositories import Collections, get_repository, new_id, to_api, to_document, utcnow
from src.validations.application import ApplicationCreate, ApplicationUpdate

from ..dependencies import api_rate_limit, get_current_user
from ..responses import (
    error_response,
    not_found_response,
    parse_request_body,
    success_response,
    success_with_meta,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/applications",
    tags=["applications"],
    dependencies=[Depends(api_rate_limit)],
)


def _find_application(application_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    return get_repository(Collections.APPLICATIONS).find_one({"_id": application_id, "user_id": user_id})


@router.get("")
async def list_applications(
    status: Optional[str] = None,
    user: Dict[str, Any] = Depends(get_current_user),
):
    query: Dict[str, Any] = {"user_id": user["_id"]}
    if status:
        query["status"] = status
    try:
        applications = get_repository(Collections.APPLICATIONS).find(query, sort=[("created_at", -1)])
    except Exception as e:
        logger.error(f"Error fetching applications: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch applications", 500)

    return success_with_meta([to_api(a) for a in applications], {"total": len(applications)})


@router.post("")
async def create_application(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ApplicationCreate)

    repo = get_repository(Collections.APPLICATIONS)
    try:
        if not get_repository(Collections.JOBS).find_one({"_id": body.job_id}):
            return error_response(ErrorCode.JOB_NOT_FOUND, "Job not found", 404)
        if body.resume_id and not get_repository(Collections.RESUMES).find_one(
            {"_id": body.resume_id, "user_id": user["_id"]}
        ):
            return error_response(ErrorCode.RESUME_NOT_FOUND, "Resume not found", 404)

        if repo.find_one({"user_id": user["_id"], "job_id": body.job_id}):
            return error_response(ErrorCode.DUPLICATE, "An application for this job already exists", 409)

        now = utcnow()
        application = {
            "_id": new_id(),
            "user_id": user["_id"],
            **to_document(body.model_dump(by_alias=True)),
            "created_at": now,
            "updated_at": now,
        }
        repo.insert_one(application)
    except Exception as e:
        logger.error(f"Error creating application: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to create application", 500)

    logger.info(f"Created application {application['_id']} for job {body.job_id}")
    return success_response(to_api(application), 201)


@router.get("/{application_id}")
async def get_application(application_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        application = _find_application(application_id, user["_id"])
    except Exception as e:
        logger.error(f"Error fetching application: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch application", 500)

    if not application:
        return not_found_response("Application")
    return success_response(to_api(application))


@router.patch("/{application_id}")
async def update_application(
    application_id: str,
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
):
    body = await parse_request_body(request, ApplicationUpdate)

    try:
        if not _find_application(application_id, user["_id"]):
            return not_found_response("Application")

        # notes may be cleared explicitly with null
        changes = to_document(body.model_dump(by_alias=True, exclude_unset=True))
        changes = {k: v for k, v in changes.items() if v is not None or k == "notes"}
        changes["updated_at"] = utcnow()
        get_repository(Collections.APPLICATIONS).update_one(
            {"_id": application_id, "user_id": user["_id"]}, {"$set": changes}
        )
        application = _find_application(application_id, user["_id"])
    except Exception as e:
        logger.error(f"Error updating application: {e}")
        return error_response(ErrorCode.UPDATE_ERROR, "Failed to update application", 500)

    return success_response(to_api(application))


@router.delete("/{application_id}")
async def delete_application(application_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        if not _find_application(application_id, user["_id"]):
            return not_found_response("Application")
        get_repository(Collections.APPLICATIONS).delete_one({"_id": application_id, "user_id": user["_id"]})
    except Exception as e:
        logger.error(f"Error deleting application: {e}")
        return error_response(ErrorCode.DELETE_ERROR, "Failed to delete application", 500)

    return success_response({"deleted": True})
