"""
Account, profile, settings, deletion and export routes.

- GET/PATCH      /api/users/me        - Account (name, email)
- GET/PATCH      /api/users/profile   - Professional profile
- GET/PATCH/PUT  /api/users/settings  - Settings (defaults created on first read)
- POST           /api/users/delete    - Delete the account and all owned data
- POST           /api/users/export    - Download all user data as JSON
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder

from src.common.errors import ErrorCode
from src.common.repositories import Collections, get_repository, to_api, to_document, utcnow
from src.services.user_service import delete_user_cascade, export_user_data, get_or_create_settings
from src.validations.profile import DataExportRequest, DeleteAccountRequest, ProfileUpdate
from src.validations.settings import UserSettingsUpdate, merge_settings
from src.validations.users import UserUpdate

from ..dependencies import api_rate_limit, get_current_user
from ..responses import error_response, parse_request_body, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(api_rate_limit)])

PROFILE_FIELDS = (
    "name",
    "job_title",
    "experience_level",
    "skills",
    "preferred_industries",
    "city",
    "country",
    "bio",
    "linkedin_url",
    "github_url",
)


def _profile(user: Dict[str, Any]) -> Dict[str, Any]:
    profile = {"_id": user["_id"], "email": user.get("email")}
    for field in PROFILE_FIELDS:
        profile[field] = user.get(field)
    profile["skills"] = user.get("skills") or []
    profile["preferred_industries"] = user.get("preferred_industries") or []
    profile["created_at"] = user.get("created_at")
    profile["updated_at"] = user.get("updated_at")
    return to_api(profile)


def _update_user(user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    repo = get_repository(Collections.USERS)
    changes["updated_at"] = utcnow()
    repo.update_one({"_id": user_id}, {"$set": changes})
    return repo.find_one({"_id": user_id})


# ===== ACCOUNT =====

@router.get("/me")
async def get_me(user: Dict[str, Any] = Depends(get_current_user)):
    return success_response(to_api(user))


@router.patch("/me")
async def update_me(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, UserUpdate)

    changes = body.model_dump(exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
    try:
        if changes.get("email") and changes["email"] != user.get("email"):
            if get_repository(Collections.USERS).find_one({"email": changes["email"]}):
                return error_response(ErrorCode.DUPLICATE, "Email is already in use", 409)
        updated = _update_user(user["_id"], changes)
    except Exception as e:
        logger.error(f"Error updating user: {e}")
        return error_response(ErrorCode.UPDATE_ERROR, "Failed to update user", 500)

    return success_response(to_api(updated))


# ===== PROFILE =====

@router.get("/profile")
async def get_profile(user: Dict[str, Any] = Depends(get_current_user)):
    return success_response(_profile(user))


@router.patch("/profile")
async def update_profile(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ProfileUpdate)

    changes = to_document(body.model_dump(by_alias=True, exclude_unset=True))
    try:
        updated = _update_user(user["_id"], changes)
    except Exception as e:
        logger.error(f"Error updating profile: {e}")
        return error_response("PROFILE_UPDATE_ERROR", "Failed to update profile", 500)

    return success_response(_profile(updated))


# ===== SETTINGS =====

@router.get("/settings")
async def get_settings_route(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        document = await run_in_threadpool(get_or_create_settings, user["_id"])
    except Exception as e:
        logger.error(f"Error getting settings: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to get settings", 500)

    return success_response(to_api(document))


@router.api_route("/settings", methods=["PATCH", "PUT"])
async def update_settings(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    """Deep-merge a partial settings update into the stored settings."""
    update = await parse_request_body(request, UserSettingsUpdate)

    try:
        document = await run_in_threadpool(get_or_create_settings, user["_id"])
        merged = merge_settings(document["settings"], update)
        repo = get_repository(Collections.USER_SETTINGS)
        repo.update_one(
            {"user_id": user["_id"]},
            {"$set": {"settings": merged, "updated_at": utcnow()}},
        )
        document = repo.find_one({"user_id": user["_id"]})
    except Exception as e:
        logger.error(f"Error updating settings: {e}")
        return error_response(ErrorCode.UPDATE_ERROR, "Failed to update settings", 500)

    return success_response(to_api(document))


# ===== DELETE / EXPORT =====

@router.post("/delete")
async def delete_account(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    await parse_request_body(request, DeleteAccountRequest)

    logger.info(f"Starting account deletion for user {user['_id']}")
    try:
        await run_in_threadpool(delete_user_cascade, user["_id"])
    except Exception as e:
        logger.error(f"Error deleting account: {e}")
        return error_response(
            "DELETE_ACCOUNT_ERROR",
            "Failed to delete account. Please try again or contact support.",
            500,
        )

    return success_response({
        "message": "Account deleted successfully",
        "deletedAt": utcnow().isoformat(),
    })


@router.post("/export")
async def export_data(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    options = await parse_request_body(request, DataExportRequest)

    try:
        export = await run_in_threadpool(
            export_user_data,
            user,
            options.include_resumes,
            options.include_jobs,
            options.include_applications,
            options.include_settings,
        )
    except Exception as e:
        logger.error(f"Error exporting data: {e}")
        return error_response("EXPORT_ERROR", "Failed to export data", 500)

    export["format"] = options.format
    filename = f"resume-tailor-export-{utcnow().date().isoformat()}.json"
    return Response(
        content=json.dumps(jsonable_encoder(export), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
