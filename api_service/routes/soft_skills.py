"""
Soft skill assessment records.

- GET  /api/soft-skills  - List the user's assessments (most recently updated first)
- POST /api/soft-skills  - Save an assessment outcome directly

The interactive interview lives under /api/modules/soft-skills.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from src.common.errors import ErrorCode
from src.common.repositories import Collections, get_repository, new_id, to_api, utcnow
from src.validations.soft_skills import SoftSkillCreate

from ..dependencies import api_rate_limit, get_current_user
from ..responses import error_response, parse_request_body, success_response, success_with_meta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/soft-skills", tags=["soft-skills"], dependencies=[Depends(api_rate_limit)])


@router.get("")
async def list_soft_skills(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        skills = get_repository(Collections.SOFT_SKILLS).find(
            {"user_id": user["_id"]}, sort=[("updated_at", -1)]
        )
    except Exception as e:
        logger.error(f"Error fetching soft skills: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch soft skills", 500)

    return success_with_meta([to_api(s) for s in skills], {"total": len(skills)})


@router.post("")
async def create_soft_skill(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, SoftSkillCreate)

    repo = get_repository(Collections.SOFT_SKILLS)
    skill_name = body.skill_name.strip()
    try:
        if repo.find_one({"user_id": user["_id"], "skill_name": skill_name}):
            return error_response(ErrorCode.DUPLICATE, f"An assessment for '{skill_name}' already exists", 409)

        now = utcnow()
        skill = {
            "_id": new_id(),
            "user_id": user["_id"],
            "skill_name": skill_name,
            "evidence_score": body.evidence_score,
            "statement": body.statement,
            "conversation": [turn.model_dump() for turn in body.conversation],
            "created_at": now,
            "updated_at": now,
        }
        repo.insert_one(skill)
    except Exception as e:
        logger.error(f"Error creating soft skill: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to save soft skill", 500)

    return success_response(to_api(skill), 201)
