"""
AI analysis module routes.

- POST /api/modules/context                  - Resume vs job context match
- POST /api/modules/uniqueness               - Resume differentiators
- POST /api/modules/impact                   - Quantify experience bullets
- POST /api/modules/company                  - Company research (7-day cache)
- POST /api/modules/company/process          - Tracked research for status polling
- GET  /api/modules/company/status/{id}      - Poll a tracked research request
- POST /api/modules/soft-skills/start        - Open a soft skill interview
- POST /api/modules/soft-skills/chat         - Answer the current interview question
- POST /api/modules/recruiter-readiness      - Pre-analysis plus readiness score

All routes consume the ``ai`` rate limit bucket. Analyzer failures keep
their error code and map onto an HTTP status via status_for_ai_error.
Context, impact and recruiter readiness return 503 FEATURE_DISABLED when
ENABLE_AI_JOB_MATCH or ENABLE_AI_BULLET_OPTIMIZATION is "false".
"""

import logging
from typing import Any, Dict, List, Tuple

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from src.analyzers.context_analyzer import analyze_context, job_has_details
from src.analyzers.impact_analyzer import analyze_impact, collect_bullets
from src.analyzers.pre_analysis import run_pre_analysis, summarize_pre_analysis
from src.analyzers.soft_skills_coach import continue_assessment, start_assessment
from src.analyzers.uniqueness_analyzer import analyze_uniqueness
from src.common.errors import AnalysisError, AppError, ErrorCode, status_for_ai_error
from src.common.repositories import Collections, get_repository, new_id, to_api, utcnow
from src.scoring.recruiter_readiness import calculate_recruiter_readiness, get_score_summary
from src.services.company_research_service import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    CompanyResearchService,
)
from src.validations.company import CompanyProcessRequest, CompanyResearchRequest
from src.validations.context import ContextRequest
from src.validations.impact import ImpactRequest
from src.validations.soft_skills import ChatRequest, StartAssessmentRequest
from src.validations.uniqueness import UniquenessRequest

from ..dependencies import ai_rate_limit, bullet_optimization_enabled, get_current_user, job_match_enabled
from ..responses import error_response, parse_request_body, success_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/modules", tags=["modules"], dependencies=[Depends(ai_rate_limit)])


def get_company_research_service() -> CompanyResearchService:
    return CompanyResearchService()


def _analysis_error(e: AnalysisError) -> JSONResponse:
    return error_response(e.code, e.message, status_for_ai_error(e.code))


# =============================================================================
# Lookups
# =============================================================================


def _load_resume_content(resume_id: str, user_id: str) -> Dict[str, Any]:
    """
    Fetch a resume's content, requiring a contact section.

    Raises:
        AppError: RESUME_NOT_FOUND (404) or INVALID_RESUME (400)
    """
    resume = get_repository(Collections.RESUMES).find_one({"_id": resume_id, "user_id": user_id})
    if not resume:
        raise AppError(ErrorCode.RESUME_NOT_FOUND, "Resume not found", 404)

    content = resume.get("content") or {}
    if not content or not content.get("contact"):
        raise AppError(ErrorCode.INVALID_RESUME, "Resume has no content to analyze", 400)
    return content


def _load_resume_and_job(body: ContextRequest, user_id: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    content = _load_resume_content(body.resume_id, user_id)

    job = get_repository(Collections.JOBS).find_one({"_id": body.job_id})
    if not job:
        raise AppError(ErrorCode.JOB_NOT_FOUND, "Job not found", 404)
    if not job_has_details(job):
        raise AppError(
            ErrorCode.INVALID_JOB,
            "Job has no description, requirements or skills to analyze against",
            400,
        )
    return content, to_api(job)


# =============================================================================
# Resume analysis
# =============================================================================


@router.post("/context", dependencies=[Depends(job_match_enabled)])
async def context_module(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ContextRequest)
    content, job = _load_resume_and_job(body, user["_id"])

    try:
        result = await run_in_threadpool(analyze_context, content, job)
    except AnalysisError as e:
        logger.error(f"Context analysis failed: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Context analysis error: {e}")
        return error_response(ErrorCode.ANALYSIS_ERROR, "Failed to analyze context", 500)

    return success_response(result)


@router.post("/uniqueness")
async def uniqueness_module(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, UniquenessRequest)
    content = _load_resume_content(body.resume_id, user["_id"])

    try:
        result = await run_in_threadpool(analyze_uniqueness, content)
    except AnalysisError as e:
        logger.error(f"Uniqueness analysis failed: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Uniqueness analysis error: {e}")
        return error_response(ErrorCode.ANALYSIS_ERROR, "Failed to analyze uniqueness", 500)

    return success_response(result)


@router.post("/impact", dependencies=[Depends(bullet_optimization_enabled)])
async def impact_module(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ImpactRequest)
    content = _load_resume_content(body.resume_id, user["_id"])
    if not collect_bullets(content):
        return error_response(
            ErrorCode.INVALID_RESUME,
            "Resume has no experience bullets to quantify",
            400,
        )

    try:
        result = await run_in_threadpool(analyze_impact, content)
    except AnalysisError as e:
        logger.error(f"Impact analysis failed: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Impact analysis error: {e}")
        return error_response(ErrorCode.ANALYSIS_ERROR, "Failed to analyze impact", 500)

    return success_response(result)


# =============================================================================
# Company research
# =============================================================================


@router.post("/company")
async def company_module(
    request: Request,
    service: CompanyResearchService = Depends(get_company_research_service),
):
    body = await parse_request_body(request, CompanyResearchRequest)

    try:
        result = await run_in_threadpool(service.research, body.company_name)
    except AnalysisError as e:
        logger.error(f"Company research failed for {body.company_name}: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Company research error: {e}")
        return error_response(ErrorCode.RESEARCH_ERROR, "Failed to research company", 500)

    return JSONResponse(
        content=jsonable_encoder({"success": True, "data": result["data"], "cached": result["cached"]})
    )


@router.post("/company/process")
async def company_process(
    request: Request,
    service: CompanyResearchService = Depends(get_company_research_service),
):
    """Run tracked research; clients poll /company/status/{requestId}."""
    try:
        body = await parse_request_body(request, CompanyProcessRequest)
    except AppError as e:
        if e.code != ErrorCode.VALIDATION_ERROR:
            raise
        raise AppError(ErrorCode.VALIDATION_ERROR, "Missing requestId or companyName", 400, details=e.details)

    try:
        result = await run_in_threadpool(service.process, body.request_id, body.company_name)
    except Exception as e:
        logger.error(f"Company research process {body.request_id} failed: {e}")
        return error_response(ErrorCode.RESEARCH_FAILED, "Processing failed", 500)

    return success_response(result)


@router.get("/company/status/{research_id}")
async def company_status(
    research_id: str,
    service: CompanyResearchService = Depends(get_company_research_service),
):
    try:
        status = await run_in_threadpool(service.get_status, research_id)
    except ValueError:
        return error_response(ErrorCode.INVALID_ID, "Invalid research ID format", 400)
    except Exception as e:
        logger.error(f"Error fetching research status {research_id}: {e}")
        return error_response(ErrorCode.INTERNAL_ERROR, "Failed to fetch research status", 500)

    if status is None:
        return error_response(ErrorCode.NOT_FOUND, "Research request not found", 404)

    if status["status"] == STATUS_COMPLETED:
        return JSONResponse(
            content=jsonable_encoder({"success": True, "status": STATUS_COMPLETED, "data": status["data"]})
        )
    if status["status"] == STATUS_FAILED:
        return JSONResponse(content={
            "success": False,
            "status": STATUS_FAILED,
            "error": {"code": ErrorCode.RESEARCH_FAILED, "message": status["error"]},
        })
    return JSONResponse(content={"success": True, "status": status["status"]})


# =============================================================================
# Soft skills interview
# =============================================================================


def _count_questions(conversation: List[Dict[str, Any]]) -> int:
    return sum(1 for turn in conversation if turn.get("role") == "assistant")


@router.post("/soft-skills/start")
async def soft_skills_start(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    """
    Open an interview for a skill.

    Restarting a skill resets its stored conversation and score.
    """
    body = await parse_request_body(request, StartAssessmentRequest)
    skill_name = body.skill_name.strip()

    try:
        response = await run_in_threadpool(start_assessment, skill_name)

        repo = get_repository(Collections.SOFT_SKILLS)
        existing = repo.find_one({"user_id": user["_id"], "skill_name": skill_name})
        skill_id = existing["_id"] if existing else new_id()
        now = utcnow()
        repo.update_one(
            {"_id": skill_id},
            {
                "$set": {
                    "user_id": user["_id"],
                    "skill_name": skill_name,
                    "conversation": [{"role": "assistant", "content": response["message"]}],
                    "evidence_score": None,
                    "statement": None,
                    "created_at": existing.get("created_at", now) if existing else now,
                    "updated_at": now,
                }
            },
            upsert=True,
        )
    except AnalysisError as e:
        logger.error(f"Failed to start assessment for {skill_name}: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Assessment start error: {e}")
        return error_response(ErrorCode.ASSESSMENT_ERROR, "Failed to start assessment", 500)

    return success_response({"skillId": skill_id, **response})


@router.post("/soft-skills/chat")
async def soft_skills_chat(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ChatRequest)

    repo = get_repository(Collections.SOFT_SKILLS)
    skill = repo.find_one({"_id": body.skill_id, "user_id": user["_id"]})
    if not skill:
        return error_response(ErrorCode.SKILL_NOT_FOUND, "Skill assessment not found", 404)
    if skill.get("evidence_score") is not None:
        return error_response(ErrorCode.ALREADY_COMPLETE, "This assessment is already complete", 400)

    conversation = list(skill.get("conversation") or [])
    try:
        response = await run_in_threadpool(
            continue_assessment,
            skill["skill_name"],
            conversation,
            body.message,
            _count_questions(conversation),
        )

        conversation.append({"role": "user", "content": body.message})
        conversation.append({"role": "assistant", "content": response["message"]})
        changes: Dict[str, Any] = {"conversation": conversation, "updated_at": utcnow()}
        if response["isComplete"]:
            changes["evidence_score"] = response.get("evidenceScore")
            changes["statement"] = response.get("statement")
        repo.update_one({"_id": skill["_id"]}, {"$set": changes})
    except AnalysisError as e:
        logger.error(f"Assessment chat failed for {skill['skill_name']}: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Assessment chat error: {e}")
        return error_response(ErrorCode.CHAT_ERROR, "Failed to process message", 500)

    return success_response({"skillId": skill["_id"], **response})


# =============================================================================
# Recruiter readiness
# =============================================================================


@router.post("/recruiter-readiness", dependencies=[Depends(job_match_enabled)])
async def recruiter_readiness(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ContextRequest)
    content, job = _load_resume_and_job(body, user["_id"])

    try:
        pre_analysis = await run_in_threadpool(run_pre_analysis, content, job, body.resume_id, body.job_id)
    except AnalysisError as e:
        logger.error(f"Pre-analysis failed: {e.message}")
        return _analysis_error(e)
    except Exception as e:
        logger.error(f"Pre-analysis error: {e}")
        return error_response(ErrorCode.ANALYSIS_ERROR, "Failed to analyze resume", 500)

    score = calculate_recruiter_readiness(pre_analysis)
    return success_response({
        "score": score,
        "summary": get_score_summary(score),
        "overview": summarize_pre_analysis(pre_analysis),
        "preAnalysis": pre_analysis,
    })
