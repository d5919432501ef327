"""
Resume CRUD, PDF upload, PDF export and AI tailoring routes.

- GET    /api/resumes            - List the user's resumes (newest first)
- POST   /api/resumes            - Create a resume
- POST   /api/resumes/upload     - Upload a PDF, extract text, parse with AI
- GET    /api/resumes/{id}       - Get a resume
- PATCH  /api/resumes/{id}       - Update a resume
- DELETE /api/resumes/{id}       - Delete a resume
- GET    /api/resumes/{id}/pdf   - Download the resume as a PDF
- POST   /api/resumes/{id}/tailor - Tailor a resume to a job with AI (503 when
                                 ENABLE_AI_TAILORING is "false")
"""

import logging
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool

from src.common.ai_config import is_ai_configured
from src.common.errors import ErrorCode, ResumeParseError, TailorError, status_for_ai_error
from src.common.repositories import Collections, get_repository, new_id, to_api, to_document, utcnow
from src.analyzers.resume_parser import parse_resume_text
from src.services.pdf_generator import PDFGenerationError, generate_pdf_filename, generate_resume_pdf
from src.services.pdf_parser import PDFParseError, extract_text_from_pdf
from src.services.tailor_service import tailor_resume
from src.validations.resume import (
    ALLOWED_MIME_TYPES,
    MAX_FILE_SIZE,
    ResumeCreate,
    ResumeUpdate,
    empty_resume_content,
)
from src.validations.tailor import TailorRequest

from ..dependencies import (
    ai_rate_limit,
    api_rate_limit,
    get_current_user,
    tailoring_enabled,
    upload_rate_limit,
)
from ..responses import (
    error_response,
    not_found_response,
    parse_request_body,
    sanitize_filename,
    success_response,
    success_with_meta,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["resumes"])

DEFAULT_RESUME_NAME = "Untitled Resume"


def _find_resume(resume_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    return get_repository(Collections.RESUMES).find_one({"_id": resume_id, "user_id": user_id})


# =============================================================================
# Collection
# =============================================================================


@router.get("", dependencies=[Depends(api_rate_limit)])
async def list_resumes(user: Dict[str, Any] = Depends(get_current_user)):
    try:
        resumes = get_repository(Collections.RESUMES).find(
            {"user_id": user["_id"]}, sort=[("updated_at", -1)]
        )
    except Exception as e:
        logger.error(f"Error fetching resumes: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch resumes", 500)

    return success_with_meta([to_api(r) for r in resumes], {"total": len(resumes)})


@router.post("", dependencies=[Depends(api_rate_limit)])
async def create_resume(request: Request, user: Dict[str, Any] = Depends(get_current_user)):
    body = await parse_request_body(request, ResumeCreate)

    now = utcnow()
    resume = {
        "_id": new_id(),
        "user_id": user["_id"],
        "name": body.name or DEFAULT_RESUME_NAME,
        "content": body.content or {},
        "template_id": body.template_id,
        "is_master": bool(body.is_master),
        "created_at": now,
        "updated_at": now,
    }
    try:
        get_repository(Collections.RESUMES).insert_one(resume)
    except Exception as e:
        logger.error(f"Error creating resume: {e}")
        return error_response(ErrorCode.CREATE_ERROR, "Failed to create resume", 500)

    logger.info(f"Created resume {resume['_id']}")
    return success_response(to_api(resume), 201)


# =============================================================================
# Upload
# =============================================================================


@router.post("/upload", dependencies=[Depends(upload_rate_limit)])
async def upload_resume(
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    user: Dict[str, Any] = Depends(get_current_user),
):
    """
    Upload a PDF resume.

    Text is extracted with pdfplumber; when AI is configured the text is
    parsed into structured content. AI parse failures are logged and the
    resume is saved with empty content for manual editing.
    """
    if file is None:
        return error_response(ErrorCode.NO_FILE, "No file provided", 400)

    if file.content_type not in ALLOWED_MIME_TYPES:
        return error_response(ErrorCode.INVALID_TYPE, "Only PDF files are allowed", 400)

    try:
        data = await file.read()
        if len(data) > MAX_FILE_SIZE:
            return error_response(
                ErrorCode.FILE_TOO_LARGE,
                f"File size must be less than {MAX_FILE_SIZE // (1024 * 1024)}MB",
                400,
            )

        try:
            extracted_text = await run_in_threadpool(extract_text_from_pdf, data)
        except PDFParseError as e:
            logger.error(f"Error extracting text from PDF: {e}")
            return error_response(ErrorCode.PDF_EXTRACTION_FAILED, status_code=400)

        content = empty_resume_content()
        if extracted_text and is_ai_configured():
            try:
                content = await run_in_threadpool(parse_resume_text, extracted_text)
                logger.info("Successfully parsed resume with AI")
            except ResumeParseError as e:
                logger.error(f"Error parsing resume with AI ({e.code}): {e.message}")

        file_name = file.filename or "resume.pdf"
        parsed_name = ((content.get("contact") or {}).get("name") or "").strip()
        resume_name = (
            name
            or parsed_name
            or re.sub(r"\.pdf$", "", file_name, flags=re.IGNORECASE)
            or DEFAULT_RESUME_NAME
        )

        now = utcnow()
        resume = {
            "_id": new_id(),
            "user_id": user["_id"],
            "name": resume_name,
            "content": content,
            "template_id": None,
            "is_master": False,
            "original_file_name": sanitize_filename(file_name),
            "file_size": len(data),
            "extracted_text": extracted_text or None,
            "created_at": now,
            "updated_at": now,
        }
        get_repository(Collections.RESUMES).insert_one(resume)
    except Exception as e:
        logger.error(f"Error uploading resume: {e}")
        message = str(e) or "Unknown error"
        if "timeout" in message.lower() or "ETIMEDOUT" in message:
            return error_response(
                ErrorCode.UPLOAD_TIMEOUT,
                "Resume processing timed out. Please try again with a smaller file.",
                500,
            )
        return error_response(ErrorCode.UPLOAD_ERROR, f"Failed to upload resume: {message}", 500)

    logger.info(f"Uploaded resume {resume['_id']} ({len(data)} bytes)")
    return success_response(to_api(resume), 201)


# =============================================================================
# Single resume
# =============================================================================


@router.get("/{resume_id}", dependencies=[Depends(api_rate_limit)])
async def get_resume(resume_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        resume = _find_resume(resume_id, user["_id"])
    except Exception as e:
        logger.error(f"Error fetching resume: {e}")
        return error_response(ErrorCode.FETCH_ERROR, "Failed to fetch resume", 500)

    if not resume:
        return not_found_response("Resume")
    return success_response(to_api(resume))


@router.patch("/{resume_id}", dependencies=[Depends(api_rate_limit)])
async def update_resume(
    resume_id: str,
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
):
    body = await parse_request_body(request, ResumeUpdate)

    try:
        repo = get_repository(Collections.RESUMES)
        if not _find_resume(resume_id, user["_id"]):
            return not_found_response("Resume")

        changes = to_document(body.model_dump(by_alias=True, exclude_none=True))
        changes["updated_at"] = utcnow()
        repo.update_one({"_id": resume_id, "user_id": user["_id"]}, {"$set": changes})
        updated = _find_resume(resume_id, user["_id"])
    except Exception as e:
        logger.error(f"Error updating resume: {e}")
        return error_response(ErrorCode.UPDATE_ERROR, "Failed to update resume", 500)

    return success_response(to_api(updated))


@router.delete("/{resume_id}", dependencies=[Depends(api_rate_limit)])
async def delete_resume(resume_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    try:
        if not _find_resume(resume_id, user["_id"]):
            return not_found_response("Resume")
        get_repository(Collections.RESUMES).delete_one({"_id": resume_id, "user_id": user["_id"]})
        # applications keep their job but lose the resume
        get_repository(Collections.APPLICATIONS).update_many(
            {"resume_id": resume_id}, {"$set": {"resume_id": None, "updated_at": utcnow()}}
        )
    except Exception as e:
        logger.error(f"Error deleting resume: {e}")
        return error_response(ErrorCode.DELETE_ERROR, "Failed to delete resume", 500)

    logger.info(f"Deleted resume {resume_id}")
    return success_response({"deleted": True})


# =============================================================================
# PDF export
# =============================================================================


@router.get("/{resume_id}/pdf", dependencies=[Depends(api_rate_limit)])
async def download_resume_pdf(resume_id: str, user: Dict[str, Any] = Depends(get_current_user)):
    """Render a resume to PDF and return it as an attachment."""
    try:
        resume = _find_resume(resume_id, user["_id"])
        if not resume:
            return error_response(ErrorCode.RESUME_NOT_FOUND, "Resume not found", 404)

        content = resume.get("content") or {}
        if not content or not content.get("contact"):
            return error_response(ErrorCode.INVALID_RESUME, "Resume has no content to export", 400)

        pdf = await run_in_threadpool(generate_resume_pdf, content)
        filename = generate_pdf_filename(content)
    except PDFGenerationError as e:
        status = 400 if e.code == ErrorCode.INVALID_CONTENT else 500
        return error_response(e.code, e.message, status)
    except Exception as e:
        logger.error(f"Error generating PDF for resume {resume_id}: {e}")
        return error_response(ErrorCode.PDF_ERROR, "Failed to generate PDF", 500)

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(pdf)),
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


# =============================================================================
# Tailoring
# =============================================================================


@router.post(
    "/{resume_id}/tailor",
    dependencies=[Depends(tailoring_enabled), Depends(ai_rate_limit)],
)
async def tailor_resume_for_job(
    resume_id: str,
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
):
    """Rewrite a resume for a job; the stored resume is left unchanged."""
    if not is_ai_configured():
        return error_response(
            ErrorCode.AI_NOT_CONFIGURED,
            "AI features are not configured. Please add your API key.",
            503,
        )

    body = await parse_request_body(request, TailorRequest)

    resume = _find_resume(resume_id, user["_id"])
    if not resume:
        return error_response(ErrorCode.RESUME_NOT_FOUND, "Resume not found", 404)
    job = get_repository(Collections.JOBS).find_one({"_id": body.job_id})
    if not job:
        return error_response(ErrorCode.JOB_NOT_FOUND, "Job not found", 404)

    content = resume.get("content") or {}
    if not content.get("contact"):
        return error_response(ErrorCode.INVALID_RESUME, "Resume has no content to tailor", 400)
    if not job.get("description"):
        return error_response(ErrorCode.INVALID_JOB, "Job has no description for tailoring", 400)

    try:
        result = await run_in_threadpool(tailor_resume, content, to_api(job))
    except TailorError as e:
        logger.error(f"Tailoring failed for resume {resume_id}: {e.message}")
        return error_response(e.code, e.message, status_for_ai_error(e.code))
    except Exception as e:
        logger.error(f"Tailoring error for resume {resume_id}: {e}")
        return error_response(ErrorCode.TAILOR_ERROR, "Failed to tailor resume", 500)

    return success_response(result)
