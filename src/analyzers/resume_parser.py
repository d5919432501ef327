"""
Resume Parser

Turns text extracted from an uploaded PDF into structured ResumeContent.

The model returns bullets as plain strings and omits ids; both are filled
here before validation. When the full reply fails validation, the parser
salvages the parts that are usually right (contact, experiences,
education, skills, summary, projects) and validates that instead.
"""

import logging
import uuid
from typing import Any, Dict, List

from pydantic import ValidationError

from src.analyzers.base import dict_list, ensure_ai_configured, request_json, str_list
from src.analyzers.prompts import RESUME_PARSING_SYSTEM_PROMPT, build_resume_parsing_prompt
from src.common.errors import ErrorCode, ResumeParseError
from src.validations.base import format_validation_errors
from src.validations.resume import ResumeContent

logger = logging.getLogger(__name__)

USE_CASE = "resume_parsing"
MIN_TEXT_LENGTH = 50


def _new_id() -> str:
    return str(uuid.uuid4())


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _bullets(raw: Any) -> List[Dict[str, str]]:
    bullets = []
    for item in raw if isinstance(raw, list) else []:
        if isinstance(item, str) and item.strip():
            bullets.append({"id": _new_id(), "text": item.strip()})
        elif isinstance(item, dict) and _text(item.get("text")).strip():
            bullets.append({"id": item.get("id") or _new_id(), "text": item["text"].strip()})
    return bullets


def fill_ids(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Give every experience, bullet, education entry and project an id.

    Required string fields the model left null become empty strings.
    """
    content = dict(raw)
    content["experiences"] = [
        {
            **exp,
            "id": exp.get("id") or _new_id(),
            "company": _text(exp.get("company")),
            "title": _text(exp.get("title")),
            "startDate": _text(exp.get("startDate")),
            "endDate": exp.get("endDate") or None,
            "bullets": _bullets(exp.get("bullets")),
        }
        for exp in dict_list(raw.get("experiences"))
    ]
    content["education"] = [
        {
            **edu,
            "id": edu.get("id") or _new_id(),
            "institution": _text(edu.get("institution")),
            "degree": _text(edu.get("degree")),
        }
        for edu in dict_list(raw.get("education"))
    ]
    if isinstance(raw.get("projects"), list):
        content["projects"] = [
            {
                **project,
                "id": project.get("id") or _new_id(),
                "name": _text(project.get("name")),
                "description": _text(project.get("description")),
                "technologies": str_list(project.get("technologies")),
            }
            for project in dict_list(raw.get("projects"))
        ]
    return content


def salvage_content(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the parts of a reply that commonly validate."""
    contact = raw.get("contact") if isinstance(raw.get("contact"), dict) else {}
    skills = raw.get("skills") if isinstance(raw.get("skills"), dict) else {}
    salvaged: Dict[str, Any] = {
        "contact": {"name": _text(contact.get("name")), "email": _text(contact.get("email"))},
        "experiences": raw.get("experiences") if isinstance(raw.get("experiences"), list) else [],
        "education": raw.get("education") if isinstance(raw.get("education"), list) else [],
        "skills": {
            "technical": str_list(skills.get("technical")),
            "soft": str_list(skills.get("soft")),
        },
    }
    if isinstance(raw.get("summary"), str):
        salvaged["summary"] = raw["summary"]
    if isinstance(raw.get("projects"), list):
        salvaged["projects"] = raw["projects"]
    return salvaged


def parse_resume_text(extracted_text: str) -> Dict[str, Any]:
    """
    Parse extracted resume text into structured content.

    Args:
        extracted_text: Raw text from the PDF

    Returns:
        ResumeContent as an API dict

    Raises:
        ResumeParseError: AI_NOT_CONFIGURED, INSUFFICIENT_TEXT, INVALID_JSON,
            SCHEMA_VALIDATION_FAILED or an LLM failure code
    """
    ensure_ai_configured(ResumeParseError)

    if not extracted_text or len(extracted_text.strip()) < MIN_TEXT_LENGTH:
        raise ResumeParseError(
            "Extracted text is too short to parse as a resume.",
            ErrorCode.INSUFFICIENT_TEXT,
        )

    try:
        raw = request_json(
            system_prompt=RESUME_PARSING_SYSTEM_PROMPT,
            user_prompt=build_resume_parsing_prompt(extracted_text),
            use_case=USE_CASE,
            error_cls=ResumeParseError,
            operation="resume_parse",
            failure_message="Failed to parse resume with AI",
        )
    except ResumeParseError as e:
        if e.code == ErrorCode.PARSE_ERROR:
            raise ResumeParseError("AI returned invalid JSON", ErrorCode.INVALID_JSON, e) from e
        raise

    try:
        content = ResumeContent.model_validate(fill_ids(raw))
    except ValidationError as e:
        logger.warning(f"Parsed resume failed validation, salvaging: {format_validation_errors(e)}")
        try:
            content = ResumeContent.model_validate(fill_ids(salvage_content(raw)))
        except ValidationError as salvage_error:
            raise ResumeParseError(
                "AI response does not match expected resume format",
                ErrorCode.SCHEMA_VALIDATION_FAILED,
                salvage_error,
            ) from salvage_error

    result = content.to_api(exclude_none=True)
    logger.info(
        f"Parsed resume: {len(result['experiences'])} experiences, "
        f"{len(result['education'])} education entries"
    )
    return result


def has_valid_content(content: Dict[str, Any]) -> bool:
    """True when parsed content has experiences, technical skills, education or projects."""
    skills = content.get("skills") or {}
    return bool(
        content.get("experiences")
        or skills.get("technical")
        or content.get("education")
        or content.get("projects")
    )
