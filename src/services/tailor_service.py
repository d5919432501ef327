"""
Resume Tailoring Service

Rewrites a resume for one job posting. The model proposes a new summary,
rewritten bullets and a skill ordering; the service merges only what maps
back onto the existing resume:

- bullets are matched by experience and bullet id, unknown ids are dropped
- skills are reordered among the ones already listed, never added
- each section is only touched when its AI feature flag is on

The result carries a change report so the caller can show a diff.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from src.analyzers.base import dict_list, ensure_ai_configured, request_json, str_list
from src.analyzers.prompts import RESUME_TAILORING_SYSTEM_PROMPT, build_resume_tailoring_prompt
from src.common.ai_config import AIFeatureFlags, get_feature_flags
from src.common.errors import ErrorCode, TailorError
from src.validations.tailor import TailorResult

logger = logging.getLogger(__name__)

USE_CASE = "resume_tailoring"
DEFAULT_COMPANY_NAME = "Company"


# ===== MERGE HELPERS =====

def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _merge_bullets(
    experiences: List[Dict[str, Any]], proposed: Any
) -> List[Dict[str, Any]]:
    """Apply rewritten bullet texts in place; returns the diffs."""
    rewrites: Dict[str, Dict[str, str]] = {}
    for exp in dict_list(proposed):
        texts = {
            str(b.get("id")): _clean(b.get("text"))
            for b in dict_list(exp.get("bullets"))
            if b.get("id") is not None
        }
        rewrites[str(exp.get("id"))] = texts

    diffs: List[Dict[str, Any]] = []
    for exp in experiences:
        texts = rewrites.get(str(exp.get("id")), {})
        for bullet in exp.get("bullets") or []:
            after = texts.get(str(bullet.get("id")))
            before = bullet.get("text") or ""
            if not after or after == before:
                continue
            bullet["text"] = after
            diffs.append({
                "bullet_id": str(bullet.get("id")),
                "experience_id": str(exp.get("id")),
                "before": before,
                "after": after,
            })
    return diffs


def _reorder(current: List[str], proposed: List[str]) -> List[str]:
    """Order current skills by the proposal; unmentioned skills keep their order at the end."""
    by_key = {skill.lower(): skill for skill in current}
    ordered: List[str] = []
    for skill in proposed:
        match = by_key.pop(skill.strip().lower(), None)
        if match is not None:
            ordered.append(match)
    ordered.extend(skill for skill in current if skill.lower() in by_key)
    return ordered


def _merge_skills(skills: Dict[str, Any], proposed: Any) -> bool:
    if not isinstance(proposed, dict):
        return False
    changed = False
    for key in ("technical", "soft"):
        current = str_list(skills.get(key))
        if not current:
            continue
        reordered = _reorder(current, str_list(proposed.get(key)))
        if reordered != current:
            skills[key] = reordered
            changed = True
    return changed


# ===== TAILORING =====

def tailor_resume(
    content: Dict[str, Any],
    job: Dict[str, Any],
    flags: Optional[AIFeatureFlags] = None,
) -> Dict[str, Any]:
    """
    Tailor resume content to a job posting.

    Args:
        content: Resume content dict (camelCase); not modified
        job: Job dict in API shape (title, companyName, description,
            requirements, skills)
        flags: Feature flags; defaults to the environment's

    Returns:
        TailorResult as an API dict: tailoredResume and changes

    Raises:
        TailorError: AI not configured, job without a description, or an
            LLM/parse failure
    """
    ensure_ai_configured(TailorError)
    flags = flags or get_feature_flags()

    if not job.get("description"):
        raise TailorError("Job has no description for tailoring", ErrorCode.INSUFFICIENT_CONTENT)

    raw = request_json(
        system_prompt=RESUME_TAILORING_SYSTEM_PROMPT,
        user_prompt=build_resume_tailoring_prompt(
            content,
            job_description=job["description"],
            job_title=job.get("title") or "open",
            company_name=job.get("companyName") or DEFAULT_COMPANY_NAME,
            requirements=job.get("requirements"),
            skills=job.get("skills"),
        ),
        use_case=USE_CASE,
        error_cls=TailorError,
        operation="tailor",
        failure_message="Failed to tailor resume",
    )

    tailored = copy.deepcopy(content)
    changes: Dict[str, Any] = {}

    summary = _clean(raw.get("summary"))
    before = tailored.get("summary") or ""
    if flags.enable_summary_generation and summary and summary != before:
        tailored["summary"] = summary
        changes["summary_modified"] = True
        changes["summary_diff"] = {"before": before, "after": summary}

    if flags.enable_bullet_optimization:
        diffs = _merge_bullets(tailored.get("experiences") or [], raw.get("experiences"))
        changes["bullet_diffs"] = diffs
        changes["experience_bullets_modified"] = len(diffs)

    if flags.enable_skill_extraction and isinstance(tailored.get("skills"), dict):
        changes["skills_reordered"] = _merge_skills(tailored["skills"], raw.get("skills"))

    result = TailorResult(tailored_resume=tailored, changes=changes)
    logger.info(
        f"Tailored resume for {job.get('title')}: summary={result.changes.summary_modified}, "
        f"bullets={result.changes.experience_bullets_modified}, "
        f"skills_reordered={result.changes.skills_reordered}"
    )
    return result.to_api()
