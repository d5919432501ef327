"""
Context Analyzer

Compares a resume against a job posting: matched skills, missing
requirements, per-experience alignment, keyword coverage and an overall
fit assessment.

Keyword coverage is recomputed from the returned keyword list because
model-reported percentages frequently disagree with their own counts.
"""

import logging
from typing import Any, Dict, List

from src.analyzers.base import clamp, dict_list, ensure_ai_configured, pick, request_json, str_list
from src.analyzers.prompts import format_job_for_prompt, format_resume_for_prompt
from src.common.errors import ContextAnalysisError, ErrorCode
from src.validations.context import ContextResult, get_context_score_label

logger = logging.getLogger(__name__)

USE_CASE = "context_analysis"

SKILL_SOURCES = ("technical", "soft", "experience", "education")
MATCH_STRENGTHS = ("exact", "related", "transferable")
IMPORTANCE_LEVELS = ("critical", "important", "nice_to_have")
RELEVANCE_LEVELS = ("high", "medium", "low")
SUGGESTION_CATEGORIES = ("skills", "experience", "keywords", "tailoring")
PRIORITIES = ("high", "medium", "low")


# ===== PROMPTS =====

CONTEXT_SYSTEM_PROMPT = """You are an expert technical recruiter and ATS specialist. You evaluate how well a candidate's resume fits a specific job posting and explain exactly where it aligns and where it falls short.

## Analysis Framework

1. Skill Matching: which required skills the resume demonstrates, where (technical skills, soft skills, experience, education) and how closely (exact, related, transferable)
2. Missing Requirements: requirements the resume does not evidence, ranked critical, important or nice_to_have, with a concrete way to address each
3. Experience Alignment: for each experience, how relevant it is to this role (high, medium, low) and which aspects match
4. Keyword Coverage: the important keywords from the posting and whether each appears in the resume (and where)
5. Fit Assessment: key strengths, key gaps, and a one-sentence overall verdict

## Scoring Guidelines

Context match score from 0-100:
- 0-29: Poor - resume targets a different role
- 30-49: Weak - partial overlap with major gaps
- 50-69: Moderate - relevant but needs tailoring
- 70-84: Good - strong alignment with minor gaps
- 85-100: Excellent - near-ideal match

## Output Format

Return a JSON object:
{
  "score": number (0-100),
  "summary": "2-3 sentence summary of the fit",
  "matchedSkills": [
    {"skill": "Skill", "source": "technical" | "soft" | "experience" | "education", "strength": "exact" | "related" | "transferable", "evidence": "Where it appears"}
  ],
  "missingRequirements": [
    {"requirement": "Requirement", "importance": "critical" | "important" | "nice_to_have", "suggestion": "How to address it"}
  ],
  "experienceAlignments": [
    {"experienceId": "id from resume", "experienceTitle": "title", "companyName": "company", "relevance": "high" | "medium" | "low", "matchedAspects": ["aspect"], "explanation": "Why"}
  ],
  "keywordCoverage": {
    "keywords": [{"keyword": "keyword", "found": true, "location": "summary / experience / skills"}]
  },
  "suggestions": [
    {"category": "skills" | "experience" | "keywords" | "tailoring", "priority": "high" | "medium" | "low", "recommendation": "Specific action"}
  ],
  "fitAssessment": {"strengths": ["Strength"], "gaps": ["Gap"], "overallFit": "One-sentence verdict"}
}

Only credit skills and experience that the resume actually shows. Do not fabricate information."""


def build_context_prompt(content: Dict[str, Any], job: Dict[str, Any]) -> str:
    return f"""Analyze how well this resume fits the job posting.

# Job Posting
{format_job_for_prompt(job)}

# Resume
{format_resume_for_prompt(content)}

Identify matched skills, missing requirements, experience alignment and keyword coverage, then give a context match score (0-100) with prioritized suggestions.

Return your analysis as a JSON object matching the specified schema."""


def job_has_details(job: Dict[str, Any]) -> bool:
    """A job needs a description, requirements or skills to analyze against."""
    return bool(job.get("description") or job.get("requirements") or job.get("skills"))


# ===== NORMALIZATION =====

def _keyword_coverage(raw: Any) -> Dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    keywords: List[Dict[str, Any]] = []
    for k in dict_list(raw.get("keywords")):
        if not k.get("keyword"):
            continue
        keywords.append({
            "keyword": str(k["keyword"]),
            "found": bool(k.get("found")),
            "location": k.get("location") or None,
        })

    if keywords:
        total = len(keywords)
        matched = sum(1 for k in keywords if k["found"])
    else:
        total = int(clamp(raw.get("total"), 0, 10_000, 0))
        matched = int(clamp(raw.get("matched"), 0, total, 0))

    percentage = round(matched / total * 100) if total else 0
    return {"matched": matched, "total": total, "percentage": percentage, "keywords": keywords}


def normalize_context(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fill defaults, clamp the score and recompute keyword coverage."""
    score = int(round(clamp(raw.get("score"), 0, 100, 50)))
    fit = raw.get("fitAssessment") if isinstance(raw.get("fitAssessment"), dict) else {}

    result = ContextResult(
        score=score,
        score_label=get_context_score_label(score),
        summary=raw.get("summary") or "Analysis complete.",
        matched_skills=[
            {
                "skill": s.get("skill") or "",
                "source": pick(s.get("source"), SKILL_SOURCES, "experience"),
                "strength": pick(s.get("strength"), MATCH_STRENGTHS, "related"),
                "evidence": s.get("evidence") or "",
            }
            for s in dict_list(raw.get("matchedSkills"))
        ],
        missing_requirements=[
            {
                "requirement": m.get("requirement") or "",
                "importance": pick(m.get("importance"), IMPORTANCE_LEVELS, "important"),
                "suggestion": m.get("suggestion") or "",
            }
            for m in dict_list(raw.get("missingRequirements"))
        ],
        experience_alignments=[
            {
                "experience_id": a.get("experienceId") or f"exp-{index}",
                "experience_title": a.get("experienceTitle") or "Unknown Position",
                "company_name": a.get("companyName") or "Unknown Company",
                "relevance": pick(a.get("relevance"), RELEVANCE_LEVELS, "medium"),
                "matched_aspects": str_list(a.get("matchedAspects")),
                "explanation": a.get("explanation") or "",
            }
            for index, a in enumerate(dict_list(raw.get("experienceAlignments")))
        ],
        keyword_coverage=_keyword_coverage(raw.get("keywordCoverage")),
        suggestions=[
            {
                "category": pick(s.get("category"), SUGGESTION_CATEGORIES, "tailoring"),
                "priority": pick(s.get("priority"), PRIORITIES, "medium"),
                "recommendation": s.get("recommendation") or "",
            }
            for s in dict_list(raw.get("suggestions"))
        ],
        fit_assessment={
            "strengths": str_list(fit.get("strengths")),
            "gaps": str_list(fit.get("gaps")),
            "overall_fit": fit.get("overallFit") or "",
        },
    )
    return result.to_api()


def analyze_context(content: Dict[str, Any], job: Dict[str, Any]) -> Dict[str, Any]:
    """
    Analyze how well a resume matches a job posting.

    Args:
        content: Resume content dict (camelCase)
        job: Job dict in API shape (title, companyName, description,
            requirements, skills)

    Returns:
        ContextResult as an API dict

    Raises:
        ContextAnalysisError: AI not configured, job without details, or
            an LLM/parse failure
    """
    ensure_ai_configured(ContextAnalysisError)

    if not job_has_details(job):
        raise ContextAnalysisError(
            "Job must have a description, requirements or skills to analyze.",
            ErrorCode.INSUFFICIENT_CONTENT,
        )

    raw = request_json(
        system_prompt=CONTEXT_SYSTEM_PROMPT,
        user_prompt=build_context_prompt(content, job),
        use_case=USE_CASE,
        error_cls=ContextAnalysisError,
        operation="context",
        failure_message="Failed to analyze context",
    )

    result = normalize_context(raw)
    coverage = result["keywordCoverage"]
    logger.info(
        f"Context analysis: score={result['score']} "
        f"keywords={coverage['matched']}/{coverage['total']}"
    )
    return result
