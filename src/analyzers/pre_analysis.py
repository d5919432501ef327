"""
Pre-Analysis Pipeline

Gathers everything known about a resume/job pair before scoring:

- Impact analysis (LLM)
- Uniqueness analysis (LLM)
- Context analysis against the job (LLM)
- Company context (rule-based, no LLM call)
- Soft-skill evidence mined from bullet text (regex, no LLM call)

The three LLM analyses run concurrently. A failed analysis is replaced by
a neutral default so one provider hiccup does not sink the whole report;
only when all three fail is the pipeline an error.
"""

import concurrent.futures
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Pattern

from src.analyzers.context_analyzer import analyze_context
from src.analyzers.impact_analyzer import analyze_impact, collect_bullets
from src.analyzers.uniqueness_analyzer import analyze_uniqueness
from src.common.errors import ErrorCode, PreAnalysisError

logger = logging.getLogger(__name__)


# ===== COMPANY CONTEXT =====

WELL_KNOWN_COMPANIES = {
    # Tech giants
    "google", "apple", "microsoft", "amazon", "meta", "facebook", "netflix",
    "tesla", "nvidia", "intel", "ibm", "oracle", "salesforce", "adobe",
    "uber", "lyft", "airbnb", "spotify", "twitter", "x", "linkedin", "github",
    "stripe", "square", "paypal", "shopify", "twilio", "atlassian", "zoom",
    "slack", "dropbox", "snap", "pinterest", "reddit", "discord",
    # Finance
    "goldman sachs", "morgan stanley", "jp morgan", "jpmorgan", "citibank",
    "bank of america", "wells fargo", "blackrock", "fidelity", "vanguard",
    # Consulting
    "mckinsey", "bain", "bcg", "boston consulting", "deloitte", "accenture",
    "pwc", "kpmg", "ey", "ernst & young",
    # Other major corporations
    "walmart", "target", "costco", "nike", "coca-cola", "pepsi",
    "procter & gamble", "johnson & johnson", "pfizer", "moderna",
}


def research_company_context(company_name: str) -> Dict[str, Any]:
    """
    Rule-based company context for a recruiter who may not know the employer.

    Well-known employers need no explanation. Others get a placeholder
    context of the company name, to be expanded by later tailoring steps.
    """
    is_well_known = company_name.strip().lower() in WELL_KNOWN_COMPANIES
    return {
        "companyName": company_name,
        "isWellKnown": is_well_known,
        "industry": None,
        "size": "enterprise" if is_well_known else "unknown",
        "fundingStage": None,
        "comparable": None,
        "context": "" if is_well_known else company_name,
    }


# ===== SOFT SKILLS =====

def _patterns(*sources: str) -> List[Pattern]:
    return [re.compile(source, re.IGNORECASE) for source in sources]


SOFT_SKILL_PATTERNS: Dict[str, List[Pattern]] = {
    "leadership": _patterns(
        r"\b(led|leading|lead|managed|mentored|coached|directed|headed|oversaw)\b",
        r"\b(team of|cross-functional|coordinated|facilitated)\b",
    ),
    "communication": _patterns(
        r"\b(presented|communicated|collaborated|partnered|liaised|reported)\b",
        r"\b(stakeholder|executive|client-facing|articulated|conveyed)\b",
    ),
    "problem_solving": _patterns(
        r"\b(solved|resolved|troubleshot|debugged|diagnosed|identified|analyzed)\b",
        r"\b(optimized|improved|enhanced|streamlined|automated)\b",
    ),
    "adaptability": _patterns(
        r"\b(adapted|pivoted|learned|transitioned|transformed|migrated)\b",
        r"\b(agile|flexible|cross-trained|multi-disciplinary)\b",
    ),
    "collaboration": _patterns(
        r"\b(collaborated|partnered|worked with|teamed|joined forces)\b",
        r"\b(cross-team|interdepartmental|cross-functional)\b",
    ),
    "initiative": _patterns(
        r"\b(initiated|launched|pioneered|spearheaded|proposed|introduced)\b",
        r"\b(drove|championed|advocated|established)\b",
    ),
}

_STRENGTH_ORDER = {"strong": 0, "moderate": 1, "weak": 2}


def _strength(evidence_count: int) -> str:
    if evidence_count >= 4:
        return "strong"
    if evidence_count >= 2:
        return "moderate"
    return "weak"


def extract_soft_skills(content: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Find soft-skill evidence in experience bullets.

    Each bullet counts at most once per skill (first matching pattern).
    Evidence is the distinct matched phrases; strength follows the number
    of distinct phrases (4+ strong, 2+ moderate, else weak).

    Returns:
        [{skill, evidence, strength, bulletIds}] sorted strongest first
    """
    found: Dict[str, Dict[str, List[str]]] = {}

    for exp in content.get("experiences") or []:
        for bullet in exp.get("bullets") or []:
            text = bullet.get("text", "")
            for skill, patterns in SOFT_SKILL_PATTERNS.items():
                for pattern in patterns:
                    match = pattern.search(text)
                    if not match:
                        continue
                    data = found.setdefault(skill, {"evidence": [], "bulletIds": []})
                    if match.group(0) not in data["evidence"]:
                        data["evidence"].append(match.group(0))
                    if bullet.get("id") not in data["bulletIds"]:
                        data["bulletIds"].append(bullet.get("id"))
                    break

    assessments = [
        {
            "skill": skill.replace("_", " "),
            "evidence": data["evidence"],
            "strength": _strength(len(data["evidence"])),
            "bulletIds": data["bulletIds"],
        }
        for skill, data in found.items()
    ]
    assessments.sort(key=lambda a: _STRENGTH_ORDER[a["strength"]])
    return assessments


# ===== DEFAULTS =====

def default_impact(content: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "score": 50,
        "scoreLabel": "moderate",
        "summary": "Impact analysis unavailable",
        "totalBullets": len(collect_bullets(content)),
        "bulletsImproved": 0,
        "bullets": [],
        "metricCategories": {"percentage": 0, "monetary": 0, "time": 0, "scale": 0, "other": 0},
        "suggestions": [],
    }


def default_uniqueness() -> Dict[str, Any]:
    return {
        "score": 50,
        "scoreLabel": "moderate",
        "factors": [],
        "summary": "Uniqueness analysis unavailable",
        "differentiators": [],
        "suggestions": [],
    }


def default_context() -> Dict[str, Any]:
    return {
        "score": 50,
        "scoreLabel": "moderate",
        "summary": "Context analysis unavailable",
        "matchedSkills": [],
        "missingRequirements": [],
        "experienceAlignments": [],
        "keywordCoverage": {"matched": 0, "total": 0, "percentage": 0, "keywords": []},
        "suggestions": [],
        "fitAssessment": {"strengths": [], "gaps": [], "overallFit": "Unable to assess"},
    }


# ===== ORCHESTRATOR =====

def run_pre_analysis(
    content: Dict[str, Any],
    job: Dict[str, Any],
    resume_id: str = "",
    job_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Run the full pre-analysis for a resume/job pair.

    Args:
        content: Resume content dict (camelCase)
        job: Job dict in API shape
        resume_id: Resume id recorded on the result
        job_id: Job id recorded on the result (defaults to job["id"])

    Returns:
        Dict with impact, uniqueness, context, company, softSkills,
        analyzedAt, resumeId, jobId

    Raises:
        PreAnalysisError: ALL_ANALYSES_FAILED when every LLM analysis fails
    """
    start = datetime.now(timezone.utc)

    tasks: Dict[str, Callable[[], Dict[str, Any]]] = {
        "impact": lambda: analyze_impact(content),
        "uniqueness": lambda: analyze_uniqueness(content),
        "context": lambda: analyze_context(content, job),
    }

    results: Dict[str, Optional[Dict[str, Any]]] = {}
    errors: List[str] = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(tasks)) as executor:
        futures = {name: executor.submit(task) for name, task in tasks.items()}
        for name, future in futures.items():
            try:
                results[name] = future.result()
            except Exception as e:
                results[name] = None
                errors.append(f"{name.capitalize()} analysis failed: {e}")

    if not any(results.values()):
        raise PreAnalysisError(
            f"All analyses failed: {'; '.join(errors)}",
            ErrorCode.ALL_ANALYSES_FAILED,
        )

    if errors:
        logger.warning(f"Pre-analysis completed with partial failures: {errors}")

    company_name = job.get("companyName")
    result = {
        "impact": results["impact"] or default_impact(content),
        "uniqueness": results["uniqueness"] or default_uniqueness(),
        "context": results["context"] or default_context(),
        "company": research_company_context(company_name) if company_name else None,
        "softSkills": extract_soft_skills(content),
        "analyzedAt": datetime.now(timezone.utc).isoformat(),
        "resumeId": resume_id,
        "jobId": job_id if job_id is not None else job.get("id"),
    }

    elapsed_ms = int((datetime.now(timezone.utc) - start).total_seconds() * 1000)
    logger.info(f"Pre-analysis completed in {elapsed_ms}ms")
    return result


def summarize_pre_analysis(result: Dict[str, Any]) -> Dict[str, Any]:
    """
    Weighted overview of a pre-analysis.

    Weights: impact 0.30, uniqueness 0.20, context 0.25, soft skills 0.10,
    company 0.15.

    Returns:
        {overallScore, issueScores, topStrengths (<=3), topGaps (<=3)}
    """
    weights = {
        "impact": 0.30,
        "uniqueness": 0.20,
        "context": 0.25,
        "softSkills": 0.10,
        "company": 0.15,
    }
    points = {"strong": 30, "moderate": 20, "weak": 10}

    soft_skills = result.get("softSkills") or []
    if soft_skills:
        soft_skills_score = min(100, sum(points.get(s.get("strength"), 10) for s in soft_skills))
    else:
        soft_skills_score = 50

    company = result.get("company")
    if company:
        company_score = 100 if company.get("isWellKnown") else 60
    else:
        company_score = 50

    impact, uniqueness, context = result["impact"], result["uniqueness"], result["context"]

    overall_score = round(
        impact["score"] * weights["impact"]
        + uniqueness["score"] * weights["uniqueness"]
        + context["score"] * weights["context"]
        + soft_skills_score * weights["softSkills"]
        + company_score * weights["company"]
    )

    fit = context.get("fitAssessment") or {}
    top_strengths = (uniqueness.get("differentiators") or [])[:2] + (fit.get("strengths") or [])[:2]

    critical = [
        r["requirement"]
        for r in context.get("missingRequirements") or []
        if r.get("importance") == "critical"
    ]
    top_gaps = critical[:2] + (fit.get("gaps") or [])[:2]

    return {
        "overallScore": overall_score,
        "issueScores": {
            "uniqueness": uniqueness["score"],
            "impact": impact["score"],
            "context": company_score,
            "culturalFit": soft_skills_score,
            "customization": context["score"],
        },
        "topStrengths": top_strengths[:3],
        "topGaps": top_gaps[:3],
    }
