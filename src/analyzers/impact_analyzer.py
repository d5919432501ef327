"""
Impact Analyzer

Rewrites resume bullets into quantified achievement statements and scores
how well the resume uses metrics overall.
"""

import logging
import uuid
from typing import Any, Dict, List

from src.analyzers.base import clamp, dict_list, ensure_ai_configured, pick, request_json, str_list
from src.analyzers.prompts import format_resume_for_prompt
from src.common.errors import ErrorCode, ImpactAnalysisError
from src.validations.impact import IMPROVEMENT_LEVELS, ImpactResult, get_impact_score_label

logger = logging.getLogger(__name__)

USE_CASE = "impact_analysis"

METRIC_CATEGORY_KEYS = ("percentage", "monetary", "time", "scale", "other")


# ===== PROMPTS =====

IMPACT_SYSTEM_PROMPT = """You are an expert resume writer and career coach who transforms vague job descriptions into metrics-driven achievement statements. Your specialty is helping professionals quantify their impact.

## Types of Metrics

1. Percentages: "Improved efficiency by 40%", "Reduced costs by 25%"
2. Monetary values: "Generated $2M in new revenue", "Managed $3M budget"
3. Time: "Reduced processing time from 2 weeks to 2 days"
4. Scale/volume: "Led team of 12 engineers", "Processed 1M+ transactions daily"
5. Other: rankings, awards, uptime

## Transformation Guidelines

- Start with action verbs (Led, Developed, Implemented, Increased, Reduced)
- Add specific numbers; reasonable estimates beat vague descriptions
- Show the outcome of the action (Challenge, Action, Result)
- Keep each bullet to 1-2 lines
- Do not fabricate metrics; estimate only from context in the resume

## Scoring Guidelines

Impact quantification score from 0-100:
- 0-39: Weak - most bullets lack metrics
- 40-64: Moderate - some quantification present
- 65-84: Strong - good use of metrics
- 85-100: Exceptional - excellent quantification throughout

## Output Format

Return a JSON object:
{
  "score": number (0-100),
  "summary": "2-3 sentence summary of the overall quantification level",
  "bullets": [
    {
      "experienceId": "id from resume",
      "experienceTitle": "job title",
      "companyName": "company name",
      "original": "original bullet text",
      "improved": "improved bullet with metrics",
      "metrics": ["metric"],
      "improvement": "none" | "minor" | "major" | "transformed",
      "explanation": "Why this improvement was made"
    }
  ],
  "metricCategories": {"percentage": 0, "monetary": 0, "time": 0, "scale": 0, "other": 0},
  "suggestions": [
    {"area": "Area for improvement", "recommendation": "Specific action"}
  ]
}

If a bullet is already well-quantified, mark improvement as "none" and keep the original."""


def collect_bullets(content: Dict[str, Any]) -> List[Dict[str, str]]:
    """Flatten experience bullets with their experience context."""
    bullets = []
    for exp in content.get("experiences") or []:
        for bullet in exp.get("bullets") or []:
            bullets.append({
                "experienceId": exp.get("id", ""),
                "experienceTitle": exp.get("title", ""),
                "companyName": exp.get("company", ""),
                "bulletId": bullet.get("id", ""),
                "text": bullet.get("text", ""),
            })
    return bullets


def build_impact_prompt(content: Dict[str, Any]) -> str:
    listed = "\n".join(
        f'{i + 1}. [{b["experienceTitle"]} at {b["companyName"]}] "{b["text"]}" (experienceId: {b["experienceId"]})'
        for i, b in enumerate(collect_bullets(content))
    )
    return f"""Analyze and quantify the impact of each bullet point in this resume:

{format_resume_for_prompt(content)}

## Bullets to Analyze
{listed}

For each bullet:
1. If it lacks quantification, transform it with specific metrics
2. If it's already quantified, mark as "none" improvement
3. Explain what metrics were added and why

Calculate an overall impact quantification score (0-100) and provide actionable suggestions.

Return your analysis as a JSON object matching the specified schema."""


# ===== NORMALIZATION =====

def _count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return 0
    return int(value)


def normalize_impact(raw: Dict[str, Any], total_bullets: int) -> Dict[str, Any]:
    """Fill defaults for a raw impact reply; totalBullets comes from the resume."""
    bullets = []
    for index, b in enumerate(dict_list(raw.get("bullets"))):
        original = b.get("original") or ""
        bullets.append({
            "id": str(uuid.uuid4()),
            "experience_id": b.get("experienceId") or f"exp-{index}",
            "experience_title": b.get("experienceTitle") or "Unknown Position",
            "company_name": b.get("companyName") or "Unknown Company",
            "original": original,
            "improved": b.get("improved") or original,
            "metrics": str_list(b.get("metrics")),
            "improvement": pick(b.get("improvement"), IMPROVEMENT_LEVELS, "none"),
            "explanation": b.get("explanation") or "",
        })

    categories = raw.get("metricCategories") if isinstance(raw.get("metricCategories"), dict) else {}
    score = int(round(clamp(raw.get("score"), 0, 100, 50)))

    result = ImpactResult(
        score=score,
        score_label=get_impact_score_label(score),
        summary=raw.get("summary") or "Analysis complete.",
        total_bullets=total_bullets,
        bullets_improved=sum(1 for b in bullets if b["improvement"] != "none"),
        bullets=bullets,
        metric_categories={key: _count(categories.get(key)) for key in METRIC_CATEGORY_KEYS},
        suggestions=[
            {"area": s.get("area") or "General", "recommendation": s.get("recommendation") or ""}
            for s in dict_list(raw.get("suggestions"))
        ],
    )
    return result.to_api()


def analyze_impact(content: Dict[str, Any]) -> Dict[str, Any]:
    """
    Analyze and quantify the impact of every resume bullet.

    Args:
        content: Resume content dict (camelCase)

    Returns:
        ImpactResult as an API dict

    Raises:
        ImpactAnalysisError: AI not configured, no bullets, or an LLM/parse failure
    """
    ensure_ai_configured(ImpactAnalysisError)

    total_bullets = len(collect_bullets(content))
    if total_bullets == 0:
        raise ImpactAnalysisError(
            "Resume must have experience bullets to analyze.",
            ErrorCode.INSUFFICIENT_CONTENT,
        )

    raw = request_json(
        system_prompt=IMPACT_SYSTEM_PROMPT,
        user_prompt=build_impact_prompt(content),
        use_case=USE_CASE,
        error_cls=ImpactAnalysisError,
        operation="impact",
        failure_message="Failed to analyze impact",
    )

    result = normalize_impact(raw, total_bullets)
    logger.info(
        f"Impact analysis: score={result['score']} "
        f"improved={result['bulletsImproved']}/{total_bullets}"
    )
    return result
