"""
Recruiter Readiness Score.

Combines a pre-analysis (impact, uniqueness and context results, company
context and extracted soft skills) into one 0-100 composite across five
dimensions:

    impact              0.30  impact analyzer score
    uniqueness          0.20  uniqueness score plus a differentiator bonus
    contextTranslation  0.15  well-known 100, comparable 80, context 60, else 30
    culturalFit         0.15  30 base plus points per soft skill by strength
    customization       0.20  mean of context score and keyword coverage

The composite is the rounded sum of the weighted dimension scores.
"""

import logging
from typing import Any, Dict, List, Optional

from src.scoring.thresholds import (
    DIMENSION_DISPLAY_NAMES,
    get_readable_label,
    get_score_color,
    get_score_label,
)

logger = logging.getLogger(__name__)

DIMENSION_WEIGHTS: Dict[str, float] = {
    "impact": 0.30,
    "uniqueness": 0.20,
    "contextTranslation": 0.15,
    "culturalFit": 0.15,
    "customization": 0.20,
}

CONTEXT_SCORES = {
    "well_known": 100,
    "comparable": 80,
    "has_context": 60,
    "none": 30,
}

CULTURAL_FIT_BASE = 30
SOFT_SKILL_POINTS = {"strong": 25, "moderate": 15, "weak": 8}
DIFFERENTIATOR_BONUS = 2
MAX_DIFFERENTIATOR_BONUS = 10

DIMENSION_SUGGESTIONS = {
    "impact": "Add concrete metrics (percentages, revenue, time saved, team size) to your experience bullets.",
    "uniqueness": "Lead with the skill combinations and experiences that set you apart from other candidates.",
    "contextTranslation": "Add a short description of lesser-known employers (industry, size, a well-known comparable).",
    "culturalFit": "Show soft skills through outcomes: leading, collaborating, presenting, resolving problems.",
    "customization": "Mirror the job's key requirements and keywords in your summary, skills and bullets.",
}


def _clamp(value: Any, low: float = 0, high: float = 100) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    return max(low, min(high, number))


def score_impact(impact: Optional[Dict[str, Any]]) -> float:
    return _clamp((impact or {}).get("score", 0))


def score_uniqueness(uniqueness: Optional[Dict[str, Any]]) -> float:
    uniqueness = uniqueness or {}
    bonus = min(len(uniqueness.get("differentiators") or []) * DIFFERENTIATOR_BONUS, MAX_DIFFERENTIATOR_BONUS)
    return _clamp(_clamp(uniqueness.get("score", 0)) + bonus)


def score_context_translation(company: Optional[Dict[str, Any]]) -> float:
    """Rule lookup on how recognizable the employer is."""
    if not company:
        return CONTEXT_SCORES["none"]
    if company.get("isWellKnown"):
        return CONTEXT_SCORES["well_known"]
    if company.get("comparable"):
        return CONTEXT_SCORES["comparable"]
    if company.get("context"):
        return CONTEXT_SCORES["has_context"]
    return CONTEXT_SCORES["none"]


def score_cultural_fit(soft_skills: Optional[List[Dict[str, Any]]]) -> float:
    points = sum(SOFT_SKILL_POINTS.get(skill.get("strength"), 0) for skill in soft_skills or [])
    return _clamp(CULTURAL_FIT_BASE + points)


def score_customization(context: Optional[Dict[str, Any]]) -> float:
    context = context or {}
    coverage = (context.get("keywordCoverage") or {}).get("percentage", 0)
    return _clamp((_clamp(context.get("score", 0)) + _clamp(coverage)) / 2)


def _top_suggestions(dimensions: Dict[str, Dict[str, Any]], limit: int = 3) -> List[str]:
    """Suggestions for the dimensions with the largest weighted gap below 'strong'."""
    gaps = [
        (name, dim["weight"] * (100 - dim["raw"]))
        for name, dim in dimensions.items()
        if get_score_label(dim["raw"]) not in ("exceptional", "strong")
    ]
    gaps.sort(key=lambda item: item[1], reverse=True)
    return [DIMENSION_SUGGESTIONS[name] for name, _ in gaps[:limit]]


def calculate_recruiter_readiness(pre_analysis: Dict[str, Any]) -> Dict[str, Any]:
    """
    Calculate the recruiter readiness score for a pre-analysis.

    Args:
        pre_analysis: Pre-analysis result in API (camelCase) shape with
            impact, uniqueness, context, company and softSkills

    Returns:
        Dict with composite, label, readableLabel, color, dimensions
        and topSuggestions
    """
    raw_scores = {
        "impact": score_impact(pre_analysis.get("impact")),
        "uniqueness": score_uniqueness(pre_analysis.get("uniqueness")),
        "contextTranslation": score_context_translation(pre_analysis.get("company")),
        "culturalFit": score_cultural_fit(pre_analysis.get("softSkills")),
        "customization": score_customization(pre_analysis.get("context")),
    }

    dimensions: Dict[str, Dict[str, Any]] = {}
    for name, raw in raw_scores.items():
        weight = DIMENSION_WEIGHTS[name]
        dimensions[name] = {
            "raw": round(raw),
            "weight": weight,
            "weighted": round(raw * weight, 2),
            "label": get_score_label(raw),
            "name": DIMENSION_DISPLAY_NAMES[name]["name"],
        }

    composite = int(round(sum(dim["weighted"] for dim in dimensions.values())))
    composite = max(0, min(100, composite))
    label = get_score_label(composite)

    logger.info(f"Recruiter readiness: {composite} ({label})")

    return {
        "composite": composite,
        "label": label,
        "readableLabel": get_readable_label(label),
        "color": get_score_color(label),
        "dimensions": dimensions,
        "topSuggestions": _top_suggestions(dimensions),
    }


def get_score_summary(score: Dict[str, Any]) -> str:
    """One-line human summary of a recruiter readiness score."""
    label = score["label"]
    composite = score["composite"]
    dimensions = score.get("dimensions", {})

    strongest = max(dimensions, key=lambda name: dimensions[name]["raw"]) if dimensions else None
    weakest = min(dimensions, key=lambda name: dimensions[name]["raw"]) if dimensions else None

    summary = f"Your resume scores {composite}/100 ({get_readable_label(label)})."
    if strongest and weakest and strongest != weakest:
        summary += (
            f" Strongest area: {DIMENSION_DISPLAY_NAMES[strongest]['name']}."
            f" Biggest opportunity: {DIMENSION_DISPLAY_NAMES[weakest]['name']}."
        )
    return summary
