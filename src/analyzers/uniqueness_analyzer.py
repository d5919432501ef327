"""
Uniqueness Analyzer

Identifies what sets a candidate apart: rare skill combinations, career
transitions, unusual experiences, niche expertise and achievement patterns.

Output is normalized into a UniquenessResult so a partially-formed LLM
reply still yields a usable, schema-valid analysis.
"""

import logging
import uuid
from typing import Any, Dict

from src.analyzers.base import clamp, dict_list, ensure_ai_configured, pick, request_json, str_list
from src.analyzers.prompts import format_resume_for_prompt
from src.common.errors import ErrorCode, UniquenessAnalysisError
from src.validations.uniqueness import (
    FACTOR_TYPES,
    RARITY_LEVELS,
    UniquenessResult,
    get_score_label,
)

logger = logging.getLogger(__name__)

USE_CASE = "uniqueness_analysis"


# ===== PROMPTS =====

UNIQUENESS_SYSTEM_PROMPT = """You are an expert career strategist and personal branding consultant who helps professionals stand out in competitive job markets. Your specialty is identifying what makes each candidate truly unique.

Analyze the resume and identify the candidate's unique differentiators: the rare combinations of skills, experiences and achievements that set them apart from typical candidates.

## Analysis Framework

1. Skill Combinations: unusual pairings (Data Science + UX Design, Engineering + Sales, Healthcare + AI)
2. Career Transitions: industry switches or non-linear paths that bring a distinct perspective
3. Unique Experiences: unusual industries, international work, leadership in uncommon contexts, awards
4. Domain Expertise: rare technical skills, specialized industry knowledge
5. Achievement Patterns: consistent outcomes, unusual scale of impact, first-to-market work

## Scoring Guidelines

Uniqueness score from 0-100:
- 0-39: Low - mostly common skills and experiences
- 40-64: Moderate - some differentiating factors
- 65-84: High - clear unique value proposition
- 85-100: Exceptional - truly rare combination

## Output Format

Return a JSON object:
{
  "score": number (0-100),
  "factors": [
    {
      "type": "skill_combination" | "career_transition" | "unique_experience" | "domain_expertise" | "achievement" | "education",
      "title": "Brief title",
      "description": "Why this is unique",
      "rarity": "uncommon" | "rare" | "very_rare",
      "evidence": ["Quote or reference from resume"],
      "suggestion": "How to emphasize this in applications"
    }
  ],
  "summary": "2-3 sentence summary of the candidate's unique value proposition",
  "differentiators": ["Key differentiator"],
  "suggestions": [
    {"area": "Area to improve", "recommendation": "Specific action"}
  ]
}

Reference actual resume content. Do not fabricate information that is not present."""


def build_uniqueness_prompt(content: Dict[str, Any]) -> str:
    return f"""Analyze this resume for unique differentiators:

{format_resume_for_prompt(content)}

Identify:
1. Rare skill combinations
2. Unique career transitions
3. Distinctive experiences
4. Specialized domain expertise
5. Notable achievement patterns

Calculate a uniqueness score (0-100) and provide detailed analysis with actionable suggestions.

Return your analysis as a JSON object matching the specified schema."""


# ===== NORMALIZATION =====

def normalize_uniqueness(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fill defaults and clamp values of a raw uniqueness reply."""
    factors = []
    for index, factor in enumerate(dict_list(raw.get("factors"))):
        factors.append({
            "id": str(uuid.uuid4()),
            "type": pick(factor.get("type"), FACTOR_TYPES, "unique_experience"),
            "title": factor.get("title") or f"Factor {index + 1}",
            "description": factor.get("description") or "",
            "rarity": pick(factor.get("rarity"), RARITY_LEVELS, "uncommon"),
            "evidence": str_list(factor.get("evidence")),
            "suggestion": factor.get("suggestion") or "",
        })

    score = int(round(clamp(raw.get("score"), 0, 100, 50)))

    result = UniquenessResult(
        score=score,
        score_label=get_score_label(score),
        factors=factors,
        summary=raw.get("summary") or "Analysis complete.",
        differentiators=str_list(raw.get("differentiators")),
        suggestions=[
            {"area": s.get("area") or "General", "recommendation": s.get("recommendation") or ""}
            for s in dict_list(raw.get("suggestions"))
        ],
    )
    return result.to_api()


def analyze_uniqueness(content: Dict[str, Any]) -> Dict[str, Any]:
    """
    Analyze a resume for uniqueness factors.

    Args:
        content: Resume content dict (camelCase)

    Returns:
        UniquenessResult as an API dict

    Raises:
        UniquenessAnalysisError: AI not configured, insufficient content,
            or an LLM/parse failure
    """
    ensure_ai_configured(UniquenessAnalysisError)

    technical = (content.get("skills") or {}).get("technical") or []
    if not content.get("experiences") and not technical:
        raise UniquenessAnalysisError(
            "Resume must have experiences or skills to analyze.",
            ErrorCode.INSUFFICIENT_CONTENT,
        )

    raw = request_json(
        system_prompt=UNIQUENESS_SYSTEM_PROMPT,
        user_prompt=build_uniqueness_prompt(content),
        use_case=USE_CASE,
        error_cls=UniquenessAnalysisError,
        operation="uniqueness",
        failure_message="Failed to analyze uniqueness",
    )

    result = normalize_uniqueness(raw)
    logger.info(f"Uniqueness analysis: score={result['score']} factors={len(result['factors'])}")
    return result
