"""
Company Researcher

Produces a company intelligence report for job seekers: overview, culture
ratings across eight dimensions, employee sentiment, funding, competitors,
interview preparation tips and values alignment.
"""

import logging
from typing import Any, Dict, Optional

from src.analyzers.base import clamp, dict_list, ensure_ai_configured, pick, request_json, str_list
from src.common.errors import CompanyResearchError, ErrorCode
from src.validations.company import INTERVIEW_CATEGORIES, PRIORITIES, CompanyResearchResult

logger = logging.getLogger(__name__)

USE_CASE = "company_research"


# ===== PROMPTS =====

COMPANY_RESEARCH_SYSTEM_PROMPT = """You are an expert career research analyst with comprehensive knowledge of companies, industries and hiring practices. You provide actionable company intelligence that helps job seekers prepare for interviews and understand company culture.

## Research Framework

1. Company Overview: industry, market position, founding, size, headquarters, recent developments
2. Culture Analysis on a 1-5 scale for each dimension:
   - Work-Life Balance
   - Innovation
   - Collaboration
   - Career Growth
   - Diversity & Inclusion
   - Compensation & Benefits
   - Management Quality
   - Job Security
3. Employee Sentiment: overall rating (1-5), common pros and cons, CEO approval, recommendation to friends
4. Funding & Business Status: stage, total raised, investors, valuation
5. Competitive Landscape: direct competitors and how they relate
6. Interview Preparation: common topics, technical and behavioral themes, questions to ask
7. Values Alignment: core values and how to demonstrate them in interviews

## Output Format

Return a JSON object:
{
  "companyName": "Official company name",
  "industry": "Primary industry",
  "summary": "2-3 sentence company overview",
  "founded": "Year or approximate",
  "headquarters": "City, Country",
  "employeeCount": "Approximate range",
  "website": "URL if known",
  "cultureDimensions": [
    {"dimension": "Work-Life Balance", "score": 3.5, "description": "Brief explanation"}
  ],
  "cultureOverview": "Summary of company culture",
  "glassdoorData": {
    "overallRating": 3.8,
    "pros": ["Pro"],
    "cons": ["Con"],
    "recommendToFriend": "percentage or sentiment",
    "ceoApproval": "percentage or sentiment"
  },
  "fundingData": {
    "stage": "Series B / Public / Private",
    "totalRaised": "$X million",
    "valuation": "$X billion or N/A",
    "lastRound": {"round": "Series name", "amount": "$X million", "date": "Year", "investors": ["Investor"]},
    "notableInvestors": ["Investor"]
  },
  "competitors": [
    {"name": "Competitor name", "relationship": "Direct competitor in X"}
  ],
  "interviewTips": [
    {
      "category": "preparation" | "technical" | "behavioral" | "cultural_fit" | "questions_to_ask",
      "tip": "Specific actionable tip",
      "priority": "high" | "medium" | "low"
    }
  ],
  "commonInterviewTopics": ["Topic"],
  "coreValues": ["Value"],
  "valuesAlignment": [
    {"value": "Company value", "howToDemo": "How to demonstrate this in an interview"}
  ],
  "keyTakeaways": ["Key insight"]
}

Base assessments on publicly available information. When something is unknown or uncertain, say so instead of inventing details."""


def build_company_research_prompt(company_name: str) -> str:
    return f"""Research the following company and provide a comprehensive intelligence report:

**Company:** {company_name}

Please provide:
1. Company overview and basic information
2. Culture analysis across 8 key dimensions (1-5 ratings)
3. Employee insights (pros, cons, ratings)
4. Funding and business status
5. Competitive landscape
6. Interview preparation tips (prioritized by importance)
7. Core values and how to demonstrate alignment
8. Key takeaways for job seekers

Return your analysis as a JSON object matching the specified schema."""


# ===== NORMALIZATION =====

def _opt_str(value: Any) -> Optional[str]:
    """Non-empty values as strings (LLMs often return years as numbers)."""
    if value is None or value == "" or isinstance(value, (dict, list)):
        return None
    return str(value)


def _funding(raw: Any) -> Dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    last = raw.get("lastRound")
    last_round = None
    if isinstance(last, dict):
        investors = last.get("investors")
        last_round = {
            "round": _opt_str(last.get("round")) or "",
            "amount": _opt_str(last.get("amount")),
            "date": _opt_str(last.get("date")),
            "investors": str_list(investors) if investors is not None else None,
        }
    return {
        "stage": _opt_str(raw.get("stage")),
        "total_raised": _opt_str(raw.get("totalRaised")),
        "valuation": _opt_str(raw.get("valuation")),
        "last_round": last_round,
        "notable_investors": str_list(raw.get("notableInvestors")),
    }


def _glassdoor(raw: Any) -> Dict[str, Any]:
    raw = raw if isinstance(raw, dict) else {}
    rating = raw.get("overallRating")
    has_rating = isinstance(rating, (int, float)) and not isinstance(rating, bool) and rating
    return {
        "overall_rating": max(1, min(5, rating)) if has_rating else None,
        "pros": str_list(raw.get("pros")),
        "cons": str_list(raw.get("cons")),
        "recommend_to_friend": _opt_str(raw.get("recommendToFriend")),
        "ceo_approval": _opt_str(raw.get("ceoApproval")),
    }


def normalize_company_research(raw: Dict[str, Any], company_name: str) -> Dict[str, Any]:
    """Fill defaults and clamp ratings of a raw company research reply."""
    result = CompanyResearchResult(
        company_name=raw.get("companyName") or company_name,
        industry=raw.get("industry") or "Unknown",
        summary=raw.get("summary") or "Company research complete.",
        founded=_opt_str(raw.get("founded")),
        headquarters=_opt_str(raw.get("headquarters")),
        employee_count=_opt_str(raw.get("employeeCount")),
        website=_opt_str(raw.get("website")),
        culture_dimensions=[
            {
                "dimension": d.get("dimension") or "Unknown",
                "score": clamp(d.get("score"), 1, 5, 3),
                "description": d.get("description") or "",
            }
            for d in dict_list(raw.get("cultureDimensions"))
        ],
        culture_overview=raw.get("cultureOverview") or "",
        glassdoor_data=_glassdoor(raw.get("glassdoorData")),
        funding_data=_funding(raw.get("fundingData")),
        competitors=[
            {"name": c.get("name") or "Unknown", "relationship": c.get("relationship") or "Competitor"}
            for c in dict_list(raw.get("competitors"))
        ],
        interview_tips=[
            {
                "category": pick(t.get("category"), INTERVIEW_CATEGORIES, "preparation"),
                "tip": t.get("tip") or "",
                "priority": pick(t.get("priority"), PRIORITIES, "medium"),
            }
            for t in dict_list(raw.get("interviewTips"))
        ],
        common_interview_topics=str_list(raw.get("commonInterviewTopics")),
        core_values=str_list(raw.get("coreValues")),
        values_alignment=[
            {"value": v.get("value") or "", "how_to_demo": v.get("howToDemo") or ""}
            for v in dict_list(raw.get("valuesAlignment"))
        ],
        key_takeaways=str_list(raw.get("keyTakeaways")),
    )
    return result.to_api()


def research_company(company_name: str) -> Dict[str, Any]:
    """
    Research a company and generate an intelligence report.

    Args:
        company_name: Company to research

    Returns:
        CompanyResearchResult as an API dict

    Raises:
        CompanyResearchError: AI not configured, empty name, or an LLM/parse failure
    """
    ensure_ai_configured(CompanyResearchError)

    name = (company_name or "").strip()
    if not name:
        raise CompanyResearchError("Company name is required.", ErrorCode.INVALID_INPUT)

    raw = request_json(
        system_prompt=COMPANY_RESEARCH_SYSTEM_PROMPT,
        user_prompt=build_company_research_prompt(name),
        use_case=USE_CASE,
        error_cls=CompanyResearchError,
        operation="company_research",
        failure_message="Failed to research company",
    )

    result = normalize_company_research(raw, name)
    logger.info(f"Company research complete: {result['companyName']} ({result['industry']})")
    return result
