"""Company research schemas."""

from typing import List, Literal, Optional

from pydantic import Field, field_validator

from src.validations.base import ApiModel

CULTURE_DIMENSIONS = [
    "Work-Life Balance",
    "Innovation",
    "Collaboration",
    "Career Growth",
    "Diversity & Inclusion",
    "Compensation & Benefits",
    "Management Quality",
    "Job Security",
]

INTERVIEW_CATEGORIES = ("preparation", "technical", "behavioral", "cultural_fit", "questions_to_ask")
PRIORITIES = ("high", "medium", "low")

InterviewCategory = Literal["preparation", "technical", "behavioral", "cultural_fit", "questions_to_ask"]
Priority = Literal["high", "medium", "low"]


class CompanyResearchRequest(ApiModel):
    company_name: str = Field(..., min_length=1, max_length=200)

    @field_validator("company_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Company name is required")
        return v


class CompanyProcessRequest(CompanyResearchRequest):
    request_id: str = Field(..., min_length=1)


class CultureDimension(ApiModel):
    dimension: str
    score: float = Field(..., ge=1, le=5)
    description: str = ""


class GlassdoorData(ApiModel):
    overall_rating: Optional[float] = Field(default=None, ge=1, le=5)
    pros: List[str] = Field(default_factory=list)
    cons: List[str] = Field(default_factory=list)
    recommend_to_friend: Optional[str] = None
    ceo_approval: Optional[str] = None


class FundingRound(ApiModel):
    round: str = ""
    amount: Optional[str] = None
    date: Optional[str] = None
    investors: Optional[List[str]] = None


class FundingData(ApiModel):
    stage: Optional[str] = None
    total_raised: Optional[str] = None
    valuation: Optional[str] = None
    last_round: Optional[FundingRound] = None
    notable_investors: List[str] = Field(default_factory=list)


class Competitor(ApiModel):
    name: str
    relationship: str


class InterviewTip(ApiModel):
    category: InterviewCategory
    tip: str
    priority: Priority


class ValueAlignment(ApiModel):
    value: str
    how_to_demo: str


class CompanyResearchResult(ApiModel):
    company_name: str
    industry: str
    summary: str
    founded: Optional[str] = None
    headquarters: Optional[str] = None
    employee_count: Optional[str] = None
    website: Optional[str] = None
    culture_dimensions: List[CultureDimension] = Field(default_factory=list)
    culture_overview: str = ""
    glassdoor_data: GlassdoorData = Field(default_factory=GlassdoorData)
    funding_data: FundingData = Field(default_factory=FundingData)
    competitors: List[Competitor] = Field(default_factory=list)
    interview_tips: List[InterviewTip] = Field(default_factory=list)
    common_interview_topics: List[str] = Field(default_factory=list)
    core_values: List[str] = Field(default_factory=list)
    values_alignment: List[ValueAlignment] = Field(default_factory=list)
    key_takeaways: List[str] = Field(default_factory=list)


def get_culture_score_label(score: float) -> str:
    if score >= 4.5:
        return "Excellent"
    if score >= 3.5:
        return "Good"
    if score >= 2.5:
        return "Average"
    if score >= 1.5:
        return "Below Average"
    return "Poor"
