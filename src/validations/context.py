"""
Context analysis schemas.

A context analysis compares a resume against a job posting: which skills
match, which requirements are missing, and how each experience aligns.
"""

from typing import List, Literal, Optional

from pydantic import Field, field_validator

from src.common.repositories.documents import is_valid_uuid
from src.validations.base import ApiModel

ContextScoreLabel = Literal["excellent", "good", "moderate", "weak", "poor"]


class ContextRequest(ApiModel):
    resume_id: str
    job_id: str

    @field_validator("resume_id")
    @classmethod
    def validate_resume_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid resume ID")
        return v

    @field_validator("job_id")
    @classmethod
    def validate_job_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid job ID")
        return v


class MatchedSkill(ApiModel):
    skill: str
    source: Literal["technical", "soft", "experience", "education"]
    strength: Literal["exact", "related", "transferable"]
    evidence: str


class MissingRequirement(ApiModel):
    requirement: str
    importance: Literal["critical", "important", "nice_to_have"]
    suggestion: str


class ExperienceAlignment(ApiModel):
    experience_id: str
    experience_title: str
    company_name: str
    relevance: Literal["high", "medium", "low"]
    matched_aspects: List[str] = Field(default_factory=list)
    explanation: str


class KeywordMatch(ApiModel):
    keyword: str
    found: bool
    location: Optional[str] = None


class KeywordCoverage(ApiModel):
    matched: int = Field(..., ge=0)
    total: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0, le=100)
    keywords: List[KeywordMatch] = Field(default_factory=list)


class ContextSuggestion(ApiModel):
    category: Literal["skills", "experience", "keywords", "tailoring"]
    priority: Literal["high", "medium", "low"]
    recommendation: str


class FitAssessment(ApiModel):
    strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    overall_fit: str = ""


class ContextResult(ApiModel):
    score: int = Field(..., ge=0, le=100)
    score_label: ContextScoreLabel
    summary: str
    matched_skills: List[MatchedSkill] = Field(default_factory=list)
    missing_requirements: List[MissingRequirement] = Field(default_factory=list)
    experience_alignments: List[ExperienceAlignment] = Field(default_factory=list)
    keyword_coverage: KeywordCoverage
    suggestions: List[ContextSuggestion] = Field(default_factory=list)
    fit_assessment: FitAssessment


def get_context_score_label(score: float) -> str:
    if score >= 85:
        return "excellent"
    if score >= 70:
        return "good"
    if score >= 50:
        return "moderate"
    if score >= 30:
        return "weak"
    return "poor"
