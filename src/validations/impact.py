"""Impact quantification schemas."""

from typing import Dict, List, Literal

from pydantic import Field, field_validator

from src.common.repositories.documents import is_valid_uuid
from src.validations.base import ApiModel
from src.validations.uniqueness import ImprovementSuggestion

IMPROVEMENT_LEVELS = ("none", "minor", "major", "transformed")

ImpactLevel = Literal["none", "minor", "major", "transformed"]
ImpactScoreLabel = Literal["weak", "moderate", "strong", "exceptional"]

IMPROVEMENT_LABELS: Dict[str, str] = {
    "none": "Already Quantified",
    "minor": "Minor Improvement",
    "major": "Major Improvement",
    "transformed": "Transformed",
}


class ImpactRequest(ApiModel):
    resume_id: str

    @field_validator("resume_id")
    @classmethod
    def validate_resume_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid resume ID")
        return v


class ImpactBullet(ApiModel):
    id: str
    experience_id: str
    experience_title: str
    company_name: str
    original: str
    improved: str
    metrics: List[str] = Field(default_factory=list)
    improvement: ImpactLevel
    explanation: str = ""


class MetricCategories(ApiModel):
    percentage: int = 0
    monetary: int = 0
    time: int = 0
    scale: int = 0
    other: int = 0


class ImpactResult(ApiModel):
    score: int = Field(..., ge=0, le=100)
    score_label: ImpactScoreLabel
    summary: str
    total_bullets: int = Field(..., ge=0)
    bullets_improved: int = Field(..., ge=0)
    bullets: List[ImpactBullet] = Field(default_factory=list)
    metric_categories: MetricCategories = Field(default_factory=MetricCategories)
    suggestions: List[ImprovementSuggestion] = Field(default_factory=list)


def get_impact_score_label(score: float) -> str:
    if score >= 85:
        return "exceptional"
    if score >= 65:
        return "strong"
    if score >= 40:
        return "moderate"
    return "weak"


def get_improvement_label(level: str) -> str:
    return IMPROVEMENT_LABELS.get(level, level)
