"""Uniqueness analysis schemas."""

from typing import List, Literal

from pydantic import Field, field_validator

from src.common.repositories.documents import is_valid_uuid
from src.validations.base import ApiModel

FACTOR_TYPES = (
    "skill_combination",
    "career_transition",
    "unique_experience",
    "domain_expertise",
    "achievement",
    "education",
)
RARITY_LEVELS = ("uncommon", "rare", "very_rare")

FactorType = Literal[
    "skill_combination",
    "career_transition",
    "unique_experience",
    "domain_expertise",
    "achievement",
    "education",
]
Rarity = Literal["uncommon", "rare", "very_rare"]
UniquenessScoreLabel = Literal["low", "moderate", "high", "exceptional"]


class UniquenessRequest(ApiModel):
    resume_id: str

    @field_validator("resume_id")
    @classmethod
    def validate_resume_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid resume ID")
        return v


class UniquenessFactor(ApiModel):
    id: str
    type: FactorType
    title: str
    description: str
    rarity: Rarity
    evidence: List[str] = Field(default_factory=list)
    suggestion: str = ""


class ImprovementSuggestion(ApiModel):
    area: str
    recommendation: str


class UniquenessResult(ApiModel):
    score: int = Field(..., ge=0, le=100)
    score_label: UniquenessScoreLabel
    factors: List[UniquenessFactor] = Field(default_factory=list)
    summary: str
    differentiators: List[str] = Field(default_factory=list)
    suggestions: List[ImprovementSuggestion] = Field(default_factory=list)


def get_score_label(score: float) -> str:
    if score >= 85:
        return "exceptional"
    if score >= 65:
        return "high"
    if score >= 40:
        return "moderate"
    return "low"
