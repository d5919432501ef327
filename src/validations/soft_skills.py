"""Soft skills assessment schemas."""

from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from src.common.repositories.documents import is_valid_uuid
from src.validations.base import ApiModel

SOFT_SKILLS_LIST = [
    "Leadership",
    "Communication",
    "Problem Solving",
    "Teamwork",
    "Adaptability",
    "Time Management",
    "Critical Thinking",
    "Conflict Resolution",
    "Emotional Intelligence",
    "Creativity",
    "Decision Making",
    "Negotiation",
    "Mentoring",
    "Stakeholder Management",
    "Strategic Thinking",
]

MAX_QUESTIONS = 5

EVIDENCE_LABELS: Dict[int, str] = {
    1: "Developing",
    2: "Foundational",
    3: "Competent",
    4: "Proficient",
    5: "Expert",
}


class SurveyMessage(ApiModel):
    role: Literal["assistant", "user"]
    content: str = Field(..., min_length=1)


class StartAssessmentRequest(ApiModel):
    skill_name: str = Field(..., min_length=1, max_length=100)


class ChatRequest(ApiModel):
    skill_id: str
    message: str = Field(..., min_length=1, max_length=2000)

    @field_validator("skill_id")
    @classmethod
    def validate_skill_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid skill ID")
        return v


class ChatResponse(ApiModel):
    message: str
    is_complete: bool
    question_number: int = Field(..., ge=1, le=MAX_QUESTIONS)
    evidence_score: Optional[int] = Field(default=None, ge=1, le=5)
    statement: Optional[str] = None


class SoftSkillCreate(ApiModel):
    """Direct save of an assessment outcome."""

    skill_name: str = Field(..., min_length=1, max_length=100)
    evidence_score: Optional[int] = Field(default=None, ge=1, le=5)
    statement: Optional[str] = Field(default=None, max_length=2000)
    conversation: List[SurveyMessage] = Field(default_factory=list)


def get_evidence_label(score: Optional[int]) -> str:
    return EVIDENCE_LABELS.get(score, "Unknown") if score is not None else "Unknown"
