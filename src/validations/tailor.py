"""
Resume tailoring schemas.

Tailoring rewrites an existing resume for one job. The change report lets
the UI show a before/after diff of every edited section.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from src.common.repositories.documents import is_valid_uuid
from src.validations.base import ApiModel


class TailorRequest(ApiModel):
    job_id: str

    @field_validator("job_id")
    @classmethod
    def validate_job_id(cls, v: str) -> str:
        if not is_valid_uuid(v):
            raise ValueError("Invalid job ID")
        return v


class TextDiff(ApiModel):
    before: str
    after: str


class BulletDiff(ApiModel):
    bullet_id: str
    experience_id: str
    before: str
    after: str
    change_type: Literal["modified"] = "modified"


class TailorChanges(ApiModel):
    summary_modified: bool = False
    summary_diff: Optional[TextDiff] = None
    experience_bullets_modified: int = Field(0, ge=0)
    bullet_diffs: List[BulletDiff] = Field(default_factory=list)
    skills_reordered: bool = False


class TailorResult(ApiModel):
    tailored_resume: Dict[str, Any]
    changes: TailorChanges
