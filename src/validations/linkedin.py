"""LinkedIn job search schemas."""

from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator

from src.validations.base import ApiModel

TimeFrame = Literal["1h", "24h", "1w", "1m"]
ExperienceLevel = Literal["internship", "entry_level", "associate"]


class LinkedInSearchRequest(ApiModel):
    keywords: str = Field(..., min_length=2, max_length=100)
    location: Optional[str] = Field(default=None, max_length=100)
    time_frame: TimeFrame = "24h"
    limit: int = Field(default=25, ge=1, le=25)
    experience_levels: Optional[List[ExperienceLevel]] = None

    @field_validator("keywords", mode="before")
    @classmethod
    def strip_keywords(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("location", mode="before")
    @classmethod
    def blank_location(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class LinkedInJobResult(ApiModel):
    id: str
    external_id: str
    title: str
    company_name: str
    location: Optional[str] = None
    salary: Optional[str] = None
    posted_at: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
