"""Job posting schemas."""

from datetime import datetime
from typing import Any, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import Field, HttpUrl, field_validator

from src.validations.base import ApiModel

JOB_PLATFORMS = (
    "linkedin",
    "indeed",
    "glassdoor",
    "greenhouse",
    "lever",
    "workday",
    "icims",
    "smartrecruiters",
    "manual",
)

JobPlatform = Literal[
    "linkedin",
    "indeed",
    "glassdoor",
    "greenhouse",
    "lever",
    "workday",
    "icims",
    "smartrecruiters",
    "manual",
]


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class SalaryRange(ApiModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "USD"


class JobCreate(ApiModel):
    """Payload for creating a job (manual entry or import)."""

    platform: JobPlatform = "manual"
    external_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=200)
    company_id: Optional[str] = None
    company_name: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, min_length=10, max_length=50000)
    requirements: List[str] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    salary: Optional[Union[SalaryRange, str]] = None
    url: Optional[str] = None
    posted_at: Optional[datetime] = None

    @field_validator("company_name", "location", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("salary", mode="before")
    @classmethod
    def validate_salary(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not v.strip():
                return None
            if len(v) > 100:
                raise ValueError("Salary must be 100 characters or less")
        return v

    @field_validator("url", mode="before")
    @classmethod
    def invalid_url_to_none(cls, v: Any) -> Any:
        if not isinstance(v, str) or not _is_http_url(v.strip()):
            return None
        return v.strip()


class JobUpdate(ApiModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    company_name: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=50000)
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    salary: Optional[Union[SalaryRange, str]] = None


class JobUrlImport(ApiModel):
    url: HttpUrl
