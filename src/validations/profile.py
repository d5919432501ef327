"""User profile and account management schemas."""

from typing import Any, List, Literal, Optional
from urllib.parse import urlparse

from pydantic import EmailStr, Field, field_validator

from src.validations.base import ApiModel

EXPERIENCE_LEVELS = ("entry", "mid", "senior", "lead", "executive")
ExperienceLevel = Literal["entry", "mid", "senior", "lead", "executive"]

DELETE_CONFIRMATION = "DELETE MY ACCOUNT"


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _require_domain(value: Optional[str], domain: str, label: str) -> Optional[str]:
    if value is None:
        return None
    parsed = urlparse(value)
    host = (parsed.hostname or "").lower()
    if parsed.scheme not in ("http", "https") or not (host == domain or host.endswith("." + domain)):
        raise ValueError(f"Must be a valid {label} URL")
    return value


class ProfileFields(ApiModel):
    """Editable profile fields shared by read and update payloads."""

    name: Optional[str] = Field(default=None, max_length=100)
    profile_picture_url: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    job_title: Optional[str] = Field(default=None, max_length=100)
    experience_level: Optional[ExperienceLevel] = None
    skills: List[str] = Field(default_factory=list, max_length=20)
    preferred_industries: List[str] = Field(default_factory=list, max_length=10)

    @field_validator("linkedin_url", "github_url", "city", "country", "bio", "job_title", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("linkedin_url")
    @classmethod
    def validate_linkedin(cls, v: Optional[str]) -> Optional[str]:
        return _require_domain(v, "linkedin.com", "LinkedIn")

    @field_validator("github_url")
    @classmethod
    def validate_github(cls, v: Optional[str]) -> Optional[str]:
        return _require_domain(v, "github.com", "GitHub")

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: List[str]) -> List[str]:
        for skill in v:
            if len(skill) > 50:
                raise ValueError("Each skill must be 50 characters or less")
        return v


class Profile(ProfileFields):
    email: EmailStr


class ProfileUpdate(ApiModel):
    """Partial profile update. Email is changed through the users endpoint."""

    name: Optional[str] = Field(default=None, max_length=100)
    city: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    job_title: Optional[str] = Field(default=None, max_length=100)
    experience_level: Optional[ExperienceLevel] = None
    skills: Optional[List[str]] = Field(default=None, max_length=20)
    preferred_industries: Optional[List[str]] = Field(default=None, max_length=10)

    @field_validator("linkedin_url", "github_url", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("linkedin_url")
    @classmethod
    def validate_linkedin(cls, v: Optional[str]) -> Optional[str]:
        return _require_domain(v, "linkedin.com", "LinkedIn")

    @field_validator("github_url")
    @classmethod
    def validate_github(cls, v: Optional[str]) -> Optional[str]:
        return _require_domain(v, "github.com", "GitHub")

    @field_validator("skills")
    @classmethod
    def validate_skills(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        for skill in v or []:
            if len(skill) > 50:
                raise ValueError("Each skill must be 50 characters or less")
        return v


class DeleteAccountRequest(ApiModel):
    confirmation: str

    @field_validator("confirmation")
    @classmethod
    def must_confirm(cls, v: str) -> str:
        if v != DELETE_CONFIRMATION:
            raise ValueError(f'Please type "{DELETE_CONFIRMATION}" to confirm')
        return v


class DataExportRequest(ApiModel):
    format: Literal["json"] = "json"
    include_resumes: bool = True
    include_jobs: bool = True
    include_applications: bool = True
    include_settings: bool = True
