"""
Resume schemas.

ResumeContent is the structured resume stored on each resume document
(camelCase JSON). Upload limits and the PDF file check live here too.
"""

from typing import Any, Dict, List, Optional, Tuple

from pydantic import EmailStr, Field

from src.validations.base import ApiModel

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_MIME_TYPES = ["application/pdf"]


class ContactInfo(ApiModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class BulletPoint(ApiModel):
    id: str
    text: str


class Experience(ApiModel):
    id: str
    company: str
    title: str
    location: Optional[str] = None
    start_date: str
    end_date: Optional[str] = None
    bullets: List[BulletPoint] = Field(default_factory=list)


class Education(ApiModel):
    id: str
    institution: str
    degree: str
    field: Optional[str] = None
    graduation_date: Optional[str] = None
    gpa: Optional[str] = None


class Skills(ApiModel):
    technical: List[str] = Field(default_factory=list)
    soft: List[str] = Field(default_factory=list)
    languages: Optional[List[str]] = None
    certifications: Optional[List[str]] = None


class Project(ApiModel):
    id: str
    name: str
    description: str
    technologies: List[str] = Field(default_factory=list)
    link: Optional[str] = None


class ResumeContent(ApiModel):
    """Structured resume content."""

    contact: ContactInfo
    summary: Optional[str] = None
    experiences: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    projects: Optional[List[Project]] = None


def empty_resume_content() -> Dict[str, Any]:
    """Content skeleton used when a PDF cannot be parsed by AI."""
    return {
        "contact": {"name": "", "email": ""},
        "experiences": [],
        "education": [],
        "skills": {"technical": [], "soft": []},
    }


class ResumeCreate(ApiModel):
    name: Optional[str] = Field(default=None, max_length=200)
    content: Optional[Dict[str, Any]] = None
    template_id: Optional[str] = None
    is_master: Optional[bool] = None


class ResumeUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[Dict[str, Any]] = None
    template_id: Optional[str] = None
    is_master: Optional[bool] = None


def validate_pdf_file(content_type: Optional[str], size: int) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded resume file.

    Args:
        content_type: Declared MIME type
        size: File size in bytes

    Returns:
        (valid, error message)
    """
    if content_type not in ALLOWED_MIME_TYPES:
        return False, "Only PDF files are allowed"
    if size > MAX_FILE_SIZE:
        return False, f"File size must be less than {MAX_FILE_SIZE // (1024 * 1024)}MB"
    return True, None
