"""Job application tracking schemas and status workflow."""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field

from src.validations.base import ApiModel

APPLICATION_STATUSES = ["saved", "applied", "interviewing", "offered", "rejected"]

ApplicationStatus = Literal["saved", "applied", "interviewing", "offered", "rejected"]

STATUS_LABELS: Dict[str, str] = {
    "saved": "Saved",
    "applied": "Applied",
    "interviewing": "Interviewing",
    "offered": "Offered",
    "rejected": "Rejected",
}

STATUS_DESCRIPTIONS: Dict[str, str] = {
    "saved": "Job saved for later review",
    "applied": "Application submitted",
    "interviewing": "In the interview process",
    "offered": "Received a job offer",
    "rejected": "Application was not successful",
}

# Forward transitions; any status may also go back to "saved" or stay put.
NEXT_STATUSES: Dict[str, List[str]] = {
    "saved": ["applied", "rejected"],
    "applied": ["interviewing", "offered", "rejected"],
    "interviewing": ["offered", "rejected"],
    "offered": ["rejected"],
    "rejected": [],
}


class ApplicationCreate(ApiModel):
    job_id: str = Field(..., min_length=1)
    resume_id: Optional[str] = None
    status: ApplicationStatus = "saved"
    applied_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=5000)


class ApplicationUpdate(ApiModel):
    resume_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    applied_at: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=5000)


def get_status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def get_status_description(status: str) -> str:
    return STATUS_DESCRIPTIONS.get(status, "")


def get_next_statuses(status: str) -> List[str]:
    return list(NEXT_STATUSES.get(status, []))


def is_valid_status_transition(from_status: str, to_status: str) -> bool:
    """Check whether an application may move between two statuses."""
    if to_status == "saved" or from_status == to_status:
        return True
    return to_status in NEXT_STATUSES.get(from_status, [])
