"""Recruiter readiness scoring."""

from .recruiter_readiness import (
    DIMENSION_WEIGHTS,
    calculate_recruiter_readiness,
    get_score_summary,
)
from .thresholds import SCORE_THRESHOLDS, get_score_label

__all__ = [
    "DIMENSION_WEIGHTS",
    "calculate_recruiter_readiness",
    "get_score_summary",
    "SCORE_THRESHOLDS",
    "get_score_label",
]
