"""
Score bands shared by the recruiter-readiness composite and its dimensions.

Bands:
    exceptional   90-100
    strong        75-89
    good          60-74
    getting_there 45-59
    needs_work    0-44
"""

from typing import Dict

SCORE_THRESHOLDS: Dict[str, Dict[str, int]] = {
    "exceptional": {"min": 90, "max": 100},
    "strong": {"min": 75, "max": 89},
    "good": {"min": 60, "max": 74},
    "getting_there": {"min": 45, "max": 59},
    "needs_work": {"min": 0, "max": 44},
}

READABLE_LABELS = {
    "exceptional": "Exceptional",
    "strong": "Strong",
    "good": "Good",
    "getting_there": "Getting There",
    "needs_work": "Needs Work",
}

# Tailwind palette name per band
_BAND_COLORS = {
    "exceptional": "amber",
    "strong": "green",
    "good": "lime",
    "getting_there": "yellow",
    "needs_work": "red",
}

_BAND_EMOJIS = {
    "exceptional": "🏆",
    "strong": "💪",
    "good": "👍",
    "getting_there": "📈",
    "needs_work": "🔧",
}

DIMENSION_DISPLAY_NAMES: Dict[str, Dict[str, object]] = {
    "uniqueness": {
        "name": "Uniqueness",
        "description": "What sets you apart from other candidates",
        "issueNumber": 1,
    },
    "impact": {
        "name": "Impact",
        "description": "How well your achievements are quantified",
        "issueNumber": 2,
    },
    "contextTranslation": {
        "name": "Context Translation",
        "description": "How clearly your employers and roles read to a recruiter",
        "issueNumber": 3,
    },
    "culturalFit": {
        "name": "Cultural Fit",
        "description": "Evidence of soft skills and working style",
        "issueNumber": 4,
    },
    "customization": {
        "name": "Customization",
        "description": "How closely the resume targets this job",
        "issueNumber": 5,
    },
}


def get_score_label(score: float) -> str:
    """Band for a 0-100 score."""
    if score >= SCORE_THRESHOLDS["exceptional"]["min"]:
        return "exceptional"
    if score >= SCORE_THRESHOLDS["strong"]["min"]:
        return "strong"
    if score >= SCORE_THRESHOLDS["good"]["min"]:
        return "good"
    if score >= SCORE_THRESHOLDS["getting_there"]["min"]:
        return "getting_there"
    return "needs_work"


def get_readable_label(label: str) -> str:
    return READABLE_LABELS.get(label, label)


def get_score_color(label: str) -> str:
    return f"text-{_BAND_COLORS.get(label, 'red')}-500"


def get_score_bg_color(label: str) -> str:
    return f"bg-{_BAND_COLORS.get(label, 'red')}-500/10"


def get_score_border_color(label: str) -> str:
    return f"border-{_BAND_COLORS.get(label, 'red')}-500/30"


def get_dimension_color(score: float) -> str:
    return get_score_color(get_score_label(score))


def get_progress_color(score: float) -> str:
    return f"bg-{_BAND_COLORS[get_score_label(score)]}-500"


def get_score_emoji(label: str) -> str:
    return _BAND_EMOJIS.get(label, _BAND_EMOJIS["needs_work"])
