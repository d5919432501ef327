"""
Tests for the recruiter readiness composite and score bands.
"""

import pytest

from src.scoring.recruiter_readiness import (
    calculate_recruiter_readiness,
    get_score_summary,
    score_context_translation,
    score_cultural_fit,
    score_customization,
    score_uniqueness,
)
from src.scoring.thresholds import (
    get_dimension_color,
    get_progress_color,
    get_readable_label,
    get_score_bg_color,
    get_score_border_color,
    get_score_color,
    get_score_emoji,
    get_score_label,
)

PRE_ANALYSIS = {
    "impact": {"score": 70},
    "uniqueness": {"score": 80, "differentiators": ["a", "b", "c"]},
    "context": {"score": 60, "keywordCoverage": {"percentage": 40}},
    "company": {"companyName": "Stripe", "isWellKnown": True},
    "softSkills": [{"skill": "leadership", "strength": "strong"}, {"skill": "communication", "strength": "moderate"}],
}


# ===== TESTS: Bands =====

class TestThresholds:
    """0-100 score bands."""

    @pytest.mark.parametrize(
        "score,label",
        [(100, "exceptional"), (90, "exceptional"), (89, "strong"), (75, "strong"), (74, "good"),
         (60, "good"), (59, "getting_there"), (45, "getting_there"), (44, "needs_work"), (0, "needs_work")],
    )
    def test_score_label(self, score, label):
        assert get_score_label(score) == label

    def test_display_helpers(self):
        assert get_readable_label("getting_there") == "Getting There"
        assert get_score_color("strong") == "text-green-500"
        assert get_score_color("bogus") == "text-red-500"
        assert get_score_emoji("bogus") == get_score_emoji("needs_work")

    def test_tailwind_classes(self):
        assert get_score_bg_color("exceptional") == "bg-amber-500/10"
        assert get_score_border_color("good") == "border-lime-500/30"
        assert get_dimension_color(50) == "text-yellow-500"
        assert get_progress_color(20) == "bg-red-500"


# ===== TESTS: Dimensions =====

class TestDimensions:
    """Per-dimension rules."""

    def test_uniqueness_bonus_capped(self):
        assert score_uniqueness({"score": 50, "differentiators": ["x"] * 10}) == 60
        assert score_uniqueness({"score": 95, "differentiators": ["x"] * 5}) == 100

    @pytest.mark.parametrize(
        "company,expected",
        [
            (None, 30),
            ({"isWellKnown": True}, 100),
            ({"isWellKnown": False, "comparable": "the Stripe of Europe"}, 80),
            ({"isWellKnown": False, "context": "Regional bank"}, 60),
            ({"isWellKnown": False, "context": ""}, 30),
        ],
    )
    def test_context_translation(self, company, expected):
        assert score_context_translation(company) == expected

    def test_cultural_fit(self):
        assert score_cultural_fit([]) == 30
        assert score_cultural_fit([{"strength": "strong"}] * 4) == 100

    def test_customization_mean(self):
        assert score_customization({"score": 80, "keywordCoverage": {"percentage": 60}}) == 70
        assert score_customization(None) == 0


# ===== TESTS: Composite =====

class TestCalculateRecruiterReadiness:
    """Weighted composite and suggestions."""

    def test_composite(self):
        score = calculate_recruiter_readiness(PRE_ANALYSIS)

        # 70*.3 + 86*.2 + 100*.15 + 70*.15 + 50*.2 = 73.7
        assert score["composite"] == 74
        assert score["label"] == "good"
        assert score["readableLabel"] == "Good"
        assert score["color"] == "text-lime-500"
        assert score["dimensions"]["uniqueness"]["raw"] == 86
        assert score["dimensions"]["contextTranslation"]["label"] == "exceptional"
        assert set(score["dimensions"]) == {"impact", "uniqueness", "contextTranslation", "culturalFit", "customization"}

    def test_suggestions_ordered_by_weighted_gap(self):
        suggestions = calculate_recruiter_readiness(PRE_ANALYSIS)["topSuggestions"]
        assert len(suggestions) == 3
        assert suggestions[0].startswith("Mirror the job's key requirements")
        assert suggestions[1].startswith("Add concrete metrics")
        assert suggestions[2].startswith("Show soft skills")

    def test_empty_pre_analysis(self):
        score = calculate_recruiter_readiness({})
        assert score["composite"] == 9
        assert score["label"] == "needs_work"

    def test_summary(self):
        summary = get_score_summary(calculate_recruiter_readiness(PRE_ANALYSIS))
        assert summary == (
            "Your resume scores 74/100 (Good). Strongest area: Context Translation. "
            "Biggest opportunity: Customization."
        )
