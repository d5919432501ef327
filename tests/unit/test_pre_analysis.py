"""
Tests for src/analyzers/pre_analysis.py

The three LLM analyzers are patched in the pre_analysis namespace; the
company context and soft-skill extraction run for real.
"""

from unittest.mock import patch

import pytest

from src.analyzers.pre_analysis import (
    extract_soft_skills,
    research_company_context,
    run_pre_analysis,
    summarize_pre_analysis,
)
from src.common.errors import ErrorCode, ImpactAnalysisError, PreAnalysisError
from tests.helpers.factories import make_resume_content

API_JOB = {
    "id": "job-1",
    "title": "Staff Backend Engineer",
    "companyName": "Stripe",
    "description": "Build payment APIs.",
}

IMPACT = {"score": 70, "scoreLabel": "strong", "bullets": []}
UNIQUENESS = {"score": 80, "scoreLabel": "high", "differentiators": ["Ledger migrations", "Payments depth", "Kafka"]}
CONTEXT = {
    "score": 60,
    "scoreLabel": "moderate",
    "missingRequirements": [
        {"requirement": "Go", "importance": "critical"},
        {"requirement": "Terraform", "importance": "nice_to_have"},
    ],
    "fitAssessment": {"strengths": ["Payments"], "gaps": ["No Go experience"], "overallFit": "Good"},
    "keywordCoverage": {"percentage": 40},
}


@pytest.fixture
def analyzers():
    with patch("src.analyzers.pre_analysis.analyze_impact", return_value=IMPACT) as impact, \
            patch("src.analyzers.pre_analysis.analyze_uniqueness", return_value=UNIQUENESS) as uniqueness, \
            patch("src.analyzers.pre_analysis.analyze_context", return_value=CONTEXT) as context:
        yield {"impact": impact, "uniqueness": uniqueness, "context": context}


# ===== TESTS: Orchestrator =====

class TestRunPreAnalysis:
    """Concurrent analyses with defaults for failures."""

    def test_all_succeed(self, analyzers):
        result = run_pre_analysis(make_resume_content(), API_JOB, resume_id="resume-1")

        assert result["impact"] == IMPACT
        assert result["uniqueness"] == UNIQUENESS
        assert result["context"] == CONTEXT
        assert result["company"]["isWellKnown"] is True
        assert result["resumeId"] == "resume-1"
        assert result["jobId"] == "job-1"
        assert result["analyzedAt"]
        assert result["softSkills"]

    def test_explicit_job_id(self, analyzers):
        result = run_pre_analysis(make_resume_content(), API_JOB, job_id="other")
        assert result["jobId"] == "other"

    def test_partial_failure_uses_default(self, analyzers):
        analyzers["impact"].side_effect = ImpactAnalysisError("boom", ErrorCode.API_ERROR)

        result = run_pre_analysis(make_resume_content(), API_JOB)

        assert result["impact"]["score"] == 50
        assert result["impact"]["summary"] == "Impact analysis unavailable"
        assert result["impact"]["totalBullets"] == 3
        assert result["uniqueness"] == UNIQUENESS

    def test_all_fail(self, analyzers):
        for mock in analyzers.values():
            mock.side_effect = RuntimeError("provider down")

        with pytest.raises(PreAnalysisError) as exc_info:
            run_pre_analysis(make_resume_content(), API_JOB)

        assert exc_info.value.code == ErrorCode.ALL_ANALYSES_FAILED
        assert "Impact analysis failed" in exc_info.value.message

    def test_no_company_name(self, analyzers):
        job = {key: value for key, value in API_JOB.items() if key != "companyName"}
        assert run_pre_analysis(make_resume_content(), job)["company"] is None


# ===== TESTS: Company context =====

class TestCompanyContext:
    """Rule-based employer recognition."""

    def test_well_known_case_insensitive(self):
        context = research_company_context("  Stripe ")
        assert context["isWellKnown"] is True
        assert context["size"] == "enterprise"
        assert context["context"] == ""

    def test_unknown_company(self):
        context = research_company_context("Acme Payments")
        assert context["isWellKnown"] is False
        assert context["size"] == "unknown"
        assert context["context"] == "Acme Payments"


# ===== TESTS: Soft skills =====

class TestExtractSoftSkills:
    """Regex evidence from bullet text."""

    def test_sample_resume(self):
        skills = {s["skill"]: s for s in extract_soft_skills(make_resume_content())}

        assert skills["leadership"]["evidence"] == ["Led", "Mentored"]
        assert skills["leadership"]["strength"] == "moderate"
        assert skills["leadership"]["bulletIds"] == ["b-1", "b-2"]
        assert skills["communication"]["strength"] == "weak"
        assert "problem solving" not in skills

    def test_strongest_first(self):
        bullets = [
            {"id": f"b-{i}", "text": text}
            for i, text in enumerate(["Led the team", "Managed budgets", "Coached interns", "Directed launches", "Presented to execs"])
        ]
        content = make_resume_content(experiences=[{"id": "exp-1", "bullets": bullets}])

        skills = extract_soft_skills(content)

        assert skills[0]["skill"] == "leadership"
        assert skills[0]["strength"] == "strong"
        assert skills[-1]["strength"] == "weak"

    def test_no_experiences(self):
        assert extract_soft_skills({"experiences": []}) == []


# ===== TESTS: Summary =====

class TestSummarizePreAnalysis:
    """Weighted overview."""

    def test_weighted_score(self):
        result = {
            "impact": IMPACT,
            "uniqueness": UNIQUENESS,
            "context": CONTEXT,
            "company": {"isWellKnown": True},
            "softSkills": [{"strength": "strong"}, {"strength": "moderate"}],
        }

        summary = summarize_pre_analysis(result)

        # 70*.3 + 80*.2 + 60*.25 + 50*.1 + 100*.15
        assert summary["overallScore"] == 72
        assert summary["issueScores"] == {
            "uniqueness": 80,
            "impact": 70,
            "context": 100,
            "culturalFit": 50,
            "customization": 60,
        }
        assert summary["topStrengths"] == ["Ledger migrations", "Payments depth", "Payments"]
        assert summary["topGaps"] == ["Go", "No Go experience"]

    def test_missing_company_and_soft_skills(self):
        result = {"impact": IMPACT, "uniqueness": UNIQUENESS, "context": CONTEXT, "company": None, "softSkills": []}
        summary = summarize_pre_analysis(result)
        assert summary["issueScores"]["context"] == 50
        assert summary["issueScores"]["culturalFit"] == 50
