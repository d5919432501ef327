"""
Tests for src/services/tailor_service.py

The LLM is faked by patching invoke_llm in the shared analyzer call path.
"""

import json
from unittest.mock import patch

import pytest

from src.analyzers.prompts import RESUME_TAILORING_SYSTEM_PROMPT, build_resume_tailoring_prompt
from src.common.ai_config import AIFeatureFlags
from src.common.errors import ErrorCode, TailorError
from src.common.llm_factory import LLMError
from src.services.tailor_service import tailor_resume
from tests.helpers.factories import make_resume_content

API_JOB = {
    "id": "job-1",
    "title": "Staff Backend Engineer",
    "companyName": "Stripe",
    "description": "Build payment APIs on Kafka.",
    "requirements": ["Distributed systems"],
    "skills": ["Kafka", "Python"],
}

REPLY = {
    "summary": "Payments engineer who builds event-driven ledgers at scale.",
    "experiences": [
        {
            "id": "exp-1",
            "bullets": [
                {"id": "b-1", "text": "Led event-sourcing migration of the payments ledger"},
                {"id": "b-2", "text": "Mentored four engineers and collaborated with product on the roadmap"},
                {"id": "b-99", "text": "Invented a bullet"},
            ],
        },
        {"id": "exp-404", "bullets": [{"id": "b-3", "text": "Wrong experience"}]},
    ],
    "skills": {"technical": ["Kafka", "Rust", "python"], "soft": []},
}


@pytest.fixture
def llm_reply():
    with patch("src.analyzers.base.invoke_llm") as mock_invoke:
        def set_reply(reply):
            mock_invoke.return_value = reply if isinstance(reply, str) else json.dumps(reply)
            return mock_invoke
        yield set_reply


# ===== TESTS: Prompt =====

class TestTailoringPrompt:

    def test_system_prompt_rules(self):
        for phrase in ("fabricate", "action verb", "ATS"):
            assert phrase in RESUME_TAILORING_SYSTEM_PROMPT

    def test_optional_sections(self):
        full = build_resume_tailoring_prompt(
            make_resume_content(), "Build APIs", "Engineer", "Stripe",
            requirements=["Go"], skills=["Kafka"],
        )
        bare = build_resume_tailoring_prompt(make_resume_content(), "Build APIs", "Engineer", "Stripe")

        assert "Engineer position at Stripe" in full
        assert "## Key Requirements\n- Go" in full
        assert "## Required Skills\nKafka" in full
        assert "Key Requirements" not in bare
        assert "Required Skills" not in bare
        assert '"b-1"' in bare


# ===== TESTS: Merge =====

class TestTailorResume:

    def test_merges_known_sections(self, llm_reply):
        content = make_resume_content()
        mock_invoke = llm_reply(REPLY)

        result = tailor_resume(content, API_JOB)

        tailored = result["tailoredResume"]
        changes = result["changes"]
        assert tailored["summary"] == REPLY["summary"]
        assert changes["summaryModified"] is True
        assert changes["summaryDiff"]["before"] == "Backend engineer focused on payments infrastructure."
        # only b-1 changed; unknown bullet and experience ids ignored
        assert changes["experienceBulletsModified"] == 1
        assert changes["bulletDiffs"] == [{
            "bulletId": "b-1",
            "experienceId": "exp-1",
            "before": "Led migration of the ledger service to event sourcing",
            "after": "Led event-sourcing migration of the payments ledger",
            "changeType": "modified",
        }]
        assert tailored["experiences"][1]["bullets"][0]["text"].startswith("Reduced API latency")
        # reordered, never extended
        assert tailored["skills"]["technical"] == ["Kafka", "Python", "PostgreSQL"]
        assert tailored["skills"]["soft"] == ["Leadership", "Communication"]
        assert changes["skillsReordered"] is True
        # input untouched
        assert content["summary"] == "Backend engineer focused on payments infrastructure."
        assert mock_invoke.call_args.kwargs["temperature"] == 0.7

    def test_flags_limit_sections(self, llm_reply):
        llm_reply(REPLY)
        flags = AIFeatureFlags(
            enable_summary_generation=False,
            enable_bullet_optimization=False,
            enable_skill_extraction=False,
        )

        result = tailor_resume(make_resume_content(), API_JOB, flags=flags)

        assert result["tailoredResume"] == make_resume_content()
        assert result["changes"] == {
            "summaryModified": False,
            "summaryDiff": None,
            "experienceBulletsModified": 0,
            "bulletDiffs": [],
            "skillsReordered": False,
        }

    def test_reply_without_sections_changes_nothing(self, llm_reply):
        llm_reply({"notes": "Already well aligned."})
        result = tailor_resume(make_resume_content(), API_JOB)
        assert result["tailoredResume"] == make_resume_content()
        assert result["changes"]["summaryModified"] is False

    def test_job_without_description(self):
        with pytest.raises(TailorError) as exc_info:
            tailor_resume(make_resume_content(), dict(API_JOB, description=""))
        assert exc_info.value.code == ErrorCode.INSUFFICIENT_CONTENT

    def test_not_configured(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY")
        with pytest.raises(TailorError) as exc_info:
            tailor_resume(make_resume_content(), API_JOB)
        assert exc_info.value.code == ErrorCode.AI_NOT_CONFIGURED

    def test_llm_errors(self):
        with patch("src.analyzers.base.invoke_llm", side_effect=LLMError("weird", ErrorCode.UNKNOWN_ERROR)):
            with pytest.raises(TailorError) as exc_info:
                tailor_resume(make_resume_content(), API_JOB)
        assert exc_info.value.message == "Failed to tailor resume"

    def test_unparseable_reply(self, llm_reply):
        llm_reply("Sorry, no JSON today.")
        with pytest.raises(TailorError) as exc_info:
            tailor_resume(make_resume_content(), API_JOB)
        assert exc_info.value.code == ErrorCode.PARSE_ERROR
