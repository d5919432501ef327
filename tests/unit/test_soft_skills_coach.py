"""
Tests for the soft skills coach conversation.

invoke_llm is mocked at src.analyzers.base.
"""

import json
from unittest.mock import patch

import pytest

from src.analyzers.soft_skills_coach import continue_assessment, start_assessment
from src.common.errors import ErrorCode, SoftSkillsError
from src.validations.soft_skills import MAX_QUESTIONS

CONVERSATION = [
    {"role": "assistant", "content": "Tell me about a time you led a team."},
]


@pytest.fixture
def mock_invoke():
    with patch("src.analyzers.base.invoke_llm") as mock:
        yield mock


def reply(mock, **payload):
    mock.return_value = json.dumps(payload)


# ===== TESTS: Start =====

class TestStartAssessment:
    """Opening question."""

    def test_first_question(self, mock_invoke):
        reply(mock_invoke, message="Tell me about a time you led a team.", isComplete=True, evidenceScore=5)

        response = start_assessment("Leadership")

        assert response == {
            "message": "Tell me about a time you led a team.",
            "isComplete": False,
            "questionNumber": 1,
            "evidenceScore": None,
            "statement": None,
        }
        assert "Leadership" in mock_invoke.call_args.kwargs["system_prompt"]

    def test_blank_skill(self, mock_invoke):
        with pytest.raises(SoftSkillsError) as exc_info:
            start_assessment("   ")
        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        mock_invoke.assert_not_called()

    def test_empty_message(self, mock_invoke):
        reply(mock_invoke, message="  ")
        with pytest.raises(SoftSkillsError) as exc_info:
            start_assessment("Leadership")
        assert exc_info.value.code == ErrorCode.EMPTY_RESPONSE

    def test_not_configured(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY")
        with pytest.raises(SoftSkillsError) as exc_info:
            start_assessment("Leadership")
        assert exc_info.value.code == ErrorCode.AI_NOT_CONFIGURED


# ===== TESTS: Continue =====

class TestContinueAssessment:
    """Follow-up turns and completion."""

    def test_next_question(self, mock_invoke):
        reply(mock_invoke, message="What was the outcome?", isComplete=False)

        response = continue_assessment("Leadership", CONVERSATION, "I led a migration.", 1)

        assert response["isComplete"] is False
        assert response["questionNumber"] == 2
        assert response["evidenceScore"] is None
        history = mock_invoke.call_args.kwargs["history"]
        assert history[-1] == {"role": "user", "content": "I led a migration."}
        assert mock_invoke.call_args.kwargs["user_prompt"] is None

    def test_model_completes_early(self, mock_invoke):
        reply(
            mock_invoke,
            message="Thanks, that is plenty.",
            isComplete=True,
            evidenceScore=4,
            statement="Led a four-person migration team to an on-time launch.",
        )

        response = continue_assessment("Leadership", CONVERSATION, "We shipped on time.", 3)

        assert response["isComplete"] is True
        assert response["questionNumber"] == 3
        assert response["evidenceScore"] == 4
        assert response["statement"].startswith("Led a four-person")

    def test_forced_completion_at_max_questions(self, mock_invoke):
        reply(mock_invoke, message="Thanks for sharing.", isComplete=False)

        response = continue_assessment("Leadership", CONVERSATION, "Final answer.", MAX_QUESTIONS)

        assert response["isComplete"] is True
        assert response["questionNumber"] == MAX_QUESTIONS
        assert response["evidenceScore"] == 3
        assert response["statement"] == "Demonstrated leadership through the examples discussed."
        assert "final question" in mock_invoke.call_args.kwargs["user_prompt"]

    def test_evidence_score_clamped(self, mock_invoke):
        reply(mock_invoke, message="Done.", isComplete=True, evidenceScore=9, statement="Led teams.")
        response = continue_assessment("Leadership", CONVERSATION, "Answer.", 2)
        assert response["evidenceScore"] == 5

    def test_unparseable_reply(self, mock_invoke):
        mock_invoke.return_value = "Let's talk about something else."
        with pytest.raises(SoftSkillsError) as exc_info:
            continue_assessment("Leadership", CONVERSATION, "Answer.", 1)
        assert exc_info.value.code == ErrorCode.PARSE_ERROR
