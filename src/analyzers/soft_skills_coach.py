"""
Soft Skills Coach

Runs a short behavioral interview about one soft skill. The coach asks up
to MAX_QUESTIONS questions, then rates the evidence (1-5) and writes a
resume-ready statement summarizing it.

Each turn returns a ChatResponse dict:
    {message, isComplete, questionNumber, evidenceScore, statement}
"""

import logging
from typing import Any, Dict, List, Optional

from src.analyzers.base import clamp, ensure_ai_configured, request_json
from src.common.errors import ErrorCode, SoftSkillsError
from src.validations.soft_skills import MAX_QUESTIONS, ChatResponse

logger = logging.getLogger(__name__)

USE_CASE = "soft_skills_coach"
DEFAULT_EVIDENCE_SCORE = 3


# ===== PROMPTS =====

def build_coach_system_prompt(skill_name: str) -> str:
    return f"""You are a supportive career coach running a short behavioral interview to uncover evidence of the candidate's {skill_name} skills.

## Interview Rules

- Ask one question at a time, at most {MAX_QUESTIONS} questions in total.
- Start broad ("Tell me about a time when..."), then follow up on specifics: the situation, the candidate's own actions, and measurable results.
- Keep each question to 1-2 sentences and acknowledge the previous answer briefly.
- When you have enough evidence, or after question {MAX_QUESTIONS}, finish the interview.

## Completing the Interview

Rate the evidence of {skill_name} on a 1-5 scale:
1 = Developing, 2 = Foundational, 3 = Competent, 4 = Proficient, 5 = Expert

Write a one or two sentence resume-ready statement that demonstrates the skill using only what the candidate told you.

## Output Format

Always reply with a JSON object:
{{
  "message": "Your next question, or a closing message when complete",
  "isComplete": false,
  "evidenceScore": null,
  "statement": null
}}

When complete, set "isComplete" to true and fill "evidenceScore" (1-5) and "statement"."""


START_PROMPT = "Begin the interview with your first question."
FINAL_TURN_PROMPT = (
    "That was the final question. Close the interview now: set isComplete to true "
    "and provide evidenceScore and statement."
)


# ===== CONVERSATION =====

def _question_number(value: Any, fallback: int) -> int:
    number = int(clamp(value, 1, MAX_QUESTIONS, fallback))
    return max(1, min(MAX_QUESTIONS, number))


def _to_response(raw: Dict[str, Any], question_number: int, force_complete: bool, skill_name: str) -> Dict[str, Any]:
    message = raw.get("message") or ""
    if not isinstance(message, str) or not message.strip():
        raise SoftSkillsError("No response received from AI", ErrorCode.EMPTY_RESPONSE)

    is_complete = bool(raw.get("isComplete")) or force_complete
    evidence_score: Optional[int] = None
    statement: Optional[str] = None
    if is_complete:
        evidence_score = int(round(clamp(raw.get("evidenceScore"), 1, 5, DEFAULT_EVIDENCE_SCORE)))
        statement = raw.get("statement") or f"Demonstrated {skill_name.lower()} through the examples discussed."

    return ChatResponse(
        message=message.strip(),
        is_complete=is_complete,
        question_number=question_number,
        evidence_score=evidence_score,
        statement=statement,
    ).to_api()


def start_assessment(skill_name: str) -> Dict[str, Any]:
    """
    Open an assessment with the first question.

    Args:
        skill_name: Soft skill to assess

    Returns:
        ChatResponse dict with questionNumber 1

    Raises:
        SoftSkillsError: AI not configured, empty skill, or an LLM/parse failure
    """
    ensure_ai_configured(SoftSkillsError)

    skill = (skill_name or "").strip()
    if not skill:
        raise SoftSkillsError("Skill name is required.", ErrorCode.INVALID_INPUT)

    raw = request_json(
        system_prompt=build_coach_system_prompt(skill),
        user_prompt=START_PROMPT,
        use_case=USE_CASE,
        error_cls=SoftSkillsError,
        operation="soft_skills_start",
        failure_message="Failed to start assessment",
    )

    # The opening turn is always a question
    raw = {"message": raw.get("message"), "isComplete": False}
    return _to_response(raw, 1, False, skill)


def continue_assessment(
    skill_name: str,
    conversation: List[Dict[str, str]],
    message: str,
    question_count: int,
) -> Dict[str, Any]:
    """
    Continue an assessment with the candidate's latest answer.

    Args:
        skill_name: Soft skill being assessed
        conversation: Prior turns as {"role", "content"} dicts
        message: The candidate's new answer
        question_count: Questions already asked (assistant turns so far)

    Returns:
        ChatResponse dict. Once question_count reaches MAX_QUESTIONS the
        reply is always complete with an evidence score and statement.

    Raises:
        SoftSkillsError: AI not configured or an LLM/parse failure
    """
    ensure_ai_configured(SoftSkillsError)

    force_complete = question_count >= MAX_QUESTIONS
    history = [
        {"role": turn.get("role", "user"), "content": turn.get("content", "")}
        for turn in conversation
    ]
    history.append({"role": "user", "content": message})

    raw = request_json(
        system_prompt=build_coach_system_prompt(skill_name),
        user_prompt=FINAL_TURN_PROMPT if force_complete else None,
        history=history,
        use_case=USE_CASE,
        error_cls=SoftSkillsError,
        operation="soft_skills_chat",
        failure_message="Failed to continue assessment",
    )

    is_complete = bool(raw.get("isComplete")) or force_complete
    if is_complete:
        question_number = _question_number(question_count, MAX_QUESTIONS)
    else:
        question_number = _question_number(question_count + 1, question_count + 1)

    response = _to_response(raw, question_number, force_complete, skill_name)
    logger.info(
        f"Soft skill '{skill_name}' turn: question={response['questionNumber']} "
        f"complete={response['isComplete']}"
    )
    return response
