"""
Shared LLM call path for analyzers.

Every analyzer follows the same steps: check AI configuration, call the
model, extract JSON from the reply and normalize it. This module owns the
call and parse steps and maps failures onto the analyzer's error class.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from src.common.ai_config import get_model_config, is_ai_configured
from src.common.errors import AnalysisError, ErrorCode
from src.common.json_utils import parse_llm_json
from src.common.llm_factory import LLMError, invoke_llm

logger = logging.getLogger(__name__)


def ensure_ai_configured(error_cls: Type[AnalysisError]) -> None:
    """Raise AI_NOT_CONFIGURED when no provider key is set."""
    if not is_ai_configured():
        raise error_cls("AI is not configured. Please set your API key.", ErrorCode.AI_NOT_CONFIGURED)


def request_json(
    *,
    system_prompt: str,
    user_prompt: Optional[str],
    use_case: str,
    error_cls: Type[AnalysisError],
    operation: str,
    failure_message: str,
    history: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    """
    Call the LLM and parse its reply as a JSON object.

    Args:
        system_prompt: System instructions
        user_prompt: User turn (None when history ends with one)
        use_case: MODEL_CONFIGS key supplying temperature and max tokens
        error_cls: Analyzer error class to raise
        operation: Label for logs
        failure_message: Message for unclassified failures
        history: Prior conversation turns

    Returns:
        Parsed JSON object

    Raises:
        AnalysisError subclass with code EMPTY_RESPONSE, PARSE_ERROR,
        AUTH_ERROR, RATE_LIMIT, API_ERROR, AI_NOT_CONFIGURED or UNKNOWN_ERROR
    """
    settings = get_model_config(use_case)
    try:
        text = invoke_llm(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            history=history,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            operation=operation,
        )
    except LLMError as e:
        if e.code == ErrorCode.EMPTY_RESPONSE:
            raise error_cls("No response received from AI", ErrorCode.EMPTY_RESPONSE, e) from e
        if e.code == ErrorCode.UNKNOWN_ERROR:
            raise error_cls(failure_message, ErrorCode.UNKNOWN_ERROR, e) from e
        raise error_cls(e.message, e.code, e) from e
    except AnalysisError:
        raise
    except Exception as e:
        logger.exception(f"{operation} failed")
        raise error_cls(failure_message, ErrorCode.UNKNOWN_ERROR, e) from e

    try:
        return parse_llm_json(text)
    except ValueError as e:
        logger.warning(f"{operation}: unparseable response ({len(text)} chars)")
        raise error_cls("Failed to parse AI response", ErrorCode.PARSE_ERROR, e) from e


def pick(value: Any, allowed: Any, default: Any) -> Any:
    """Return value if it is one of the allowed options, else default."""
    return value if value in allowed else default


def clamp(value: Any, low: float, high: float, default: float) -> float:
    """Clamp a numeric value; non-numbers and zero fall back to default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return default
    return max(low, min(high, value))


def str_list(value: Any) -> list:
    """Keep only string items of a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def dict_list(value: Any) -> list:
    """Keep only dict items of a list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
