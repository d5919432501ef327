"""
LLM Factory Module.

Creates chat model instances for the configured AI provider and wraps
single-shot calls with retry and error classification. Analyzers should
call invoke_llm() rather than instantiating ChatAnthropic/ChatOpenAI
directly.

Usage:
    from src.common.llm_factory import invoke_llm

    text = invoke_llm(
        system_prompt=SYSTEM_PROMPT,
        user_prompt=build_prompt(resume),
        temperature=0.4,
        max_tokens=2500,
    )
"""

import logging
from typing import Any, Dict, List, Optional, Union

from langchain_anthropic import ChatAnthropic
from langchain_core.callbacks import BaseCallbackHandler
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.outputs import LLMResult
from langchain_openai import ChatOpenAI

from src.common.ai_config import get_ai_config
from src.common.errors import ErrorCode
from src.common.retry import RetryExhaustedError, with_retry

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Classified failure of an LLM call."""

    def __init__(self, message: str, code: str, status_code: Optional[int] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class UsageLoggingCallback(BaseCallbackHandler):
    """Logs token usage reported by the provider for each completion."""

    def __init__(self, operation: Optional[str] = None):
        self.operation = operation

    def on_llm_end(self, response: LLMResult, **kwargs: Any) -> None:
        usage = (response.llm_output or {}).get("usage") or (response.llm_output or {}).get("token_usage")
        if usage:
            logger.debug(f"LLM usage [{self.operation or 'llm'}]: {usage}")


def create_llm(
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    operation: Optional[str] = None,
    **kwargs: Any,
) -> Union[ChatAnthropic, ChatOpenAI]:
    """
    Create a chat model for the configured provider.

    Args:
        temperature: Sampling temperature (defaults to AI_TEMPERATURE)
        max_tokens: Output token cap (defaults to AI_MAX_TOKENS)
        operation: Label for usage logging
        **kwargs: Additional model parameters

    Returns:
        ChatAnthropic or ChatOpenAI instance

    Raises:
        LLMError: AI_NOT_CONFIGURED when no API key is available
    """
    try:
        config = get_ai_config()
    except ValueError as e:
        raise LLMError(
            "AI service is not configured. Please set an API key.",
            ErrorCode.AI_NOT_CONFIGURED,
        ) from e

    effective_temperature = temperature if temperature is not None else config.temperature
    effective_max_tokens = max_tokens or config.max_tokens
    callbacks = [UsageLoggingCallback(operation)]

    if config.provider == "openai":
        llm: Union[ChatAnthropic, ChatOpenAI] = ChatOpenAI(
            model=config.model,
            temperature=effective_temperature,
            max_tokens=effective_max_tokens,
            api_key=config.api_key,
            timeout=config.timeout / 1000,
            max_retries=0,
            callbacks=callbacks,
            **kwargs,
        )
    else:
        llm = ChatAnthropic(
            model=config.model,
            temperature=effective_temperature,
            max_tokens=effective_max_tokens,
            api_key=config.api_key,
            timeout=config.timeout / 1000,
            max_retries=0,
            callbacks=callbacks,
            **kwargs,
        )

    logger.debug(
        f"Created {config.provider} LLM: model={config.model}, "
        f"temperature={effective_temperature}, max_tokens={effective_max_tokens}"
    )
    return llm


def build_messages(
    system_prompt: str,
    user_prompt: Optional[str] = None,
    history: Optional[List[Dict[str, str]]] = None,
) -> List[BaseMessage]:
    """
    Build a langchain message list.

    Args:
        system_prompt: System instructions
        user_prompt: Final user turn (optional when history ends with one)
        history: Prior turns as {"role": "user"|"assistant", "content": str}
    """
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in history or []:
        if turn.get("role") == "assistant":
            messages.append(AIMessage(content=turn.get("content", "")))
        else:
            messages.append(HumanMessage(content=turn.get("content", "")))
    if user_prompt is not None:
        messages.append(HumanMessage(content=user_prompt))
    return messages


def extract_text(content: Any) -> str:
    """Flatten a message's content (str or list of content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


def classify_llm_error(error: BaseException) -> LLMError:
    """
    Map a provider exception to an LLMError.

    401 -> AUTH_ERROR, 429 -> RATE_LIMIT, any other HTTP status -> API_ERROR,
    everything else -> UNKNOWN_ERROR.
    """
    if isinstance(error, LLMError):
        return error

    root = error.last_error if isinstance(error, RetryExhaustedError) else error
    status = getattr(root, "status_code", None)

    if status == 401:
        return LLMError("Invalid AI API key", ErrorCode.AUTH_ERROR, status)
    if status == 429:
        return LLMError("AI rate limit exceeded. Please try again later.", ErrorCode.RATE_LIMIT, status)
    if isinstance(status, int):
        return LLMError(f"AI API error: {root}", ErrorCode.API_ERROR, status)
    return LLMError(str(root) or "Unknown AI error", ErrorCode.UNKNOWN_ERROR)


def invoke_llm(
    system_prompt: str,
    user_prompt: Optional[str] = None,
    history: Optional[List[Dict[str, str]]] = None,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    operation: Optional[str] = None,
) -> str:
    """
    Call the configured LLM with retry and return the response text.

    Args:
        system_prompt: System instructions
        user_prompt: User turn
        history: Prior conversation turns
        temperature: Sampling temperature
        max_tokens: Output token cap
        operation: Label for logging

    Returns:
        Response text (never empty)

    Raises:
        LLMError: Classified failure (AI_NOT_CONFIGURED, AUTH_ERROR,
            RATE_LIMIT, API_ERROR, EMPTY_RESPONSE, UNKNOWN_ERROR)
    """
    llm = create_llm(temperature=temperature, max_tokens=max_tokens, operation=operation)
    messages = build_messages(system_prompt, user_prompt, history)

    try:
        response = with_retry(lambda: llm.invoke(messages))
    except Exception as e:
        classified = classify_llm_error(e)
        logger.error(f"LLM call failed [{operation or 'llm'}]: {classified.code} {classified.message}")
        raise classified from e

    text = extract_text(response.content).strip()
    if not text:
        raise LLMError("AI returned an empty response", ErrorCode.EMPTY_RESPONSE)
    return text
