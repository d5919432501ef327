"""
JSON Utilities for LLM Response Parsing.

LLM responses often wrap JSON in markdown fences, prepend commentary, or
emit slightly malformed JSON (single quotes, trailing commas, unquoted
keys, raw newlines inside strings, truncated output). These helpers pull
the JSON payload out of the response and repair it with json-repair.
"""

import json
import re
from typing import Any, Dict

from json_repair import repair_json

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_CLOSERS = {"{": "}", "[": "]"}


def extract_json_from_response(text: str, openers: str = "{[") -> str:
    """
    Extract the JSON payload from an LLM response.

    Prefers the contents of a markdown code block; otherwise returns the
    first balanced {...} object or [...] array, whichever starts first
    (brackets inside strings are ignored). If the payload never closes,
    everything from its first bracket on is returned so the repair step
    can close it.

    Args:
        text: Raw LLM response text
        openers: Which payload kinds to look for ("{" objects, "[" arrays)

    Returns:
        The JSON candidate string

    Raises:
        ValueError: If the response has no JSON object or array at all
    """
    fence = _CODE_FENCE_RE.search(text)
    if fence:
        text = fence.group(1)

    positions = [i for i in (text.find(o) for o in openers) if i != -1]
    if not positions:
        raise ValueError(f"No JSON object found in text: {text[:200]}")
    start = min(positions)

    stack = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif stack and char == stack[-1]:
            stack.pop()
            if not stack:
                return text[start:index + 1]

    return text[start:].strip()


def _load(json_str: str) -> Any:
    try:
        return json.loads(json_str)
    except json.JSONDecodeError:
        return repair_json(json_str, return_objects=True)


def _is_object(parsed: Any) -> bool:
    """A non-empty dict, or a list whose first item is a dict."""
    if isinstance(parsed, list):
        return bool(parsed) and isinstance(parsed[0], dict)
    return isinstance(parsed, dict) and bool(parsed)


def parse_llm_json(text: str) -> Dict[str, Any]:
    """
    Parse JSON from LLM response with robust error recovery.

    Args:
        text: Raw LLM response text that may contain JSON

    Returns:
        Parsed dictionary from the JSON

    Raises:
        ValueError: If no valid JSON can be extracted or repaired

    Example:
        >>> parse_llm_json('```json\\n{"key": "value"}\\n```')
        {'key': 'value'}
        >>> parse_llm_json("{'name': 'test',}")
        {'name': 'test'}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    json_str = extract_json_from_response(text.strip())
    parsed = _load(json_str)

    if not _is_object(parsed) and json_str.startswith("[") and "{" in text:
        # a bracketed aside ahead of the real object, e.g. "[1] {...}"
        parsed = _load(extract_json_from_response(text.strip(), openers="{"))

    if isinstance(parsed, list) and parsed and isinstance(parsed[0], dict):
        # LLM sometimes wraps the object in brackets
        merged: Dict[str, Any] = {}
        for item in parsed:
            if isinstance(item, dict):
                merged.update(item)
        parsed = merged

    if not isinstance(parsed, dict) or not parsed:
        raise ValueError(
            f"Failed to parse or repair JSON. Original text (first 500 chars): {text[:500]}"
        )
    return parsed
