"""
Provider response parser.

Models are asked for a bare JSON object but often add prose or code
fences around it. Extraction runs an ordered chain of strategies and the
first one that yields a JSON object wins. When every strategy fails the
caller receives a degraded draft instead of an exception.

Dependencies: json, re, diagramai.models.generation
System role: Best-effort structured output extraction
"""

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from diagramai.models.generation import DraftResult

logger = logging.getLogger(__name__)

DIAGRAM_KEYS = ("mermaidDiagram", "diagram_source", "diagram")
ANSWER_KEYS = ("chatAnswer", "explanation", "answer")

DEFAULT_DRAFT_ANSWER = "Diagram generated."
DEFAULT_REPAIR_ANSWER = "I've attempted to fix the rendering error."

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)
_GREEDY_OBJECT = re.compile(r"\{[\s\S]*\}")


def _load_object(candidate: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_whole_text(text: str) -> dict[str, Any] | None:
    """Strategy 1: the response is exactly one JSON object."""
    return _load_object(text.strip())


def parse_balanced_braces(text: str) -> dict[str, Any] | None:
    """Strategy 2: scan from the first ``{`` to its matching ``}``."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
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
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return _load_object(text[start:index + 1])
    return None


def parse_fenced_block(text: str) -> dict[str, Any] | None:
    """Strategy 3: a JSON object inside a fenced code block."""
    match = _FENCED_JSON.search(text)
    return _load_object(match.group(1)) if match else None


def parse_greedy_match(text: str) -> dict[str, Any] | None:
    """Strategy 4: everything between the first ``{`` and the last ``}``."""
    match = _GREEDY_OBJECT.search(text)
    return _load_object(match.group(0)) if match else None


PARSE_STRATEGIES: tuple[Callable[[str], dict[str, Any] | None], ...] = (
    parse_whole_text,
    parse_balanced_braces,
    parse_fenced_block,
    parse_greedy_match,
)


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """
    Run the parse strategies in order.

    Args:
        text: Raw provider output

    Returns:
        dict | None: First successfully parsed object, or None
    """
    if not text:
        return None
    for strategy in PARSE_STRATEGIES:
        parsed = strategy(text)
        if parsed is not None:
            return parsed
        logger.debug("Parse strategy failed", extra={"strategy": strategy.__name__})
    return None


def _first_string(payload: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def parse_draft_response(
    text: str | None,
    fallback_diagram: str = "",
    fallback_answer: str = DEFAULT_DRAFT_ANSWER,
) -> DraftResult:
    """
    Convert raw provider output into a DraftResult.

    Never raises: missing or unparseable fields fall back to the given
    defaults.

    Args:
        text: Raw provider output
        fallback_diagram: Diagram used when none can be extracted
        fallback_answer: Explanation used when none can be extracted

    Returns:
        DraftResult: Parsed or degraded draft
    """
    payload = extract_json_object(text)
    if payload is None:
        logger.warning(
            "No JSON object found in provider output",
            extra={"output_length": len(text or "")},
        )
        return DraftResult(diagram_source=fallback_diagram, explanation=fallback_answer)

    return DraftResult(
        diagram_source=_first_string(payload, DIAGRAM_KEYS) or fallback_diagram,
        explanation=_first_string(payload, ANSWER_KEYS) or fallback_answer,
    )
