"""
Mermaid source sanitizer.

Strips the markdown code fences models like to wrap diagrams in.

Dependencies: re
System role: Provider output cleanup before validation
"""

import re

_OPENING_MERMAID_FENCE = re.compile(r"^```mermaid\s*", re.IGNORECASE)
_OPENING_FENCE = re.compile(r"^```\s*")
_CLOSING_FENCE = re.compile(r"\s*```$")


def sanitize_diagram_source(raw: str | None) -> str | None:
    """
    Remove leading/trailing fence markers and surrounding whitespace.

    Empty and None inputs are returned unchanged.

    Args:
        raw: Diagram source as returned by the provider

    Returns:
        str | None: Bare Mermaid source
    """
    if not raw:
        return raw

    previous = None
    cleaned = raw
    # Nested fences ("```\n```mermaid ...") need more than one pass
    while cleaned != previous:
        previous = cleaned
        cleaned = _strip_fences_once(cleaned)
    return cleaned


def _strip_fences_once(text: str) -> str:
    cleaned = text.strip()
    cleaned = _OPENING_MERMAID_FENCE.sub("", cleaned)
    cleaned = _OPENING_FENCE.sub("", cleaned)
    cleaned = _CLOSING_FENCE.sub("", cleaned)
    return cleaned.strip()
