"""Tests for Mermaid source fence stripping."""

import pytest

from diagramai.core.sanitizer import sanitize_diagram_source


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("```mermaid\nflowchart TD\n  A --> B\n```", "flowchart TD\n  A --> B"),
        ("```MERMAID\ngraph LR\n  A --> B\n```", "graph LR\n  A --> B"),
        ("```\nsequenceDiagram\n  A->>B: hi\n```", "sequenceDiagram\n  A->>B: hi"),
        ("  \n flowchart TD\n  A --> B  \n", "flowchart TD\n  A --> B"),
        ("flowchart TD\n  A --> B", "flowchart TD\n  A --> B"),
        ("```mermaid flowchart TD; A-->B```", "flowchart TD; A-->B"),
    ],
)
def test_sanitize_strips_fences_and_whitespace(raw: str, expected: str) -> None:
    assert sanitize_diagram_source(raw) == expected


def test_sanitize_returns_empty_and_none_unchanged() -> None:
    assert sanitize_diagram_source("") == ""
    assert sanitize_diagram_source(None) is None


def test_sanitize_keeps_inner_code_fences_untouched() -> None:
    raw = "flowchart TD\n  A[```] --> B"
    assert sanitize_diagram_source(raw) == raw


@pytest.mark.parametrize(
    "raw",
    [
        "```mermaid\n```mermaid\nflowchart TD\n```\n```",
        "```\n```\nA",
        "``````",
        "```",
        "   ```mermaid   ",
        "plain text",
        "x```",
    ],
)
def test_sanitize_is_idempotent(raw: str) -> None:
    once = sanitize_diagram_source(raw)
    assert sanitize_diagram_source(once) == once


def test_sanitize_removes_nested_fences() -> None:
    assert sanitize_diagram_source("```\n```mermaid\nflowchart TD\n```\n```") == "flowchart TD"
