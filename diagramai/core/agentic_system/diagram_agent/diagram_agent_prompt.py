"""
Diagram agent prompts.

Prompt templates for drafting a Mermaid diagram and for repairing one
that failed to render. Both ask for a JSON object with ``chatAnswer``
and ``mermaidDiagram`` keys.

Dependencies: langchain_core.prompts
System role: Prompt templates for diagram generation
"""

import logging
from pathlib import Path

from langchain_core.prompts import ChatPromptTemplate

logger = logging.getLogger(__name__)

DEFAULT_SYNTAX_GUIDE = "Use proper Mermaid.js syntax for diagrams."

RESPONSE_FORMAT = """When responding, you MUST return a JSON object with this exact structure:
{{
  "chatAnswer": "{answer_hint}",
  "mermaidDiagram": "The complete Mermaid diagram code"
}}

Do NOT wrap the mermaidDiagram value in code fences. Return ONLY the raw Mermaid code."""

DRAFT_SYSTEM_PROMPT = (
    "You are an expert at creating Mermaid diagrams. You help users create and "
    "modify diagrams based on their requests.\n\n"
    + RESPONSE_FORMAT.replace("{answer_hint}", "Your conversational response to the user")
    + """

## Instructions
1. Select the diagram type that matches the request (flowchart, sequenceDiagram,
   classDiagram, stateDiagram-v2, erDiagram, xychart-beta, ...)
2. Follow the syntax reference exactly
3. When a current diagram exists, modify it instead of starting over

## Mermaid Syntax Reference
{syntax_guide}

{current_diagram}

Recent conversation context:
{chat_history}"""
)

REPAIR_SYSTEM_PROMPT = (
    "You are an expert at creating Mermaid diagrams. You help users fix "
    "rendering errors in their diagrams.\n\n"
    + RESPONSE_FORMAT.replace("{answer_hint}", "What was wrong and how you fixed it")
    + """

## Rules
1. NEVER change the diagram type. The keyword on the first line (flowchart,
   sequenceDiagram, xychart-beta, ...) must stay exactly as it is.
2. Fix only the reported error. Make the smallest edit that lets the diagram render.
3. Keep every node, edge, label and data point unless it directly causes the error.

## Mermaid Syntax Reference
{syntax_guide}

Recent conversation context:
{chat_history}"""
)

DIAGRAM_DRAFT_PROMPT = ChatPromptTemplate.from_messages([
    ("system", DRAFT_SYSTEM_PROMPT),
    ("human", "{prompt}"),
])

DIAGRAM_REPAIR_PROMPT = ChatPromptTemplate.from_messages([
    ("system", REPAIR_SYSTEM_PROMPT),
    ("human", """The following Mermaid diagram failed to render with this error:

Error: {error}

Original diagram:
{prior_diagram}

Original request: {prompt}

Please fix the diagram so it renders correctly."""),
])


def load_syntax_guide(path: str | None) -> str:
    """
    Read the Mermaid syntax reference included in prompts.

    Args:
        path: File to read; None selects the built-in one-line guide

    Returns:
        str: Syntax guide text
    """
    if not path:
        return DEFAULT_SYNTAX_GUIDE
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(
            "Could not load syntax guide, using basic guide",
            extra={"path": path, "error_msg": str(e)},
        )
        return DEFAULT_SYNTAX_GUIDE
