"""Mermaid diagram generation agent."""

from diagramai.core.agentic_system.diagram_agent.diagram_agent import DiagramAgent
from diagramai.core.agentic_system.diagram_agent.response_parser import (
    extract_json_object,
    parse_draft_response,
)

__all__ = ["DiagramAgent", "extract_json_object", "parse_draft_response"]
