"""Service orchestrators."""

from .diagram_service import DiagramService

__all__ = ["DiagramService"]
