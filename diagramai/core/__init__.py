"""
Core business logic module.

Contains the generation-validation-repair loop, its supporting components
and the exception hierarchy.
"""

from diagramai.core.exceptions import (
    CorrelationConflictError,
    DiagramAIException,
    GenerationError,
    RenderChannelError,
    ValidationError,
)
from diagramai.core.sanitizer import sanitize_diagram_source
from diagramai.core.validation_correlator import ValidationCorrelator

__all__ = [
    # Exceptions
    "DiagramAIException",
    "ValidationError",
    "GenerationError",
    "CorrelationConflictError",
    "RenderChannelError",
    # Business logic
    "ValidationCorrelator",
    "sanitize_diagram_source",
]
