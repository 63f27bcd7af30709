"""Domain models and API schemas."""

from diagramai.models.diagram import ChatMessage, DiagramRequest, DiagramResponse
from diagramai.models.generation import (
    ChatRole,
    ChatTurn,
    DraftResult,
    GenerationContext,
    GenerationOutcome,
    LoopState,
)
from diagramai.models.render import (
    RenderClientEventType,
    RenderEvent,
    RenderEventType,
    ValidationRequest,
    ValidationVerdict,
)

__all__ = [
    "ChatMessage",
    "ChatRole",
    "ChatTurn",
    "DiagramRequest",
    "DiagramResponse",
    "DraftResult",
    "GenerationContext",
    "GenerationOutcome",
    "LoopState",
    "RenderClientEventType",
    "RenderEvent",
    "RenderEventType",
    "ValidationRequest",
    "ValidationVerdict",
]
