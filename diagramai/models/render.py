"""
Render channel schemas.

Messages exchanged with a browser over the render WebSocket: outbound
validation requests and inbound render verdicts.

Dependencies: pydantic
System role: Render channel protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class RenderEventType(str, Enum):
    """Server-to-client event types."""

    CONNECTED = "connected"
    RENDER_VALIDATION_REQUEST = "render_validation_request"
    PONG = "pong"
    ERROR = "error"


class RenderClientEventType(str, Enum):
    """Client-to-server event types."""

    RENDER_VALIDATION_RESPONSE = "render_validation_response"
    PING = "ping"


class RenderEvent(BaseModel):
    """
    Envelope for every message on the render channel.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: RenderEventType
    data: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}


class ValidationRequest(BaseModel):
    """Diagram pushed to one browser for a render attempt."""

    correlation_id: str
    diagram_source: str


class ValidationVerdict(BaseModel):
    """
    Outcome of a render attempt.

    Attributes:
        correlation_id: ID of the request this verdict answers
        success: Whether the diagram rendered
        error: Renderer error message on failure
        inconclusive: True when synthesized by the server (timeout or
            unreachable browser) rather than reported by a renderer
    """

    model_config = ConfigDict(populate_by_name=True)

    correlation_id: str = Field(
        validation_alias=AliasChoices("correlation_id", "correlationId", "requestId"),
    )
    success: bool
    error: str | None = None
    inconclusive: bool = False
