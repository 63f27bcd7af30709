"""
Diagram generation API schemas.

Request/response schemas for the generate endpoint. Camel-case field
names sent by the browser client are accepted alongside snake_case.

Dependencies: pydantic
System role: Diagram generation API contracts
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from diagramai.models.generation import ChatRole, GenerationOutcome


class ChatMessage(BaseModel):
    """Single chat message supplied by the caller."""

    role: ChatRole = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")


class DiagramRequest(BaseModel):
    """Request schema for diagram generation."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(description="Natural-language description of the diagram")
    chat_history: list[ChatMessage] = Field(
        default_factory=list,
        validation_alias=AliasChoices("chat_history", "chatHistory"),
        description="Prior conversation, oldest first",
    )
    current_diagram: str | None = Field(
        default=None,
        validation_alias=AliasChoices("current_diagram", "currentDiagram"),
        description="Diagram currently shown to the user",
    )
    connection_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("connection_id", "connectionId", "socketId"),
        description="Render channel connection used for browser validation",
    )
    validate_render: bool = Field(
        default=True,
        validation_alias=AliasChoices("validate_render", "validateRender"),
        description="Validate the diagram in the browser before answering",
    )


class DiagramResponse(BaseModel):
    """Response schema for diagram generation."""

    chat_answer: str
    diagram_source: str
    success: bool
    error: str | None = None
    repair_attempts: int = 0
    validation_rounds: int = 0

    @classmethod
    def from_outcome(cls, outcome: GenerationOutcome) -> "DiagramResponse":
        """Build the HTTP response from a loop outcome."""
        return cls(**outcome.model_dump())
