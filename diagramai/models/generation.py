"""
Generation loop domain models.

Context handed to the generation client, drafts it produces and the
terminal outcome of one generate-validate-repair run.

Dependencies: pydantic
System role: Repair loop data contracts
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ChatRole(str, Enum):
    """Author of a chat turn."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatTurn(BaseModel):
    """Single recorded chat turn. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str


class GenerationContext(BaseModel):
    """
    Everything the generation client needs for one request.

    Attributes:
        prompt: The user's current request
        history: Prior turns, oldest first
        current_diagram: Diagram the user is editing ("" when none exists)
    """

    model_config = ConfigDict(frozen=True)

    prompt: str
    history: tuple[ChatTurn, ...] = ()
    current_diagram: str = ""

    def recent_history(self, window: int) -> tuple[ChatTurn, ...]:
        """Return the last ``window`` turns (none when window is 0)."""
        if window <= 0:
            return ()
        return self.history[-window:]


class DraftResult(BaseModel):
    """Candidate diagram plus its natural-language explanation."""

    diagram_source: str = ""
    explanation: str = ""


class LoopState(str, Enum):
    """States of the repair loop."""

    DRAFTING = "drafting"
    VALIDATING = "validating"
    FIXING = "fixing"
    DONE = "done"


class GenerationOutcome(BaseModel):
    """
    Terminal result of one generation request.

    A failed outcome still carries the best diagram produced so far.
    """

    chat_answer: str
    diagram_source: str
    success: bool
    error: str | None = None
    repair_attempts: int = Field(default=0, ge=0)
    validation_rounds: int = Field(default=0, ge=0)
