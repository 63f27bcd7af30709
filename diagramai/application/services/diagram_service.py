"""
Diagram service.

Turns a caller-facing generate request into a generation context and
runs it through the repair orchestrator.

Dependencies: diagramai.core.repair_orchestrator, diagramai.models
System role: Diagram generation orchestration layer
"""

import logging

from diagramai.core.exceptions import ValidationError
from diagramai.core.repair_orchestrator import RepairOrchestrator
from diagramai.models.diagram import DiagramRequest
from diagramai.models.generation import ChatTurn, GenerationContext, GenerationOutcome

logger = logging.getLogger(__name__)


class DiagramService:
    """
    Diagram generation service.

    Validates requests, builds the generation context and applies the
    global render validation switch before delegating to the orchestrator.
    """

    def __init__(
        self,
        orchestrator: RepairOrchestrator,
        validation_enabled: bool = True,
    ) -> None:
        """
        Initialize diagram service.

        Args:
            orchestrator: Repair loop shared by all requests
            validation_enabled: Global switch for browser validation
        """
        self.orchestrator = orchestrator
        self.validation_enabled = validation_enabled

    @staticmethod
    def build_context(request: DiagramRequest) -> GenerationContext:
        """
        Convert a request into an immutable generation context.

        Args:
            request: Caller-facing generate request

        Returns:
            GenerationContext: Prompt, history and current diagram
        """
        return GenerationContext(
            prompt=request.prompt.strip(),
            history=tuple(
                ChatTurn(role=message.role, content=message.content)
                for message in request.chat_history
            ),
            current_diagram=request.current_diagram or "",
        )

    async def generate(self, request: DiagramRequest) -> GenerationOutcome:
        """
        Generate a diagram for the request.

        Flow:
        1. Reject empty prompts
        2. Build generation context
        3. Run the repair loop, validating in the caller's browser when possible

        Args:
            request: Caller-facing generate request

        Returns:
            GenerationOutcome: Terminal loop result

        Raises:
            ValidationError: If the prompt is empty
        """
        if not request.prompt or not request.prompt.strip():
            raise ValidationError("Prompt is required", field="prompt")

        context = self.build_context(request)
        validate = self.validation_enabled and request.validate_render
        logger.info(
            "Generating diagram",
            extra={
                "connection_id": request.connection_id,
                "history_turns": len(context.history),
                "has_current_diagram": bool(context.current_diagram),
                "validate": validate,
            },
        )
        return await self.orchestrator.run(
            context,
            connection_id=request.connection_id,
            validate=validate,
        )
