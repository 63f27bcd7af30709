"""
Repair orchestrator.

Drives one generation request through the draft, validate and repair
states until the browser accepts the diagram or the repair budget runs out:

    DRAFTING -> VALIDATING -> (DONE | FIXING -> VALIDATING ...) -> DONE

Validation rounds for one request are strictly sequential. Provider
failures end the request immediately; render failures are repaired.
Timeouts and unreachable browsers are settled by the correlator's
fallback policy and never surface as exceptions.

Dependencies: asyncio, diagramai.core, diagramai.boundary.render_channel
System role: Generation-validation-repair loop
"""

import asyncio
import logging
import uuid
from collections.abc import Awaitable
from typing import TypeVar

from diagramai.boundary.render_channel import RenderChannel
from diagramai.core.exceptions import GenerationError
from diagramai.core.generation_client import GenerationClient
from diagramai.core.sanitizer import sanitize_diagram_source
from diagramai.core.validation_correlator import ValidationCorrelator
from diagramai.models.generation import GenerationContext, GenerationOutcome, LoopState
from diagramai.models.render import ValidationRequest, ValidationVerdict
from diagramai.observability.log_utils import log_exception_with_context, log_with_context, preview

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_REPAIR_ATTEMPTS = 40
EMPTY_DIAGRAM_ERROR = "Generated diagram is empty"
UNKNOWN_RENDER_ERROR = "Unknown rendering error"


def annotate_fixed(explanation: str, repair_attempts: int) -> str:
    """Append the repair count to an explanation."""
    if repair_attempts == 0:
        return explanation
    plural = "s" if repair_attempts != 1 else ""
    return f"{explanation} (fixed after {repair_attempts} attempt{plural})"


class RepairOrchestrator:
    """
    Generation-validation-repair loop.

    One instance serves every request; per-request state lives in run().
    The correlator is the only state shared between concurrent runs.
    """

    def __init__(
        self,
        generation_client: GenerationClient,
        correlator: ValidationCorrelator,
        render_channel: RenderChannel | None = None,
        max_repair_attempts: int = DEFAULT_MAX_REPAIR_ATTEMPTS,
        generation_timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            generation_client: Draft and repair provider
            correlator: Shared registry of pending validations
            render_channel: Browser connections; None disables validation
            max_repair_attempts: Upper bound on repair calls per request
            generation_timeout_seconds: Upper bound on each provider call
        """
        if max_repair_attempts < 0:
            raise ValueError("max_repair_attempts must be >= 0")
        self.generation_client = generation_client
        self.correlator = correlator
        self.render_channel = render_channel
        self.max_repair_attempts = max_repair_attempts
        self.generation_timeout_seconds = generation_timeout_seconds

    def can_validate(self, connection_id: str | None, validate: bool = True) -> bool:
        """Check whether a browser round trip is possible for this caller."""
        return (
            validate
            and self.render_channel is not None
            and self.render_channel.is_connected(connection_id)
        )

    async def run(
        self,
        context: GenerationContext,
        connection_id: str | None = None,
        validate: bool = True,
    ) -> GenerationOutcome:
        """
        Generate a diagram and repair it until it renders.

        Args:
            context: Prompt, history and current diagram
            connection_id: Render channel connection of the caller
            validate: False skips browser validation entirely

        Returns:
            GenerationOutcome: Terminal result; never raises for provider,
                render or channel failures
        """
        state = LoopState.DRAFTING
        diagram = ""
        explanation = ""
        last_error: str | None = None
        # True when the newest draft or repair came back empty
        candidate_empty = False
        repair_attempts = 0
        validation_rounds = 0
        outcome: GenerationOutcome | None = None

        while outcome is None:
            if state is LoopState.DRAFTING:
                try:
                    draft = await self._call_provider("draft", self.generation_client.draft(context))
                except GenerationError as e:
                    outcome = self._provider_failure(e, diagram, repair_attempts, validation_rounds)
                    continue

                diagram = sanitize_diagram_source(draft.diagram_source) or ""
                explanation = draft.explanation
                candidate_empty = not diagram
                log_with_context(
                    logger,
                    logging.INFO,
                    "Draft generated",
                    connection_id=connection_id,
                    diagram_preview=preview(diagram),
                )

                if not self.can_validate(connection_id, validate):
                    logger.info(
                        "Render validation skipped",
                        extra={"connection_id": connection_id, "requested": validate},
                    )
                    outcome = GenerationOutcome(
                        chat_answer=explanation,
                        diagram_source=diagram,
                        success=True,
                    )
                else:
                    state = LoopState.VALIDATING

            elif state is LoopState.VALIDATING:
                if candidate_empty:
                    verdict = ValidationVerdict(
                        correlation_id="",
                        success=False,
                        error=EMPTY_DIAGRAM_ERROR,
                    )
                else:
                    validation_rounds += 1
                    verdict = await self._validate_render(diagram, connection_id)

                if verdict.success:
                    outcome = GenerationOutcome(
                        chat_answer=annotate_fixed(explanation, repair_attempts),
                        diagram_source=diagram,
                        success=True,
                        repair_attempts=repair_attempts,
                        validation_rounds=validation_rounds,
                    )
                    continue

                last_error = verdict.error or UNKNOWN_RENDER_ERROR
                if verdict.inconclusive:
                    outcome = GenerationOutcome(
                        chat_answer=f"{explanation}\n\nNote: the diagram could not be verified: {last_error}",
                        diagram_source=diagram,
                        success=False,
                        error=last_error,
                        repair_attempts=repair_attempts,
                        validation_rounds=validation_rounds,
                    )
                elif repair_attempts >= self.max_repair_attempts:
                    logger.warning(
                        "Repair budget exhausted",
                        extra={
                            "connection_id": connection_id,
                            "repair_attempts": repair_attempts,
                            "error_msg": last_error,
                        },
                    )
                    outcome = GenerationOutcome(
                        chat_answer=(
                            f"{explanation}\n\nNote: After {repair_attempts} repair attempts, "
                            f"the diagram still has rendering issues: {last_error}"
                        ),
                        diagram_source=diagram,
                        success=False,
                        error=last_error,
                        repair_attempts=repair_attempts,
                        validation_rounds=validation_rounds,
                    )
                else:
                    state = LoopState.FIXING

            elif state is LoopState.FIXING:
                logger.info(
                    "Repairing diagram",
                    extra={
                        "connection_id": connection_id,
                        "attempt": repair_attempts + 1,
                        "error_msg": last_error,
                    },
                )
                try:
                    repaired = await self._call_provider(
                        "repair",
                        self.generation_client.repair(context, diagram, last_error or UNKNOWN_RENDER_ERROR),
                    )
                except GenerationError as e:
                    outcome = self._provider_failure(e, diagram, repair_attempts, validation_rounds)
                    continue

                repair_attempts += 1
                candidate = sanitize_diagram_source(repaired.diagram_source) or ""
                candidate_empty = not candidate
                if candidate:
                    diagram = candidate
                    explanation = repaired.explanation
                else:
                    # Keep the best diagram so far; the next repair still sees its source
                    logger.info(
                        "Repair returned an empty diagram",
                        extra={"connection_id": connection_id, "attempt": repair_attempts},
                    )
                state = LoopState.VALIDATING

        log_with_context(
            logger,
            logging.INFO,
            "Generation finished",
            connection_id=connection_id,
            success=outcome.success,
            repair_attempts=outcome.repair_attempts,
            validation_rounds=outcome.validation_rounds,
        )
        return outcome

    async def _validate_render(self, diagram: str, connection_id: str | None) -> ValidationVerdict:
        """One browser round trip, settled by verdict, timeout or unavailability."""
        correlation_id = str(uuid.uuid4())
        # Register before sending so an immediate verdict is never dropped
        pending = self.correlator.register(correlation_id)
        try:
            delivered = False
            if connection_id and self.render_channel is not None:
                delivered = await self.render_channel.send_validation_request(
                    connection_id,
                    ValidationRequest(correlation_id=correlation_id, diagram_source=diagram),
                )
            if not delivered:
                self.correlator.resolve_unavailable(correlation_id)
            verdict = await pending
        finally:
            self.correlator.discard(correlation_id)

        logger.info(
            "Render verdict received",
            extra={
                "correlation_id": correlation_id,
                "connection_id": connection_id,
                "success": verdict.success,
                "inconclusive": verdict.inconclusive,
            },
        )
        return verdict

    async def _call_provider(self, stage: str, call: Awaitable[T]) -> T:
        """Await a provider call, normalizing every failure to GenerationError."""
        try:
            if self.generation_timeout_seconds is None:
                return await call
            return await asyncio.wait_for(call, timeout=self.generation_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Diagram {stage} timed out after {self.generation_timeout_seconds} seconds",
                stage=stage,
            ) from e
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(str(e) or f"Failed to {stage} diagram", stage=stage) from e

    def _provider_failure(
        self,
        error: GenerationError,
        diagram: str,
        repair_attempts: int,
        validation_rounds: int,
    ) -> GenerationOutcome:
        log_exception_with_context(
            logger,
            "Generation provider failed",
            error,
            diagram_preview=preview(diagram),
        )
        return GenerationOutcome(
            chat_answer=error.message,
            diagram_source=diagram,
            success=False,
            error=error.message,
            repair_attempts=repair_attempts,
            validation_rounds=validation_rounds,
        )
