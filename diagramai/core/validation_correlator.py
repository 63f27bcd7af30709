"""
Validation correlator.

Process-wide registry that pairs an outbound render validation request
with the verdict a browser eventually pushes back over the render channel.
Each pending entry is settled exactly once, by whichever comes first:
the verdict, the timeout, or the channel reporting the browser unreachable.

Keys are uuid4 correlation IDs, so concurrent repair loops never contend
for the same entry and no lock is required on the event loop.

Dependencies: asyncio, diagramai.models.render
System role: Push-to-await bridge for render verdicts
"""

import asyncio
import logging
from dataclasses import dataclass

from diagramai.core.exceptions import CorrelationConflictError
from diagramai.models.render import ValidationVerdict

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass
class PendingValidation:
    """Completion handle and timeout handle for one outstanding validation."""

    future: asyncio.Future
    timeout_handle: asyncio.TimerHandle


class ValidationCorrelator:
    """
    Registry of in-flight render validations keyed by correlation ID.

    Unanswered validations fall back to a synthesized verdict. With the
    default optimistic policy that verdict is a success, so an unresponsive
    browser never stalls the user; with optimistic_fallback=False it is a
    failure flagged as inconclusive.

    Attributes:
        timeout_seconds: Seconds to wait for a verdict
        optimistic_fallback: Whether synthesized verdicts count as success
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        optimistic_fallback: bool = True,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.optimistic_fallback = optimistic_fallback
        self._pending: dict[str, PendingValidation] = {}

    @property
    def pending_count(self) -> int:
        """Number of validations awaiting a verdict."""
        return len(self._pending)

    def is_pending(self, correlation_id: str) -> bool:
        """Check whether a correlation ID is awaiting a verdict."""
        return correlation_id in self._pending

    def register(self, correlation_id: str) -> asyncio.Future:
        """
        Start tracking a validation and arm its timeout.

        Must be called from a running event loop.

        Args:
            correlation_id: Unique ID carried by the outbound request

        Returns:
            asyncio.Future: Completes with the ValidationVerdict

        Raises:
            CorrelationConflictError: If the ID is already pending
        """
        if correlation_id in self._pending:
            raise CorrelationConflictError(correlation_id)

        loop = asyncio.get_running_loop()
        future = loop.create_future()
        timeout_handle = loop.call_later(
            self.timeout_seconds,
            self._on_timeout,
            correlation_id,
        )
        self._pending[correlation_id] = PendingValidation(
            future=future,
            timeout_handle=timeout_handle,
        )
        logger.debug(
            "Validation registered",
            extra={"correlation_id": correlation_id, "pending": len(self._pending)},
        )
        return future

    def resolve(self, correlation_id: str, verdict: ValidationVerdict) -> bool:
        """
        Settle a pending validation with a verdict from the browser.

        Late and duplicate verdicts are expected and silently dropped.

        Args:
            correlation_id: ID the verdict answers
            verdict: Render outcome reported by the browser

        Returns:
            bool: True if a pending validation was settled
        """
        pending = self._pending.pop(correlation_id, None)
        if pending is None:
            logger.debug(
                "Dropping verdict for unknown or settled validation",
                extra={"correlation_id": correlation_id},
            )
            return False

        pending.timeout_handle.cancel()
        if not pending.future.done():
            pending.future.set_result(verdict)
        logger.debug(
            "Validation resolved",
            extra={"correlation_id": correlation_id, "success": verdict.success},
        )
        return True

    def resolve_unavailable(self, correlation_id: str) -> bool:
        """
        Settle a validation immediately because its browser cannot be reached.

        Args:
            correlation_id: ID of the undeliverable request

        Returns:
            bool: True if a pending validation was settled
        """
        return self._settle_with_fallback(correlation_id, "render connection unavailable")

    def discard(self, correlation_id: str) -> None:
        """Forget a pending validation whose awaiter has gone away."""
        pending = self._pending.pop(correlation_id, None)
        if pending is None:
            return
        pending.timeout_handle.cancel()
        if not pending.future.done():
            pending.future.cancel()

    def clear(self) -> None:
        """Discard every pending validation. Used on shutdown."""
        for correlation_id in list(self._pending):
            self.discard(correlation_id)

    def _on_timeout(self, correlation_id: str) -> None:
        if self._settle_with_fallback(correlation_id, "no render verdict received in time"):
            logger.info(
                "Validation timed out",
                extra={
                    "correlation_id": correlation_id,
                    "timeout_seconds": self.timeout_seconds,
                    "optimistic": self.optimistic_fallback,
                },
            )

    def _settle_with_fallback(self, correlation_id: str, reason: str) -> bool:
        pending = self._pending.pop(correlation_id, None)
        if pending is None:
            return False

        pending.timeout_handle.cancel()
        if not pending.future.done():
            pending.future.set_result(self._fallback_verdict(correlation_id, reason))
        return True

    def _fallback_verdict(self, correlation_id: str, reason: str) -> ValidationVerdict:
        if self.optimistic_fallback:
            return ValidationVerdict(
                correlation_id=correlation_id,
                success=True,
                inconclusive=True,
            )
        return ValidationVerdict(
            correlation_id=correlation_id,
            success=False,
            error=f"Render validation inconclusive: {reason}",
            inconclusive=True,
        )
