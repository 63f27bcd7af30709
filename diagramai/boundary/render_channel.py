"""
Render channel.

Tracks the open render WebSockets by connection ID. Validation requests
are pushed to exactly one addressed connection, and only that connection
may answer them. Validations still outstanding on a connection that goes
away are settled at once through the correlator's fallback policy.

Dependencies: fastapi, starlette, diagramai.core.validation_correlator
System role: Browser render round-trip transport
"""

import logging
import uuid
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError
from starlette.websockets import WebSocketState

from diagramai.core.exceptions import RenderChannelError
from diagramai.core.validation_correlator import ValidationCorrelator
from diagramai.models.render import (
    RenderEvent,
    RenderEventType,
    ValidationRequest,
    ValidationVerdict,
)

logger = logging.getLogger(__name__)


class RenderChannel:
    """
    Registry of connected render clients.

    Never broadcasts: every outbound message names its target connection.
    """

    def __init__(self, correlator: ValidationCorrelator) -> None:
        """
        Initialize the channel.

        Args:
            correlator: Registry that receives inbound verdicts
        """
        self.correlator = correlator
        self._connections: dict[str, WebSocket] = {}
        # connection ID -> correlation IDs sent to it and not yet answered
        self._outstanding: dict[str, set[str]] = {}

    @property
    def connection_count(self) -> int:
        """Number of connected render clients."""
        return len(self._connections)

    def outstanding(self, connection_id: str) -> frozenset[str]:
        """Correlation IDs sent to a connection and still awaiting its verdict."""
        return frozenset(self._outstanding.get(connection_id, ()))

    def connect(self, websocket: WebSocket, connection_id: str | None = None) -> str:
        """
        Register an accepted WebSocket.

        A socket taking over the ID of a dead one releases the dead
        socket's outstanding validations.

        Args:
            websocket: Accepted WebSocket connection
            connection_id: Optional explicit ID (generated when omitted)

        Returns:
            str: Connection ID the browser must send with generate requests
        """
        connection_id = connection_id or str(uuid.uuid4())
        previous = self._connections.get(connection_id)
        if previous is not None and previous is not websocket:
            self._release(connection_id, "render connection replaced")

        self._connections[connection_id] = websocket
        logger.info(
            "Render client connected",
            extra={"connection_id": connection_id, "connections": len(self._connections)},
        )
        return connection_id

    def disconnect(self, connection_id: str, websocket: WebSocket | None = None) -> None:
        """
        Forget a connection and settle its outstanding validations.

        Args:
            connection_id: Connection to remove (unknown IDs are ignored)
            websocket: If given, only remove the connection while it is
                still bound to this socket
        """
        current = self._connections.get(connection_id)
        if current is None:
            return
        if websocket is not None and current is not websocket:
            logger.debug(
                "Ignoring disconnect of a replaced socket",
                extra={"connection_id": connection_id},
            )
            return

        del self._connections[connection_id]
        self._release(connection_id, "render connection closed")
        logger.info(
            "Render client disconnected",
            extra={"connection_id": connection_id, "connections": len(self._connections)},
        )

    def is_connected(self, connection_id: str | None) -> bool:
        """Check whether a connection ID is addressable."""
        if not connection_id:
            return False
        websocket = self._connections.get(connection_id)
        return websocket is not None and websocket.client_state == WebSocketState.CONNECTED

    async def send_validation_request(
        self,
        connection_id: str,
        request: ValidationRequest,
    ) -> bool:
        """
        Push a diagram to one browser for a render attempt.

        Args:
            connection_id: Target connection
            request: Diagram and correlation ID to send

        Returns:
            bool: False if the connection is gone or the send failed
        """
        websocket = self._connections.get(connection_id)
        if websocket is None:
            logger.info(
                "Render target not connected",
                extra={"connection_id": connection_id, "correlation_id": request.correlation_id},
            )
            return False

        if websocket.client_state != WebSocketState.CONNECTED:
            self.disconnect(connection_id, websocket)
            return False

        sent = self._outstanding.setdefault(connection_id, set())
        # Drop IDs the correlator already settled by timeout
        sent -= {correlation_id for correlation_id in sent if not self.correlator.is_pending(correlation_id)}
        sent.add(request.correlation_id)

        event = RenderEvent(
            event=RenderEventType.RENDER_VALIDATION_REQUEST,
            data=request.model_dump(),
        )
        try:
            await websocket.send_json(event.to_dict())
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.warning(
                "Failed to deliver validation request",
                extra={
                    "connection_id": connection_id,
                    "correlation_id": request.correlation_id,
                    "error_type": type(e).__name__,
                    "error_msg": str(e),
                },
            )
            sent.discard(request.correlation_id)
            self.disconnect(connection_id, websocket)
            return False

        logger.debug(
            "Validation request sent",
            extra={"connection_id": connection_id, "correlation_id": request.correlation_id},
        )
        return True

    def handle_verdict(self, connection_id: str, payload: Any) -> bool:
        """
        Route an inbound verdict to the correlator.

        Verdicts for correlation IDs that were never sent to this
        connection are dropped.

        Args:
            connection_id: Connection the verdict arrived on
            payload: Raw ``data`` object of the inbound event

        Returns:
            bool: True if a pending validation was settled

        Raises:
            RenderChannelError: If the payload is not a valid verdict
        """
        try:
            verdict = ValidationVerdict.model_validate(payload)
        except PydanticValidationError as e:
            raise RenderChannelError(
                "Malformed render validation response",
                connection_id=connection_id,
                details={"errors": e.error_count()},
            ) from e

        sent = self._outstanding.get(connection_id)
        if sent is None or verdict.correlation_id not in sent:
            logger.debug(
                "Dropping verdict not addressed to this connection",
                extra={"connection_id": connection_id, "correlation_id": verdict.correlation_id},
            )
            return False
        sent.discard(verdict.correlation_id)

        # Only the server may mark a verdict inconclusive
        verdict = verdict.model_copy(update={"inconclusive": False})
        return self.correlator.resolve(verdict.correlation_id, verdict)

    def _release(self, connection_id: str, reason: str) -> None:
        sent = self._outstanding.pop(connection_id, set())
        settled = [
            correlation_id
            for correlation_id in sent
            if self.correlator.resolve_unavailable(correlation_id)
        ]
        if settled:
            logger.info(
                "Settled validations of a lost connection",
                extra={"connection_id": connection_id, "reason": reason, "settled": len(settled)},
            )
