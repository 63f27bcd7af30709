"""
Render validation WebSocket endpoint.

Browsers keep this connection open while the app is loaded. The server
pushes candidate diagrams to render; the browser answers with a verdict.

Routes: WS /ws/render

Dependencies: diagramai.boundary.render_channel
System role: Render round-trip WebSocket API
"""

import json
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from diagramai.api.deps import get_render_channel
from diagramai.boundary.render_channel import RenderChannel
from diagramai.core.exceptions import RenderChannelError
from diagramai.models.render import (
    RenderClientEventType,
    RenderEvent,
    RenderEventType,
)

logger = logging.getLogger(__name__)
router = APIRouter(tags=["render"])


def _error_event(code: str, message: str) -> dict:
    return RenderEvent(
        event=RenderEventType.ERROR,
        data={"code": code, "message": message},
    ).to_dict()


@router.websocket("/ws/render")
async def render_websocket(
    websocket: WebSocket,
    render_channel: RenderChannel = Depends(get_render_channel),
) -> None:
    """
    WebSocket endpoint for browser-side render validation.

    Server sends:
        {"event": "connected", "data": {"connection_id": "..."}}
        {"event": "render_validation_request", "data": {"correlation_id": "...", "diagram_source": "..."}}
        {"event": "pong", "data": {}}
        {"event": "error", "data": {"code": "...", "message": "..."}}

    Client sends:
        {"event": "render_validation_response", "data": {"correlation_id": "...", "success": true, "error": null}}
        {"event": "ping"}

    A reconnecting browser may pass ``?connection_id=`` to keep its ID,
    provided no live connection currently holds it.

    Args:
        websocket: WebSocket connection
        render_channel: Injected shared render channel
    """
    await websocket.accept()

    requested_id = websocket.query_params.get("connection_id")
    if requested_id and render_channel.is_connected(requested_id):
        requested_id = None
    connection_id = render_channel.connect(websocket, connection_id=requested_id)

    await websocket.send_json(RenderEvent(
        event=RenderEventType.CONNECTED,
        data={"connection_id": connection_id},
    ).to_dict())

    try:
        while True:
            raw_data = await websocket.receive_text()

            try:
                data = json.loads(raw_data)
            except json.JSONDecodeError as e:
                logger.warning(
                    "Failed to parse JSON",
                    extra={"connection_id": connection_id, "error_msg": str(e)},
                )
                await websocket.send_json(_error_event("INVALID_JSON", "Invalid JSON format"))
                continue

            if not isinstance(data, dict):
                await websocket.send_json(_error_event("INVALID_JSON", "Expected a JSON object"))
                continue

            event_type = data.get("event")

            if event_type == RenderClientEventType.PING.value:
                await websocket.send_json(RenderEvent(event=RenderEventType.PONG).to_dict())
                continue

            if event_type == RenderClientEventType.RENDER_VALIDATION_RESPONSE.value:
                try:
                    render_channel.handle_verdict(connection_id, data.get("data"))
                except RenderChannelError as e:
                    logger.warning(
                        "Malformed render verdict",
                        extra={"connection_id": connection_id, "error_msg": e.message},
                    )
                    await websocket.send_json(_error_event("INVALID_VERDICT", e.message))
                continue

            logger.warning(
                "Unknown event type received",
                extra={"connection_id": connection_id, "event_type": str(event_type)},
            )
            await websocket.send_json(
                _error_event("UNKNOWN_EVENT", f"Unknown event type: {event_type}")
            )

    except WebSocketDisconnect:
        logger.info(
            "Render WebSocket disconnected",
            extra={"connection_id": connection_id},
        )
    finally:
        render_channel.disconnect(connection_id, websocket)
