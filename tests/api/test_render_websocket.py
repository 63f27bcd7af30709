"""
Test suite for the render validation WebSocket.

Tests WS /ws/render with FastAPI TestClient against a real RenderChannel
whose correlator is mocked, so routed verdicts can be inspected.

System role: Verification of the render round-trip WebSocket API
"""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from diagramai.api.deps import get_render_channel
from diagramai.api.routers.render_ws import router
from diagramai.boundary.render_channel import RenderChannel
from diagramai.models.render import ValidationRequest


@pytest.fixture
def mock_correlator() -> MagicMock:
    correlator = MagicMock()
    correlator.resolve.return_value = True
    return correlator


@pytest.fixture
def channel(mock_correlator: MagicMock) -> RenderChannel:
    return RenderChannel(correlator=mock_correlator)


@pytest.fixture
def client(channel: RenderChannel) -> TestClient:
    """Provide TestClient with the render channel overridden."""
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_render_channel] = lambda: channel
    return TestClient(app)


class TestRenderWebSocket:
    """Test suite for WS /ws/render."""

    def test_connect_announces_connection_id(self, client: TestClient, channel: RenderChannel) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            message = websocket.receive_json()

            assert message["event"] == "connected"
            connection_id = message["data"]["connection_id"]
            assert channel.is_connected(connection_id)

        assert channel.connection_count == 0

    def test_reconnect_keeps_requested_id(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/render?connection_id=tab-1") as websocket:
            assert websocket.receive_json()["data"]["connection_id"] == "tab-1"

    def test_requested_id_in_use_is_not_taken_over(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/render?connection_id=tab-1") as first:
            first.receive_json()
            with client.websocket_connect("/ws/render?connection_id=tab-1") as second:
                assert second.receive_json()["data"]["connection_id"] != "tab-1"

    def test_ping_returns_pong(self, client: TestClient) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            websocket.receive_json()
            websocket.send_json({"event": "ping"})

            assert websocket.receive_json() == {"event": "pong", "data": {}}

    def test_verdict_is_routed_to_correlator(
        self,
        client: TestClient,
        channel: RenderChannel,
        mock_correlator: MagicMock,
    ) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            connection_id = websocket.receive_json()["data"]["connection_id"]
            websocket.portal.call(
                channel.send_validation_request,
                connection_id,
                ValidationRequest(correlation_id="req-1", diagram_source="pie"),
            )
            assert websocket.receive_json()["event"] == "render_validation_request"

            websocket.send_json({
                "event": "render_validation_response",
                "data": {"correlation_id": "req-1", "success": False, "error": "Parse error on line 3"},
            })
            # Round trip a ping so the verdict has been processed
            websocket.send_json({"event": "ping"})
            websocket.receive_json()

        correlation_id, verdict = mock_correlator.resolve.call_args.args
        assert correlation_id == "req-1"
        assert verdict.success is False
        assert verdict.error == "Parse error on line 3"

    def test_verdict_for_unsent_request_is_dropped(self, client: TestClient, mock_correlator: MagicMock) -> None:
        """Test a socket cannot settle a validation it was never sent."""
        with client.websocket_connect("/ws/render") as websocket:
            websocket.receive_json()
            websocket.send_json({
                "event": "render_validation_response",
                "data": {"correlation_id": "someone-elses", "success": True},
            })
            websocket.send_json({"event": "ping"})

            assert websocket.receive_json()["event"] == "pong"

        mock_correlator.resolve.assert_not_called()

    def test_closing_socket_settles_outstanding_validation(
        self,
        client: TestClient,
        channel: RenderChannel,
        mock_correlator: MagicMock,
    ) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            connection_id = websocket.receive_json()["data"]["connection_id"]
            websocket.portal.call(
                channel.send_validation_request,
                connection_id,
                ValidationRequest(correlation_id="req-1", diagram_source="pie"),
            )
            websocket.receive_json()

        mock_correlator.resolve_unavailable.assert_called_once_with("req-1")
        assert channel.outstanding(connection_id) == frozenset()

    def test_malformed_verdict_returns_error(self, client: TestClient, mock_correlator: MagicMock) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            websocket.receive_json()
            websocket.send_json({"event": "render_validation_response", "data": {"success": True}})

            message = websocket.receive_json()

        assert message["event"] == "error"
        assert message["data"]["code"] == "INVALID_VERDICT"
        mock_correlator.resolve.assert_not_called()

    @pytest.mark.parametrize(
        "raw, code",
        [
            ("not json", "INVALID_JSON"),
            ("[1, 2]", "INVALID_JSON"),
            ('{"event": "subscribe"}', "UNKNOWN_EVENT"),
        ],
    )
    def test_bad_messages_return_error_and_keep_connection(
        self,
        client: TestClient,
        raw: str,
        code: str,
    ) -> None:
        with client.websocket_connect("/ws/render") as websocket:
            websocket.receive_json()
            websocket.send_text(raw)

            assert websocket.receive_json()["data"]["code"] == code

            websocket.send_json({"event": "ping"})
            assert websocket.receive_json()["event"] == "pong"
