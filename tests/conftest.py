"""
Shared test fixtures and configuration for entire test suite.

Provides: scripted browser stand-ins for the render channel, generation
client mocks, correlator and orchestrator fixtures
Dependencies: pytest, starlette
System role: Test infrastructure and fixture management
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from starlette.websockets import WebSocketState

from diagramai.boundary.render_channel import RenderChannel
from diagramai.core.repair_orchestrator import RepairOrchestrator
from diagramai.core.validation_correlator import ValidationCorrelator
from diagramai.models.generation import DraftResult, GenerationContext

VALID_FLOWCHART = "flowchart TD\n    A[Login page] --> B{Valid?}\n    B -->|yes| C[Dashboard]"


class FakeBrowser:
    """
    Stand-in for a browser tab connected to the render WebSocket.

    Answers each validation request on the next loop iteration with the
    next scripted render error (None meaning the diagram rendered). The
    last entry repeats once the script runs out.
    """

    def __init__(
        self,
        channel: RenderChannel,
        render_errors: list[str | None] | None = None,
        respond: bool = True,
        delay: float = 0.0,
    ) -> None:
        self.channel = channel
        self.render_errors = list(render_errors or [None])
        self.respond = respond
        self.delay = delay
        self.client_state = WebSocketState.CONNECTED
        self.sent: list[dict] = []
        self.connection_id = channel.connect(self)

    @property
    def requests(self) -> list[dict]:
        """Payloads of validation requests received so far."""
        return [
            message["data"]
            for message in self.sent
            if message["event"] == "render_validation_request"
        ]

    async def send_json(self, data: dict) -> None:
        self.sent.append(data)
        if not self.respond or data["event"] != "render_validation_request":
            return

        index = min(len(self.requests) - 1, len(self.render_errors) - 1)
        error = self.render_errors[index]
        payload = {
            "correlation_id": data["data"]["correlation_id"],
            "success": error is None,
            "error": error,
        }
        loop = asyncio.get_running_loop()
        loop.call_later(self.delay, self.channel.handle_verdict, self.connection_id, payload)

    def close(self) -> None:
        """Close the tab the way the WebSocket handler does on disconnect."""
        self.client_state = WebSocketState.DISCONNECTED
        self.channel.disconnect(self.connection_id, self)


@pytest.fixture
def correlator() -> ValidationCorrelator:
    """Provide correlator with a short timeout."""
    return ValidationCorrelator(timeout_seconds=0.2)


@pytest.fixture
def render_channel(correlator: ValidationCorrelator) -> RenderChannel:
    """Provide render channel bound to the correlator."""
    return RenderChannel(correlator=correlator)


@pytest.fixture
def generation_client() -> AsyncMock:
    """Provide mock generation client returning a valid flowchart."""
    client = AsyncMock()
    client.draft.return_value = DraftResult(
        diagram_source=VALID_FLOWCHART,
        explanation="Here is your login flow.",
    )
    client.repair.return_value = DraftResult(
        diagram_source=VALID_FLOWCHART,
        explanation="Fixed the arrow syntax.",
    )
    return client


@pytest.fixture
def orchestrator(
    generation_client: AsyncMock,
    correlator: ValidationCorrelator,
    render_channel: RenderChannel,
) -> RepairOrchestrator:
    """Provide orchestrator with a small repair budget."""
    return RepairOrchestrator(
        generation_client=generation_client,
        correlator=correlator,
        render_channel=render_channel,
        max_repair_attempts=3,
    )


@pytest.fixture
def login_flow_context() -> GenerationContext:
    """Provide context for a fresh login flow request."""
    return GenerationContext(prompt="draw a login flow")
