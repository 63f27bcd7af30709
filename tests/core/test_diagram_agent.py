"""Tests for the Mermaid diagram agent.

Tests all components:
- diagram_agent_prompt.py: Draft and repair prompt templates, syntax guide loading
- diagram_agent.py: DiagramAgent draft/repair against a mocked chat model

Dependencies: pytest, unittest.mock, langchain_core
System role: Generation client prompt assembly and reply handling
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_core.prompts import ChatPromptTemplate

from diagramai.core.agentic_system.diagram_agent.diagram_agent import (
    NO_CURRENT_DIAGRAM,
    DiagramAgent,
    format_history,
    message_text,
)
from diagramai.core.agentic_system.diagram_agent.diagram_agent_prompt import (
    DEFAULT_SYNTAX_GUIDE,
    DIAGRAM_DRAFT_PROMPT,
    DIAGRAM_REPAIR_PROMPT,
    load_syntax_guide,
)
from diagramai.models.generation import ChatRole, ChatTurn, GenerationContext

BROKEN_CHART = "xychart-beta\n    x-axis [a, b\n    bar [1, 2]"


@pytest.fixture
def chat_model() -> AsyncMock:
    """Provide chat model mock replying with a valid JSON draft."""
    model = AsyncMock()
    model.ainvoke.return_value = AIMessage(
        content='{"chatAnswer": "Here is your chart.", "mermaidDiagram": "xychart-beta\\n    bar [1, 2]"}'
    )
    return model


@pytest.fixture
def agent(chat_model: AsyncMock) -> DiagramAgent:
    """Provide agent wired to the mocked chat model."""
    return DiagramAgent(model=chat_model, history_window=2, syntax_guide="GUIDE TEXT")


def _sent_messages(chat_model: AsyncMock) -> list:
    return chat_model.ainvoke.await_args.args[0]


# ============================================================================
# Prompt Template Tests
# ============================================================================


class TestPrompts:
    """Test prompt template structure."""

    def test_prompts_are_chat_templates(self) -> None:
        assert isinstance(DIAGRAM_DRAFT_PROMPT, ChatPromptTemplate)
        assert isinstance(DIAGRAM_REPAIR_PROMPT, ChatPromptTemplate)

    def test_draft_prompt_variables(self) -> None:
        assert set(DIAGRAM_DRAFT_PROMPT.input_variables) == {
            "syntax_guide",
            "current_diagram",
            "chat_history",
            "prompt",
        }

    def test_repair_prompt_variables(self) -> None:
        assert set(DIAGRAM_REPAIR_PROMPT.input_variables) == {
            "syntax_guide",
            "chat_history",
            "error",
            "prior_diagram",
            "prompt",
        }

    def test_load_syntax_guide_reads_file(self, tmp_path: Path) -> None:
        guide = tmp_path / "guide.md"
        guide.write_text("flowchart rules", encoding="utf-8")

        assert load_syntax_guide(str(guide)) == "flowchart rules"

    def test_load_syntax_guide_falls_back_when_missing(self, tmp_path: Path) -> None:
        assert load_syntax_guide(str(tmp_path / "missing.md")) == DEFAULT_SYNTAX_GUIDE
        assert load_syntax_guide(None) == DEFAULT_SYNTAX_GUIDE


# ============================================================================
# Helper Tests
# ============================================================================


class TestHelpers:
    """Test history formatting and reply flattening."""

    def test_format_history(self) -> None:
        turns = (
            ChatTurn(role=ChatRole.USER, content="draw a pie chart"),
            ChatTurn(role=ChatRole.ASSISTANT, content="Done."),
        )

        assert format_history(turns) == "user: draw a pie chart\nassistant: Done."

    def test_message_text_joins_content_parts(self) -> None:
        message = AIMessage(content=[{"type": "text", "text": "{\"a\""}, ": 1}"])

        assert message_text(message) == '{"a": 1}'


# ============================================================================
# DiagramAgent Tests
# ============================================================================


class TestDiagramAgentDraft:
    """Test draft generation."""

    @pytest.mark.asyncio
    async def test_draft_parses_reply(self, agent: DiagramAgent) -> None:
        result = await agent.draft(GenerationContext(prompt="bar chart of sales"))

        assert result.explanation == "Here is your chart."
        assert result.diagram_source == "xychart-beta\n    bar [1, 2]"

    @pytest.mark.asyncio
    async def test_draft_prompt_contents(self, agent: DiagramAgent, chat_model: AsyncMock) -> None:
        context = GenerationContext(
            prompt="add a logout step",
            history=(
                ChatTurn(role=ChatRole.USER, content="oldest turn"),
                ChatTurn(role=ChatRole.USER, content="draw a login flow"),
                ChatTurn(role=ChatRole.ASSISTANT, content="Here is your login flow."),
            ),
            current_diagram="flowchart TD\n  A --> B",
        )

        await agent.draft(context)

        system, human = _sent_messages(chat_model)
        assert isinstance(system, SystemMessage)
        assert isinstance(human, HumanMessage)
        assert human.content == "add a logout step"
        assert "GUIDE TEXT" in system.content
        assert "Current diagram:\nflowchart TD\n  A --> B" in system.content
        assert "user: draw a login flow" in system.content
        assert "oldest turn" not in system.content
        assert '"mermaidDiagram"' in system.content

    @pytest.mark.asyncio
    async def test_draft_without_current_diagram(self, agent: DiagramAgent, chat_model: AsyncMock) -> None:
        await agent.draft(GenerationContext(prompt="sequence diagram"))

        assert NO_CURRENT_DIAGRAM in _sent_messages(chat_model)[0].content

    @pytest.mark.asyncio
    async def test_draft_unparseable_reply_degrades(self, agent: DiagramAgent, chat_model: AsyncMock) -> None:
        chat_model.ainvoke.return_value = AIMessage(content="I am not JSON")

        result = await agent.draft(GenerationContext(prompt="anything"))

        assert result.diagram_source == ""
        assert result.explanation

    @pytest.mark.asyncio
    async def test_draft_propagates_transport_errors(self, agent: DiagramAgent, chat_model: AsyncMock) -> None:
        chat_model.ainvoke.side_effect = ConnectionError("network down")

        with pytest.raises(ConnectionError):
            await agent.draft(GenerationContext(prompt="anything"))


class TestDiagramAgentRepair:
    """Test diagram repair."""

    @pytest.mark.asyncio
    async def test_repair_prompt_contents(self, agent: DiagramAgent, chat_model: AsyncMock) -> None:
        context = GenerationContext(prompt="bar chart of sales")

        await agent.repair(context, BROKEN_CHART, "Parse error on line 2")

        system, human = _sent_messages(chat_model)
        assert "NEVER change the diagram type" in system.content
        assert "Error: Parse error on line 2" in human.content
        assert BROKEN_CHART in human.content
        assert "Original request: bar chart of sales" in human.content

    @pytest.mark.asyncio
    async def test_repair_unparseable_reply_keeps_prior_diagram(
        self,
        agent: DiagramAgent,
        chat_model: AsyncMock,
    ) -> None:
        chat_model.ainvoke.return_value = AIMessage(content="Sorry, something went wrong")

        result = await agent.repair(GenerationContext(prompt="chart"), BROKEN_CHART, "bad")

        assert result.diagram_source == BROKEN_CHART
        assert result.explanation == "I've attempted to fix the rendering error."


class TestDiagramAgentInit:
    """Test default model construction."""

    def test_creates_gemini_model(self) -> None:
        with patch(
            "diagramai.core.agentic_system.diagram_agent.diagram_agent.ChatGoogleGenerativeAI"
        ) as mock_llm:
            DiagramAgent(model_id="gemini-test", temperature=0.1, api_key="secret")

        mock_llm.assert_called_once_with(
            model="gemini-test",
            temperature=0.1,
            response_mime_type="application/json",
            google_api_key="secret",
        )

    def test_omits_api_key_when_not_given(self) -> None:
        with patch(
            "diagramai.core.agentic_system.diagram_agent.diagram_agent.ChatGoogleGenerativeAI"
        ) as mock_llm:
            DiagramAgent()

        assert "google_api_key" not in mock_llm.call_args.kwargs
