"""
Mermaid diagram agent.

Generation client backed by a LangChain chat model. Drafts diagrams from
the conversation and repairs diagrams that failed to render.

Dependencies: langchain_core, langchain_google_genai
System role: Text-generation provider adapter
"""

import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from diagramai.core.agentic_system.diagram_agent.diagram_agent_prompt import (
    DEFAULT_SYNTAX_GUIDE,
    DIAGRAM_DRAFT_PROMPT,
    DIAGRAM_REPAIR_PROMPT,
)
from diagramai.core.agentic_system.diagram_agent.response_parser import (
    DEFAULT_REPAIR_ANSWER,
    parse_draft_response,
)
from diagramai.models.generation import ChatTurn, DraftResult, GenerationContext

logger = logging.getLogger(__name__)

NO_CURRENT_DIAGRAM = "No current diagram exists."


def format_history(turns: tuple[ChatTurn, ...]) -> str:
    """Render chat turns as ``role: content`` lines."""
    return "\n".join(f"{turn.role.value}: {turn.content}" for turn in turns)


def message_text(message: BaseMessage) -> str:
    """Flatten a chat model reply into plain text."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class DiagramAgent:
    """
    Mermaid diagram generation client.

    Sends the draft and repair prompts to a chat model and parses its
    JSON reply. Unparseable replies degrade to an empty (draft) or
    unchanged (repair) diagram; transport errors propagate to the caller.
    """

    def __init__(
        self,
        model: BaseChatModel | None = None,
        model_id: str = "gemini-2.5-flash",
        temperature: float = 0.7,
        api_key: str | None = None,
        history_window: int = 5,
        syntax_guide: str = DEFAULT_SYNTAX_GUIDE,
    ) -> None:
        """
        Initialize agent with a chat model.

        Args:
            model: Preconfigured chat model. If None, a Gemini model is created.
            model_id: Gemini model identifier
            temperature: Sampling temperature
            api_key: Google API key (GOOGLE_API_KEY env var when None)
            history_window: Recent turns included in prompts
            syntax_guide: Mermaid syntax reference included in prompts
        """
        if model is None:
            model_kwargs: dict[str, Any] = {
                "model": model_id,
                "temperature": temperature,
                "response_mime_type": "application/json",
            }
            if api_key:
                model_kwargs["google_api_key"] = api_key
            model = ChatGoogleGenerativeAI(**model_kwargs)

        self._model = model
        self._history_window = history_window
        self._syntax_guide = syntax_guide

    async def draft(self, context: GenerationContext) -> DraftResult:
        """
        Produce an initial diagram for the user's request.

        Args:
            context: Prompt, history and current diagram

        Returns:
            DraftResult: Diagram source (possibly empty) and explanation
        """
        messages = DIAGRAM_DRAFT_PROMPT.format_messages(
            syntax_guide=self._syntax_guide,
            current_diagram=(
                f"Current diagram:\n{context.current_diagram}"
                if context.current_diagram
                else NO_CURRENT_DIAGRAM
            ),
            chat_history=format_history(context.recent_history(self._history_window)),
            prompt=context.prompt,
        )
        logger.debug("Requesting draft", extra={"prompt_length": len(context.prompt)})
        reply = await self._model.ainvoke(messages)
        return parse_draft_response(message_text(reply))

    async def repair(
        self,
        context: GenerationContext,
        prior_diagram: str,
        error: str,
    ) -> DraftResult:
        """
        Produce a corrected diagram of the same type.

        Args:
            context: Original prompt, history and current diagram
            prior_diagram: Diagram that failed to render
            error: Renderer error message

        Returns:
            DraftResult: Corrected diagram (prior_diagram if unparseable)
        """
        messages = DIAGRAM_REPAIR_PROMPT.format_messages(
            syntax_guide=self._syntax_guide,
            chat_history=format_history(context.recent_history(self._history_window)),
            error=error,
            prior_diagram=prior_diagram,
            prompt=context.prompt,
        )
        logger.debug("Requesting repair", extra={"error_msg": error})
        reply = await self._model.ainvoke(messages)
        return parse_draft_response(
            message_text(reply),
            fallback_diagram=prior_diagram,
            fallback_answer=DEFAULT_REPAIR_ANSWER,
        )
