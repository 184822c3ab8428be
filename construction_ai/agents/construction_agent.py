"""Tool-orchestrating chat agent over a user's construction documents."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing_extensions import override

from construction_ai.agents.base import BaseAgent
from construction_ai.agents.models import AgentEvent, AgentResponse, ToolCallResult, dedupe_citations
from construction_ai.agents.prompts import FALLBACK_RESPONSE, build_system_prompt
from construction_ai.core.exceptions import LLMError
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import DocumentRepository, LLMProvider
from construction_ai.documents.models import Citation
from construction_ai.llm.types import ChatMessage, tool_result_message
from construction_ai.tools.executor import ToolExecutor
from construction_ai.tools.schemas import tool_palette
from construction_ai.utils.token_counter import trim_history

logger = get_logger(__name__)

STREAM_WORDS_PER_EVENT = 3


def _add_tokens(total: int | None, tokens: int | None) -> int | None:
    if tokens is None:
        return total
    return (total or 0) + tokens


class ConstructionAgent(BaseAgent):
    """Answers one turn with at most one round of tool calls.

    Flow:
    1. System prompt listing the user's documents
    2. LLM call offering the full tool palette
    3. Requested tools run sequentially, outputs fed back
    4. Final LLM call without tools
    """

    def __init__(
        self,
        llm: LLMProvider,
        documents: DocumentRepository,
        executor: ToolExecutor,
        history_window: int = 10,
        history_max_tokens: int = 0,
        model_name: str = "gpt-4o",
    ):
        super().__init__(llm)
        self.documents = documents
        self.executor = executor
        self.history_window = history_window
        self.history_max_tokens = history_max_tokens
        self.model_name = model_name

    @property
    @override
    def name(self) -> str:
        return "construction"

    @override
    async def run(self, user_id: str, message: str, history: list[ChatMessage] | None = None) -> AgentResponse:
        """Answer one user message. Never raises; failures yield a fallback reply."""
        try:
            return await self._run(user_id, message, history or [])
        except LLMError as e:
            logger.error("agent_llm_failed", user_id=user_id, error=str(e), code=e.code)
        except Exception as e:
            logger.exception("agent_run_failed", user_id=user_id, error=str(e))
        return AgentResponse(content=FALLBACK_RESPONSE)

    async def _build_messages(self, user_id: str, message: str, history: list[ChatMessage]) -> list[ChatMessage]:
        documents = await self.documents.list_by_user(user_id)
        recent = history[-self.history_window :] if self.history_window > 0 else []
        recent = trim_history(recent, self.history_max_tokens, self.model_name)
        return [
            {"role": "system", "content": build_system_prompt(documents)},
            *recent,
            {"role": "user", "content": message},
        ]

    async def _run(self, user_id: str, message: str, history: list[ChatMessage]) -> AgentResponse:
        messages = await self._build_messages(user_id, message, history)

        first = await self.llm.invoke(messages, tools=tool_palette(), tool_choice="auto")
        assistant = first.message
        if assistant is None:
            logger.warning("agent_empty_response", user_id=user_id, round=1)
            return AgentResponse(content=FALLBACK_RESPONSE)

        if not assistant.tool_calls:
            return AgentResponse(content=assistant.content, model=first.model, total_tokens=first.total_tokens)

        tool_calls: list[ToolCallResult] = []
        citations: list[Citation] = []
        tool_messages: list[ChatMessage] = []
        for call in assistant.tool_calls:
            execution = await self.executor.execute(user_id, call)
            tool_calls.append(execution.result)
            citations.extend(execution.citations)
            tool_messages.append(tool_result_message(call.id, execution.result.output))

        final = await self.llm.invoke([*messages, assistant.to_chat_message(), *tool_messages])
        if final.message is None:
            logger.warning("agent_empty_response", user_id=user_id, round=2)
            return AgentResponse(content=FALLBACK_RESPONSE)

        logger.info(
            "agent_turn_completed",
            user_id=user_id,
            tools=[call.tool for call in tool_calls],
            citations=len(citations),
        )
        return AgentResponse(
            content=final.message.content,
            citations=dedupe_citations(citations),
            tool_calls=tool_calls,
            model=final.model,
            total_tokens=_add_tokens(first.total_tokens, final.total_tokens),
        )

    async def stream(
        self,
        user_id: str,
        message: str,
        history: list[ChatMessage] | None = None,
        word_delay_seconds: float = 0.0,
    ) -> AsyncIterator[AgentEvent]:
        """Run the turn, then replay it as events.

        Content events carry the accumulated text so far, growing three
        words at a time. The final ``done`` event carries the AgentResponse.
        """
        response = await self.run(user_id, message, history)

        for tool_call in response.tool_calls:
            yield AgentEvent("tool", tool_call)

        words = response.content.split(" ")
        for i in range(0, len(words), STREAM_WORDS_PER_EVENT):
            yield AgentEvent("content", " ".join(words[: i + STREAM_WORDS_PER_EVENT]))
            if word_delay_seconds:
                await asyncio.sleep(word_delay_seconds)

        for citation in response.citations:
            yield AgentEvent("citation", citation)

        yield AgentEvent("done", response)
