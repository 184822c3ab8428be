"""Conversation management and chat turns."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field

from construction_ai.agents.construction_agent import ConstructionAgent
from construction_ai.agents.models import AgentEvent, AgentResponse
from construction_ai.chat.models import (
    DEFAULT_CONVERSATION_TITLE,
    Conversation,
    Message,
    MessageRole,
    derive_title,
)
from construction_ai.core.exceptions import NotFoundError
from construction_ai.core.logging import get_logger, log_request
from construction_ai.core.protocols import ConversationRepository, MessageRepository

logger = get_logger(__name__)


@dataclass
class ConversationDetail:
    conversation: Conversation
    messages: list[Message] = field(default_factory=list)


@dataclass
class ChatTurn:
    """Stored messages of one exchange plus the agent's answer."""

    conversation_id: str
    user_message: Message
    assistant_message: Message
    response: AgentResponse


class ChatService:
    """Persists conversations around agent turns."""

    def __init__(
        self,
        conversations: ConversationRepository,
        messages: MessageRepository,
        agent: ConstructionAgent,
        history_window: int = 10,
    ):
        self.conversations = conversations
        self.messages = messages
        self.agent = agent
        self.history_window = history_window

    async def create_conversation(
        self,
        user_id: str,
        title: str | None = None,
        document_ids: list[str] | None = None,
    ) -> Conversation:
        conversation = Conversation(
            user_id=user_id,
            title=title or DEFAULT_CONVERSATION_TITLE,
            document_ids=document_ids or [],
        )
        return await self.conversations.create(conversation)

    async def list_conversations(self, user_id: str) -> list[Conversation]:
        return await self.conversations.list_by_user(user_id)

    async def _require_conversation(self, user_id: str, conversation_id: str) -> Conversation:
        conversation = await self.conversations.get(conversation_id, user_id)
        if conversation is None:
            raise NotFoundError("Conversation", conversation_id)
        return conversation

    async def get_conversation(self, user_id: str, conversation_id: str) -> ConversationDetail:
        conversation = await self._require_conversation(user_id, conversation_id)
        messages = await self.messages.list_by_conversation(conversation_id, user_id)
        return ConversationDetail(conversation, messages)

    async def update_conversation(
        self,
        user_id: str,
        conversation_id: str,
        title: str | None = None,
        document_ids: list[str] | None = None,
    ) -> Conversation:
        """Change the title and/or attached documents; omitted fields stay."""
        changes = {}
        if title:
            changes["title"] = title
        if document_ids is not None:
            changes["document_ids"] = document_ids
        if not changes:
            return await self._require_conversation(user_id, conversation_id)

        updated = await self.conversations.update(conversation_id, user_id, **changes)
        if updated is None:
            raise NotFoundError("Conversation", conversation_id)
        return updated

    async def delete_conversation(self, user_id: str, conversation_id: str) -> None:
        if not await self.conversations.delete(conversation_id, user_id):
            raise NotFoundError("Conversation", conversation_id)

    async def _begin_turn(self, user_id: str, conversation: Conversation, content: str):
        """Load history, persist the user message and auto-title a fresh conversation."""
        previous = await self.messages.list_by_conversation(conversation.id, user_id)
        history = [m.to_chat_message() for m in previous[-self.history_window :]]

        user_message = await self.messages.create(
            Message(conversation_id=conversation.id, user_id=user_id, role=MessageRole.USER, content=content)
        )
        if not previous and conversation.title == DEFAULT_CONVERSATION_TITLE:
            await self.conversations.update(conversation.id, user_id, title=derive_title(content))
        return history, user_message

    async def _finish_turn(
        self,
        user_id: str,
        conversation_id: str,
        response: AgentResponse,
        started: float,
    ) -> Message:
        processing_time = time.perf_counter() - started
        assistant_message = await self.messages.create(
            Message(
                conversation_id=conversation_id,
                user_id=user_id,
                role=MessageRole.ASSISTANT,
                content=response.content,
                citations=response.citations,
                tool_calls=response.tool_calls,
                metadata={
                    "model": response.model,
                    "tokens": response.total_tokens,
                    "processing_time": round(processing_time, 3),
                },
            )
        )
        await self.conversations.touch(conversation_id)
        return assistant_message

    async def send_message(self, user_id: str, conversation_id: str, content: str) -> ChatTurn:
        """Run one agent turn inside an existing conversation."""
        conversation = await self._require_conversation(user_id, conversation_id)
        started = time.perf_counter()
        history, user_message = await self._begin_turn(user_id, conversation, content)

        response = await self.agent.run(user_id, content, history)
        assistant_message = await self._finish_turn(user_id, conversation_id, response, started)

        log_request(
            method="POST",
            path=f"/conversations/{conversation_id}/messages",
            user_id=user_id,
            conversation_id=conversation_id,
            user_message=content,
            tools=[call.tool for call in response.tool_calls],
            response=response.content,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return ChatTurn(conversation_id, user_message, assistant_message, response)

    async def quick_ask(self, user_id: str, content: str) -> ChatTurn:
        """Answer a one-off question in a new conversation titled after it."""
        conversation = await self.conversations.create(Conversation(user_id=user_id, title=derive_title(content)))
        return await self.send_message(user_id, conversation.id, content)

    async def stream_message(self, user_id: str, conversation_id: str, content: str) -> AsyncIterator[AgentEvent]:
        """Like ``send_message`` but yields the agent's events as they are produced.

        The assistant message is persisted before the ``done`` event is yielded.
        """
        conversation = await self._require_conversation(user_id, conversation_id)
        started = time.perf_counter()
        history, _ = await self._begin_turn(user_id, conversation, content)

        async for event in self.agent.stream(user_id, content, history):
            if event.type == "done":
                await self._finish_turn(user_id, conversation_id, event.data, started)
            yield event
