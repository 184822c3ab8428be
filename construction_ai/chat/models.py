"""Conversation and message models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from construction_ai.agents.models import ToolCallResult
from construction_ai.documents.models import Citation

DEFAULT_CONVERSATION_TITLE = "New Chat"
MAX_TITLE_LENGTH = 50


def _now() -> datetime:
    return datetime.now(UTC)


def derive_title(message: str) -> str:
    """Conversation title from its first message."""
    if len(message) > MAX_TITLE_LENGTH:
        return message[: MAX_TITLE_LENGTH - 3] + "..."
    return message


class MessageRole(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Conversation:
    """A chat session owned by one user."""

    user_id: str
    title: str = DEFAULT_CONVERSATION_TITLE
    document_ids: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid4()))
    last_message_at: datetime = field(default_factory=_now)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class Message:
    """A single chat message. Immutable once stored."""

    conversation_id: str
    user_id: str
    role: MessageRole
    content: str
    citations: list[Citation] = field(default_factory=list)
    tool_calls: list[ToolCallResult] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=_now)

    def to_chat_message(self) -> dict[str, str]:
        """History entry for the agent."""
        return {"role": str(self.role), "content": self.content}
