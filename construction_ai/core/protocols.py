"""Protocol interfaces for dependency injection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from construction_ai.chat.models import Conversation, Message
    from construction_ai.documents.models import Document, DocumentChunk, DocumentType
    from construction_ai.llm.types import ChatMessage, LLMResponse
    from construction_ai.reports.models import Report
    from construction_ai.storage.blob import StoredObject


@runtime_checkable
class LLMProvider(Protocol):
    """LLM communication interface."""

    async def invoke(
        self,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Send messages (and optional tool schemas) and return the model's reply.

        Args:
            messages: Chat messages; content may be text or content blocks
            tools: OpenAI-style function tool schemas offered to the model
            tool_choice: "auto", "none" or a tool name
            response_format: JSON response format request

        Raises:
            LLMError: Provider failure
            LLMTimeoutError: The call exceeded the configured timeout
        """
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Binary file storage interface."""

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """Store bytes under ``key`` and return where they live."""
        ...

    async def get(self, key: str) -> bytes:
        """Read back stored bytes."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Owner notification interface (best-effort)."""

    async def notify(self, title: str, content: str) -> bool:
        """Send a notification; returns False when delivery failed."""
        ...


@runtime_checkable
class DocumentRepository(Protocol):
    """Document persistence scoped by owning user."""

    async def create(self, document: Document) -> Document: ...

    async def get(self, document_id: str, user_id: str) -> Document | None: ...

    async def list_by_user(
        self,
        user_id: str,
        document_types: Sequence[DocumentType] | None = None,
    ) -> list[Document]:
        """List a user's documents, newest first."""
        ...

    async def update(self, document_id: str, user_id: str, **changes: Any) -> Document | None: ...

    async def delete(self, document_id: str, user_id: str) -> bool:
        """Delete a document and its chunks."""
        ...


@runtime_checkable
class ChunkRepository(Protocol):
    """Document chunk persistence."""

    async def create_many(self, chunks: Sequence[DocumentChunk]) -> None:
        """Persist all chunks of a document in one batch."""
        ...

    async def list_by_document(self, document_id: str, user_id: str) -> list[DocumentChunk]: ...

    async def list_by_user(
        self,
        user_id: str,
        document_ids: Sequence[str] | None = None,
    ) -> list[DocumentChunk]:
        """List chunks ordered by (document, chunk index)."""
        ...

    async def delete_by_document(self, document_id: str) -> int: ...


@runtime_checkable
class ConversationRepository(Protocol):
    """Conversation persistence scoped by owning user."""

    async def create(self, conversation: Conversation) -> Conversation: ...

    async def get(self, conversation_id: str, user_id: str) -> Conversation | None: ...

    async def list_by_user(self, user_id: str) -> list[Conversation]:
        """List conversations, most recently active first."""
        ...

    async def update(
        self, conversation_id: str, user_id: str, **changes: Any
    ) -> Conversation | None: ...

    async def touch(self, conversation_id: str) -> None:
        """Bump the conversation's last-message timestamp."""
        ...

    async def delete(self, conversation_id: str, user_id: str) -> bool: ...


@runtime_checkable
class MessageRepository(Protocol):
    """Chat message persistence."""

    async def create(self, message: Message) -> Message: ...

    async def list_by_conversation(self, conversation_id: str, user_id: str) -> list[Message]:
        """List messages oldest first."""
        ...

    async def delete_by_conversation(self, conversation_id: str) -> int: ...


@runtime_checkable
class ReportRepository(Protocol):
    """Generated report persistence."""

    async def create(self, report: Report) -> Report: ...

    async def get(self, report_id: str, user_id: str) -> Report | None: ...

    async def list_by_user(self, user_id: str) -> list[Report]:
        """List reports, newest first."""
        ...
