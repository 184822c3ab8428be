"""In-memory repositories for development and testing.

Not persistent - data is lost on restart.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from construction_ai.chat.models import Conversation, Message
from construction_ai.core.logging import get_logger
from construction_ai.documents.models import Document, DocumentChunk, DocumentType
from construction_ai.reports.models import Report
from construction_ai.storage.factory import StorageFactory, Repositories

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(UTC)


class InMemoryChunkRepository:
    """Chunk storage keyed by document, in the order documents were first stored."""

    def __init__(self) -> None:
        self._chunks: dict[str, list[DocumentChunk]] = {}
        self._lock = threading.Lock()

    async def create_many(self, chunks: Sequence[DocumentChunk]) -> None:
        with self._lock:
            for chunk in chunks:
                self._chunks.setdefault(chunk.document_id, []).append(chunk)
            for document_chunks in self._chunks.values():
                document_chunks.sort(key=lambda c: c.chunk_index)

    async def list_by_document(self, document_id: str, user_id: str) -> list[DocumentChunk]:
        with self._lock:
            return [c for c in self._chunks.get(document_id, []) if c.user_id == user_id]

    async def list_by_user(
        self,
        user_id: str,
        document_ids: Sequence[str] | None = None,
    ) -> list[DocumentChunk]:
        with self._lock:
            wanted = set(document_ids) if document_ids is not None else None
            return [
                chunk
                for document_id in self._chunks
                if wanted is None or document_id in wanted
                for chunk in self._chunks[document_id]
                if chunk.user_id == user_id
            ]

    async def delete_by_document(self, document_id: str) -> int:
        with self._lock:
            return len(self._chunks.pop(document_id, []))


class InMemoryDocumentRepository:
    """Document storage; deleting a document cascades to its chunks."""

    def __init__(self, chunks: InMemoryChunkRepository) -> None:
        self._documents: dict[str, Document] = {}
        self._chunks = chunks
        self._lock = threading.Lock()

    async def create(self, document: Document) -> Document:
        with self._lock:
            self._documents[document.id] = document
        return replace(document)

    async def get(self, document_id: str, user_id: str) -> Document | None:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.user_id != user_id:
                return None
            return replace(document)

    async def list_by_user(
        self,
        user_id: str,
        document_types: Sequence[DocumentType] | None = None,
    ) -> list[Document]:
        with self._lock:
            documents = [
                replace(d)
                for d in self._documents.values()
                if d.user_id == user_id and (not document_types or d.document_type in document_types)
            ]
        documents.sort(key=lambda d: d.created_at, reverse=True)
        return documents

    async def update(self, document_id: str, user_id: str, **changes: Any) -> Document | None:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.user_id != user_id:
                return None
            updated = replace(document, **changes, updated_at=_now())
            self._documents[document_id] = updated
            return replace(updated)

    async def delete(self, document_id: str, user_id: str) -> bool:
        with self._lock:
            document = self._documents.get(document_id)
            if document is None or document.user_id != user_id:
                return False
            del self._documents[document_id]
        removed = await self._chunks.delete_by_document(document_id)
        logger.debug("document_deleted", document_id=document_id, chunks_removed=removed)
        return True


class InMemoryMessageRepository:
    def __init__(self) -> None:
        self._messages: dict[str, list[Message]] = {}
        self._lock = threading.Lock()

    async def create(self, message: Message) -> Message:
        with self._lock:
            self._messages.setdefault(message.conversation_id, []).append(message)
        return message

    async def list_by_conversation(self, conversation_id: str, user_id: str) -> list[Message]:
        with self._lock:
            messages = [m for m in self._messages.get(conversation_id, []) if m.user_id == user_id]
        messages.sort(key=lambda m: m.created_at)
        return messages

    async def delete_by_conversation(self, conversation_id: str) -> int:
        with self._lock:
            return len(self._messages.pop(conversation_id, []))


class InMemoryConversationRepository:
    """Conversation storage; deleting a conversation cascades to its messages."""

    def __init__(self, messages: InMemoryMessageRepository) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._messages = messages
        self._lock = threading.Lock()

    async def create(self, conversation: Conversation) -> Conversation:
        with self._lock:
            self._conversations[conversation.id] = conversation
        return replace(conversation)

    async def get(self, conversation_id: str, user_id: str) -> Conversation | None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None or conversation.user_id != user_id:
                return None
            return replace(conversation)

    async def list_by_user(self, user_id: str) -> list[Conversation]:
        with self._lock:
            conversations = [replace(c) for c in self._conversations.values() if c.user_id == user_id]
        conversations.sort(key=lambda c: c.last_message_at, reverse=True)
        return conversations

    async def update(self, conversation_id: str, user_id: str, **changes: Any) -> Conversation | None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None or conversation.user_id != user_id:
                return None
            updated = replace(conversation, **changes, updated_at=_now())
            self._conversations[conversation_id] = updated
            return replace(updated)

    async def touch(self, conversation_id: str) -> None:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is not None:
                self._conversations[conversation_id] = replace(conversation, last_message_at=_now())

    async def delete(self, conversation_id: str, user_id: str) -> bool:
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None or conversation.user_id != user_id:
                return False
            del self._conversations[conversation_id]
        await self._messages.delete_by_conversation(conversation_id)
        return True


class InMemoryReportRepository:
    def __init__(self) -> None:
        self._reports: dict[str, Report] = {}
        self._lock = threading.Lock()

    async def create(self, report: Report) -> Report:
        with self._lock:
            self._reports[report.id] = report
        return report

    async def get(self, report_id: str, user_id: str) -> Report | None:
        with self._lock:
            report = self._reports.get(report_id)
        if report is None or report.user_id != user_id:
            return None
        return report

    async def list_by_user(self, user_id: str) -> list[Report]:
        with self._lock:
            reports = [r for r in self._reports.values() if r.user_id == user_id]
        reports.sort(key=lambda r: r.created_at, reverse=True)
        return reports


@StorageFactory.register("in_memory")
def create_in_memory_repositories() -> Repositories:
    """Build a consistent set of in-memory repositories."""
    chunks = InMemoryChunkRepository()
    messages = InMemoryMessageRepository()
    logger.debug("in_memory_storage_initialized")
    return Repositories(
        documents=InMemoryDocumentRepository(chunks),
        chunks=chunks,
        conversations=InMemoryConversationRepository(messages),
        messages=messages,
        reports=InMemoryReportRepository(),
    )
