"""Tests for in-memory repositories and blob storage."""

from dataclasses import replace

import pytest

from construction_ai.chat.models import Conversation, Message, MessageRole
from construction_ai.core.config import StorageConfig
from construction_ai.core.exceptions import ConfigurationError
from construction_ai.documents.models import Document, DocumentChunk, DocumentType, FileType
from construction_ai.reports.models import Report, ReportType
from construction_ai.storage.factory import StorageFactory


def _document(user_id: str = "user-1", **kwargs) -> Document:
    return Document(
        user_id=user_id,
        original_name="specs.txt",
        file_type=FileType.TXT,
        file_size=10,
        storage_key="documents/specs.txt",
        storage_url="file:///tmp/specs.txt",
        **kwargs,
    )


class TestStorageFactory:
    def test_in_memory_registered(self):
        assert "in_memory" in StorageFactory.available_backends()

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError, match="Unknown storage backend"):
            StorageFactory.create(StorageConfig(backend="postgres"))


class TestDocumentRepository:
    @pytest.mark.asyncio
    async def test_scoped_by_user(self, repositories):
        document = await repositories.documents.create(_document())

        assert await repositories.documents.get(document.id, "user-1") is not None
        assert await repositories.documents.get(document.id, "user-2") is None
        assert await repositories.documents.update(document.id, "user-2", page_count=3) is None
        assert await repositories.documents.delete(document.id, "user-2") is False

    @pytest.mark.asyncio
    async def test_type_filter(self, repositories):
        await repositories.documents.create(_document(document_type=DocumentType.SPECIFICATIONS))
        schedule = await repositories.documents.create(_document(document_type=DocumentType.CPM_SCHEDULE))

        listed = await repositories.documents.list_by_user("user-1", [DocumentType.CPM_SCHEDULE])

        assert [d.id for d in listed] == [schedule.id]

    @pytest.mark.asyncio
    async def test_update_returns_copy(self, repositories):
        document = await repositories.documents.create(_document())

        updated = await repositories.documents.update(document.id, "user-1", page_count=7)
        updated.page_count = 99

        assert (await repositories.documents.get(document.id, "user-1")).page_count == 7

    @pytest.mark.asyncio
    async def test_delete_cascades_to_chunks(self, repositories):
        document = await repositories.documents.create(_document())
        await repositories.chunks.create_many(
            [DocumentChunk(document_id=document.id, user_id="user-1", chunk_index=i, content="x") for i in range(3)]
        )

        assert await repositories.documents.delete(document.id, "user-1") is True
        assert await repositories.chunks.list_by_user("user-1") == []


class TestChunkRepository:
    @pytest.mark.asyncio
    async def test_ordered_by_chunk_index(self, repositories):
        chunks = [DocumentChunk(document_id="d1", user_id="user-1", chunk_index=i, content=str(i)) for i in (2, 0, 1)]
        await repositories.chunks.create_many(chunks)

        listed = await repositories.chunks.list_by_document("d1", "user-1")

        assert [c.chunk_index for c in listed] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_document_filter(self, repositories):
        await repositories.chunks.create_many(
            [
                DocumentChunk(document_id="d1", user_id="user-1", chunk_index=0, content="a"),
                DocumentChunk(document_id="d2", user_id="user-1", chunk_index=0, content="b"),
            ]
        )

        listed = await repositories.chunks.list_by_user("user-1", ["d2"])

        assert [c.content for c in listed] == ["b"]


class TestConversationRepository:
    @pytest.mark.asyncio
    async def test_most_recent_first(self, repositories):
        older = await repositories.conversations.create(Conversation(user_id="user-1", title="older"))
        newer = await repositories.conversations.create(Conversation(user_id="user-1", title="newer"))

        await repositories.conversations.touch(older.id)
        listed = await repositories.conversations.list_by_user("user-1")

        assert [c.id for c in listed] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_update_keeps_activity_time(self, repositories):
        conversation = await repositories.conversations.create(Conversation(user_id="user-1"))

        updated = await repositories.conversations.update(conversation.id, "user-1", title="Renamed")

        assert updated.title == "Renamed"
        assert updated.last_message_at == conversation.last_message_at
        assert updated.updated_at >= conversation.updated_at

    @pytest.mark.asyncio
    async def test_delete_cascades_to_messages(self, repositories):
        conversation = await repositories.conversations.create(Conversation(user_id="user-1"))
        await repositories.messages.create(
            Message(conversation_id=conversation.id, user_id="user-1", role=MessageRole.USER, content="hi")
        )

        assert await repositories.conversations.delete(conversation.id, "user-1") is True
        assert await repositories.messages.list_by_conversation(conversation.id, "user-1") == []


class TestReportRepository:
    @pytest.mark.asyncio
    async def test_newest_first(self, repositories):
        first = Report(user_id="user-1", title="a", report_type=ReportType.CUSTOM, content="a")
        second = replace(
            Report(user_id="user-1", title="b", report_type=ReportType.CUSTOM, content="b"),
            created_at=first.created_at.replace(year=first.created_at.year + 1),
        )
        await repositories.reports.create(first)
        await repositories.reports.create(second)

        listed = await repositories.reports.list_by_user("user-1")

        assert [r.title for r in listed] == ["b", "a"]


class TestLocalBlobStore:
    @pytest.mark.asyncio
    async def test_put_and_get(self, blob_store):
        stored = await blob_store.put("documents/user-1/a.txt", b"hello", "text/plain")

        assert stored.key == "documents/user-1/a.txt"
        assert stored.url.startswith("file://")
        assert await blob_store.get("documents/user-1/a.txt") == b"hello"

    @pytest.mark.asyncio
    async def test_key_cannot_escape_root(self, blob_store):
        with pytest.raises(ValueError, match="escapes storage root"):
            await blob_store.put("../outside.txt", b"x", "text/plain")
