"""Document upload and management service."""

from __future__ import annotations

import asyncio
import base64
import binascii
from typing import Any
from uuid import uuid4

from construction_ai.core.exceptions import NotFoundError, ValidationError
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import BlobStore, ChunkRepository, DocumentRepository, Notifier
from construction_ai.documents.analyzer import MetadataAnalyzer
from construction_ai.documents.models import (
    CRITICAL_DOCUMENT_TYPES,
    Document,
    DocumentChunk,
    DocumentType,
    FileType,
)
from construction_ai.documents.processor import DocumentProcessor

logger = get_logger(__name__)


def decode_file_data(data: bytes | str) -> bytes:
    """Accept raw bytes or a base64 string."""
    if isinstance(data, bytes):
        return data
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("File data is not valid base64", field="file_data") from e


class DocumentService:
    """Stores uploads and runs processing in the background."""

    def __init__(
        self,
        documents: DocumentRepository,
        chunks: ChunkRepository,
        blob_store: BlobStore,
        processor: DocumentProcessor,
        analyzer: MetadataAnalyzer | None,
        notifier: Notifier,
    ):
        self.documents = documents
        self.chunks = chunks
        self.blob_store = blob_store
        self.processor = processor
        self.analyzer = analyzer
        self.notifier = notifier
        self._tasks: set[asyncio.Task[Any]] = set()

    async def upload(
        self,
        user_id: str,
        file_name: str,
        file_type: FileType,
        file_data: bytes | str,
        document_type: DocumentType | None = None,
    ) -> Document:
        """Store the file and create a pending document.

        Processing is scheduled as a detached task; this returns immediately.
        """
        data = decode_file_data(file_data)
        storage_key = f"documents/{user_id}/{uuid4().hex}-{file_name}"
        stored = await self.blob_store.put(storage_key, data, file_type.content_type)

        document = await self.documents.create(
            Document(
                user_id=user_id,
                original_name=file_name,
                file_type=file_type,
                file_size=len(data),
                storage_key=stored.key,
                storage_url=stored.url,
                document_type=document_type or DocumentType.OTHER,
            )
        )
        logger.info(
            "document_uploaded",
            document_id=document.id,
            user_id=user_id,
            file_type=file_type,
            size=len(data),
        )

        task = asyncio.create_task(self._process_and_analyze(document, explicit_type=document_type is not None))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return document

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("document_background_task_failed", error=str(error))

    async def wait_for_processing(self) -> None:
        """Wait for all scheduled processing tasks (shutdown and tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _process_and_analyze(self, document: Document, explicit_type: bool) -> None:
        processed = await self.processor.process(document)
        if self.analyzer is None or not processed.extracted_text:
            return

        try:
            analysis = await self.analyzer.analyze(processed.original_name, processed.extracted_text)
        except Exception as e:
            logger.warning("metadata_analysis_failed", document_id=document.id, error=str(e))
            return

        metadata = {
            **processed.metadata,
            "title": analysis.title,
            "keywords": analysis.keywords,
            "sections": analysis.sections or processed.metadata.get("sections", []),
        }
        changes: dict[str, Any] = {"metadata": metadata}
        if not explicit_type:
            changes["document_type"] = analysis.document_type
        await self.documents.update(document.id, document.user_id, **changes)
        logger.info(
            "document_metadata_analyzed",
            document_id=document.id,
            detected_type=analysis.document_type,
        )

        if analysis.document_type in CRITICAL_DOCUMENT_TYPES:
            try:
                await self.notifier.notify(
                    "Critical Document Uploaded",
                    f"User uploaded a {analysis.document_type} document: {document.original_name}",
                )
            except Exception as e:
                logger.warning("critical_document_notification_failed", document_id=document.id, error=str(e))

    async def list(self, user_id: str, document_types: list[DocumentType] | None = None) -> list[Document]:
        return await self.documents.list_by_user(user_id, document_types)

    async def get(self, user_id: str, document_id: str) -> Document:
        document = await self.documents.get(document_id, user_id)
        if document is None:
            raise NotFoundError("Document", document_id)
        return document

    async def get_chunks(self, user_id: str, document_id: str) -> list[DocumentChunk]:
        await self.get(user_id, document_id)
        return await self.chunks.list_by_document(document_id, user_id)

    async def delete(self, user_id: str, document_id: str) -> None:
        if not await self.documents.delete(document_id, user_id):
            raise NotFoundError("Document", document_id)
        logger.info("document_deleted", document_id=document_id, user_id=user_id)
