"""Document processing pipeline: extract, sectionize, chunk, persist."""

from __future__ import annotations

from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import ChunkRepository, DocumentRepository
from construction_ai.documents.chunker import BoundaryAwareChunker, TextSpan
from construction_ai.documents.classifiers import detect_chunk_type, extract_keywords
from construction_ai.documents.extraction import TextExtractor
from construction_ai.documents.models import Document, DocumentChunk, ProcessingStatus
from construction_ai.documents.sections import Section, detect_sections, estimate_page_number, find_section

logger = get_logger(__name__)


def build_chunks(
    document: Document,
    text: str,
    spans: list[TextSpan],
    sections: list[Section],
    page_count: int | None,
) -> list[DocumentChunk]:
    """Attach section, page, offset and tag metadata to chunk spans."""
    chunks = []
    for index, span in enumerate(spans):
        section = find_section(sections, span.start)
        chunks.append(
            DocumentChunk(
                document_id=document.id,
                user_id=document.user_id,
                chunk_index=index,
                content=span.content,
                page_number=estimate_page_number(span.start, len(text), page_count) if page_count else None,
                section_title=section.title if section else None,
                start_offset=span.start,
                end_offset=span.end,
                metadata={
                    "keywords": extract_keywords(span.content),
                    "type": detect_chunk_type(span.content),
                },
            )
        )
    return chunks


class DocumentProcessor:
    """Moves a document through pending -> processing -> completed | failed."""

    def __init__(
        self,
        documents: DocumentRepository,
        chunks: ChunkRepository,
        extractor: TextExtractor,
        chunker: BoundaryAwareChunker,
    ):
        self.documents = documents
        self.chunks = chunks
        self.extractor = extractor
        self.chunker = chunker

    async def process(self, document: Document) -> Document:
        """Run the full pipeline for one document.

        On any failure the document is marked ``failed`` and the error is
        re-raised to the caller.
        """
        logger.info(
            "document_processing_started",
            document_id=document.id,
            file_type=document.file_type,
        )
        await self.documents.update(document.id, document.user_id, processing_status=ProcessingStatus.PROCESSING)

        try:
            extracted = await self.extractor.extract(document)
            sections = detect_sections(extracted.text)
            spans = self.chunker.chunk_spans(extracted.text)
            chunks = build_chunks(document, extracted.text, spans, sections, extracted.page_count)

            await self.chunks.create_many(chunks)
            updated = await self.documents.update(
                document.id,
                document.user_id,
                extracted_text=extracted.text,
                page_count=extracted.page_count,
                processing_status=ProcessingStatus.COMPLETED,
                metadata={**document.metadata, "sections": [s.title for s in sections]},
            )
        except Exception as e:
            logger.error("document_processing_failed", document_id=document.id, error=str(e))
            await self.documents.update(document.id, document.user_id, processing_status=ProcessingStatus.FAILED)
            raise

        logger.info(
            "document_processing_completed",
            document_id=document.id,
            chunks=len(chunks),
            sections=len(sections),
            page_count=extracted.page_count,
        )
        return updated if updated is not None else document
