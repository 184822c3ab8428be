"""Keyword retrieval over stored document chunks."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import ChunkRepository, DocumentRepository
from construction_ai.documents.models import Citation, DocumentChunk, DocumentType

logger = get_logger(__name__)

UNKNOWN_DOCUMENT_NAME = "Unknown Document"


@dataclass(frozen=True)
class SearchResult:
    chunk: DocumentChunk
    citation: Citation


def make_excerpt(content: str, length: int = 200) -> str:
    """First ``length`` characters, with an ellipsis when truncated."""
    if len(content) <= length:
        return content
    return content[:length] + "..."


class DocumentSearch:
    """Naive term search: a chunk matches if any query term is a substring.

    No ranking; results come back in (document, chunk index) order.
    """

    def __init__(
        self,
        documents: DocumentRepository,
        chunks: ChunkRepository,
        max_results: int = 10,
        excerpt_length: int = 200,
    ):
        self.documents = documents
        self.chunks = chunks
        self.max_results = max_results
        self.excerpt_length = excerpt_length

    async def search(
        self,
        user_id: str,
        query: str,
        document_types: Sequence[DocumentType] | None = None,
    ) -> list[SearchResult]:
        """Find chunks of the user's documents matching any query term."""
        terms = query.lower().split()
        if not terms:
            return []

        documents = await self.documents.list_by_user(user_id, document_types)
        if not documents:
            return []

        names = {d.id: d.original_name for d in documents}
        chunks = await self.chunks.list_by_user(user_id, list(names))

        results: list[SearchResult] = []
        for chunk in chunks:
            content = chunk.content.lower()
            if not any(term in content for term in terms):
                continue
            citation = Citation(
                document_id=chunk.document_id,
                document_name=names.get(chunk.document_id) or UNKNOWN_DOCUMENT_NAME,
                excerpt=make_excerpt(chunk.content, self.excerpt_length),
                page_number=chunk.page_number,
                section=chunk.section_title,
            )
            results.append(SearchResult(chunk=chunk, citation=citation))
            if len(results) >= self.max_results:
                break

        logger.debug("document_search", user_id=user_id, terms=len(terms), results=len(results))
        return results
