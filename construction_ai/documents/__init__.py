"""Document ingestion and retrieval.

Uploaded files are extracted to text, split into section-aware chunks and
searched by keyword.
"""

from .chunker import BoundaryAwareChunker, TextSpan, split_into_chunks
from .models import Citation, Document, DocumentChunk, DocumentType, FileType, ProcessingStatus
from .sections import Section, detect_sections

__all__ = [
    "BoundaryAwareChunker",
    "Citation",
    "Document",
    "DocumentChunk",
    "DocumentType",
    "FileType",
    "ProcessingStatus",
    "Section",
    "TextSpan",
    "detect_sections",
    "split_into_chunks",
]
