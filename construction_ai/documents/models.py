"""Document models for the construction document assistant."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4


def _now() -> datetime:
    return datetime.now(UTC)


def _new_id() -> str:
    return str(uuid4())


class FileType(StrEnum):
    """Uploaded file formats."""

    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"

    @property
    def content_type(self) -> str:
        """MIME type used when storing and extracting the file."""
        return {
            FileType.PDF: "application/pdf",
            FileType.DOCX: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            FileType.TXT: "text/plain",
        }[self]


class DocumentType(StrEnum):
    """Construction document classification."""

    PROJECT_PLANS = "project_plans"
    SPECIFICATIONS = "specifications"
    STANDARD_PLANS = "standard_plans"
    SPECIAL_PROVISIONS = "special_provisions"
    CPM_SCHEDULE = "cpm_schedule"
    OTHER = "other"


# Uploads of these types trigger an owner notification after analysis
CRITICAL_DOCUMENT_TYPES = frozenset({DocumentType.SPECIAL_PROVISIONS, DocumentType.CPM_SCHEDULE})


class ProcessingStatus(StrEnum):
    """Document processing lifecycle."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Document:
    """An uploaded construction document."""

    user_id: str
    original_name: str
    file_type: FileType
    file_size: int
    storage_key: str
    storage_url: str
    document_type: DocumentType = DocumentType.OTHER
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    extracted_text: str | None = None
    page_count: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)
    updated_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class DocumentChunk:
    """A retrievable slice of a document's extracted text."""

    document_id: str
    user_id: str
    chunk_index: int
    content: str
    page_number: int | None = None
    section_title: str | None = None
    start_offset: int | None = None
    end_offset: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class Citation:
    """Pointer from an answer back to a supporting document excerpt."""

    document_id: str
    document_name: str
    excerpt: str
    page_number: int | None = None
    section: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Identity used for deduplication."""
        return (self.document_id, self.excerpt)

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_id": self.document_id,
            "document_name": self.document_name,
            "page_number": self.page_number,
            "section": self.section,
            "excerpt": self.excerpt,
        }
