"""Request and response schemas for the API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from construction_ai.documents.models import DocumentType, FileType, ProcessingStatus
from construction_ai.reports.models import ReportType
from construction_ai.tools.calculator import CalculationType

# --- Request Models ---


class DocumentUploadRequest(BaseModel):
    """Document upload with base64-encoded file content."""

    file_name: str = Field(..., min_length=1, max_length=255, description="Original file name")
    file_type: FileType = Field(..., description="pdf, docx or txt")
    document_type: DocumentType | None = Field(default=None, description="Construction document type")
    file_data: str = Field(..., min_length=1, description="Base64-encoded file bytes")


class ConversationCreate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    document_ids: list[str] = Field(default_factory=list)


class ConversationUpdate(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    document_ids: list[str] | None = None


class ChatRequest(BaseModel):
    """Chat message request."""

    message: str = Field(..., min_length=1, max_length=10000, description="User message")


class ReportGenerateRequest(BaseModel):
    report_type: ReportType
    title: str | None = None
    document_ids: list[str] = Field(default_factory=list)
    conversation_id: str | None = None


class CalculationRequest(BaseModel):
    calculation_type: CalculationType
    values: dict[str, float] = Field(default_factory=dict)
    formula: str | None = None
    unit_from: str | None = None
    unit_to: str | None = None


# --- Response Models ---


class _FromAttributes(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(_FromAttributes):
    id: str
    original_name: str
    file_type: FileType
    document_type: DocumentType
    file_size: int
    storage_url: str
    processing_status: ProcessingStatus
    page_count: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime


class DocumentChunkResponse(_FromAttributes):
    id: str
    document_id: str
    chunk_index: int
    content: str
    page_number: int | None = None
    section_title: str | None = None
    start_offset: int | None = None
    end_offset: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class CitationResponse(_FromAttributes):
    document_id: str
    document_name: str
    page_number: int | None = None
    section: str | None = None
    excerpt: str


class ToolCallResponse(_FromAttributes):
    tool: str
    input: dict[str, Any]
    output: dict[str, Any]


class MessageResponse(_FromAttributes):
    id: str
    conversation_id: str
    role: str
    content: str
    citations: list[CitationResponse] = Field(default_factory=list)
    tool_calls: list[ToolCallResponse] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class ConversationResponse(_FromAttributes):
    id: str
    title: str
    document_ids: list[str] = Field(default_factory=list)
    last_message_at: datetime
    created_at: datetime
    updated_at: datetime


class ConversationDetailResponse(ConversationResponse):
    messages: list[MessageResponse] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Chat turn response."""

    conversation_id: str
    user_message: MessageResponse
    assistant_message: MessageResponse
    citations: list[CitationResponse] = Field(default_factory=list)
    tool_calls: list[ToolCallResponse] = Field(default_factory=list)


class QuickAskResponse(BaseModel):
    conversation_id: str
    response: str
    citations: list[CitationResponse] = Field(default_factory=list)
    tool_calls: list[ToolCallResponse] = Field(default_factory=list)


class ReportResponse(_FromAttributes):
    id: str
    title: str
    report_type: ReportType
    content: str
    conversation_id: str | None = None
    document_ids: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime


class CalculationResponse(BaseModel):
    """Calculation outcome; ``error`` is set instead of ``result`` on failure."""

    result: float | None = None
    explanation: str | None = None
    calculation_type: str | None = None
    input_values: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    llm_provider: str = Field(..., description="Active LLM provider")
    llm_model: str = Field(..., description="Active LLM model")
    storage_backend: str = Field(..., description="Active storage backend")
