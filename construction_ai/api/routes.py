"""API routes for the construction document assistant."""

import json
import time
from pathlib import Path

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sse_starlette.sse import EventSourceResponse

from construction_ai.agents.models import AgentEvent
from construction_ai.api.dependencies import get_user_id
from construction_ai.api.schemas import (
    CalculationRequest,
    CalculationResponse,
    ChatRequest,
    ChatResponse,
    CitationResponse,
    ConversationCreate,
    ConversationDetailResponse,
    ConversationResponse,
    ConversationUpdate,
    DocumentChunkResponse,
    DocumentResponse,
    DocumentUploadRequest,
    HealthResponse,
    MessageResponse,
    QuickAskResponse,
    ReportGenerateRequest,
    ReportResponse,
    ToolCallResponse,
)
from construction_ai.chat.service import ChatService
from construction_ai.core.config import AppConfig
from construction_ai.core.di_container import DIContainer
from construction_ai.core.exceptions import ValidationError
from construction_ai.core.logging import log_request
from construction_ai.documents.models import DocumentType, FileType
from construction_ai.documents.service import DocumentService
from construction_ai.reports.service import ReportService
from construction_ai.tools.calculator import calculate

router = APIRouter()


def _file_type_from_name(file_name: str) -> FileType:
    extension = Path(file_name).suffix.lstrip(".").lower()
    try:
        return FileType(extension)
    except ValueError as e:
        raise ValidationError(f"Unsupported file type: {extension or 'none'}", field="file") from e


# --- Documents ---


@router.post("/documents", response_model=DocumentResponse, status_code=201)
@inject
async def upload_document(
    request: DocumentUploadRequest,
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> DocumentResponse:
    """Upload a base64-encoded document. Processing continues in the background."""
    document = await documents.upload(
        user_id,
        request.file_name,
        request.file_type,
        request.file_data,
        request.document_type,
    )
    return DocumentResponse.model_validate(document)


@router.post("/documents/file", response_model=DocumentResponse, status_code=201)
@inject
async def upload_document_file(
    file: UploadFile = File(...),  # noqa: B008
    document_type: DocumentType | None = Form(default=None),  # noqa: B008
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> DocumentResponse:
    """Upload a document as multipart form data."""
    file_name = file.filename or "upload"
    file_type = _file_type_from_name(file_name)
    data = await file.read()
    document = await documents.upload(user_id, file_name, file_type, data, document_type)
    return DocumentResponse.model_validate(document)


@router.get("/documents", response_model=list[DocumentResponse])
@inject
async def list_documents(
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> list[DocumentResponse]:
    return [DocumentResponse.model_validate(d) for d in await documents.list(user_id)]


@router.get("/documents/{document_id}", response_model=DocumentResponse)
@inject
async def get_document(
    document_id: str,
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> DocumentResponse:
    return DocumentResponse.model_validate(await documents.get(user_id, document_id))


@router.get("/documents/{document_id}/chunks", response_model=list[DocumentChunkResponse])
@inject
async def get_document_chunks(
    document_id: str,
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> list[DocumentChunkResponse]:
    chunks = await documents.get_chunks(user_id, document_id)
    return [DocumentChunkResponse.model_validate(c) for c in chunks]


@router.delete("/documents/{document_id}")
@inject
async def delete_document(
    document_id: str,
    user_id: str = Depends(get_user_id),
    documents: DocumentService = Depends(Provide[DIContainer.document_service]),  # noqa: B008
) -> dict:
    await documents.delete(user_id, document_id)
    return {"status": "deleted", "document_id": document_id}


# --- Conversations ---


@router.post("/conversations", response_model=ConversationResponse, status_code=201)
@inject
async def create_conversation(
    request: ConversationCreate,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> ConversationResponse:
    conversation = await chat.create_conversation(user_id, request.title, request.document_ids)
    return ConversationResponse.model_validate(conversation)


@router.get("/conversations", response_model=list[ConversationResponse])
@inject
async def list_conversations(
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> list[ConversationResponse]:
    return [ConversationResponse.model_validate(c) for c in await chat.list_conversations(user_id)]


@router.get("/conversations/{conversation_id}", response_model=ConversationDetailResponse)
@inject
async def get_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> ConversationDetailResponse:
    detail = await chat.get_conversation(user_id, conversation_id)
    response = ConversationDetailResponse.model_validate(detail.conversation)
    response.messages = [MessageResponse.model_validate(m) for m in detail.messages]
    return response


@router.patch("/conversations/{conversation_id}", response_model=ConversationResponse)
@inject
async def update_conversation(
    conversation_id: str,
    request: ConversationUpdate,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> ConversationResponse:
    conversation = await chat.update_conversation(user_id, conversation_id, request.title, request.document_ids)
    return ConversationResponse.model_validate(conversation)


@router.delete("/conversations/{conversation_id}")
@inject
async def delete_conversation(
    conversation_id: str,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> dict:
    await chat.delete_conversation(user_id, conversation_id)
    return {"status": "deleted", "conversation_id": conversation_id}


# --- Chat ---


@router.post("/conversations/{conversation_id}/messages", response_model=ChatResponse)
@inject
async def send_message(
    conversation_id: str,
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> ChatResponse:
    """Send a message and get the agent's answer with citations."""
    turn = await chat.send_message(user_id, conversation_id, request.message)
    return ChatResponse(
        conversation_id=turn.conversation_id,
        user_message=MessageResponse.model_validate(turn.user_message),
        assistant_message=MessageResponse.model_validate(turn.assistant_message),
        citations=[CitationResponse.model_validate(c) for c in turn.response.citations],
        tool_calls=[ToolCallResponse.model_validate(t) for t in turn.response.tool_calls],
    )


def _event_payload(event: AgentEvent) -> dict:
    match event.type:
        case "tool":
            data = event.data.to_dict()
        case "citation":
            data = event.data.to_dict()
        case "content":
            data = {"content": event.data}
        case _:
            data = {
                "content": event.data.content,
                "citations": [c.to_dict() for c in event.data.citations],
                "tool_calls": [t.to_dict() for t in event.data.tool_calls],
            }
    return {"event": event.type, "data": json.dumps(data, default=str)}


@router.post("/conversations/{conversation_id}/messages/stream")
@inject
async def stream_message(
    conversation_id: str,
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
):
    """Send a message and stream the answer (SSE).

    Events: ``tool``, ``content`` (accumulated text), ``citation``, ``done``.
    """
    # Resolve ownership before the stream starts so a miss is a plain 404
    await chat.get_conversation(user_id, conversation_id)
    start_time = time.perf_counter()

    async def event_generator():
        try:
            async for event in chat.stream_message(user_id, conversation_id, request.message):
                yield _event_payload(event)
        except Exception as e:
            log_request(
                method="POST",
                path=f"/api/v1/conversations/{conversation_id}/messages/stream",
                user_id=user_id,
                conversation_id=conversation_id,
                user_message=request.message,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                status="error",
                error=str(e),
            )
            yield {"event": "error", "data": json.dumps({"error": str(e)})}

    return EventSourceResponse(event_generator())


@router.post("/chat/quick-ask", response_model=QuickAskResponse)
@inject
async def quick_ask(
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    chat: ChatService = Depends(Provide[DIContainer.chat_service]),  # noqa: B008
) -> QuickAskResponse:
    """Ask a one-off question; a new conversation is created for it."""
    turn = await chat.quick_ask(user_id, request.message)
    return QuickAskResponse(
        conversation_id=turn.conversation_id,
        response=turn.response.content,
        citations=[CitationResponse.model_validate(c) for c in turn.response.citations],
        tool_calls=[ToolCallResponse.model_validate(t) for t in turn.response.tool_calls],
    )


# --- Reports ---


@router.post("/reports", response_model=ReportResponse, status_code=201)
@inject
async def generate_report(
    request: ReportGenerateRequest,
    user_id: str = Depends(get_user_id),
    reports: ReportService = Depends(Provide[DIContainer.report_service]),  # noqa: B008
) -> ReportResponse:
    report = await reports.generate(
        user_id,
        request.report_type,
        title=request.title,
        document_ids=request.document_ids,
        conversation_id=request.conversation_id,
    )
    return ReportResponse.model_validate(report)


@router.get("/reports", response_model=list[ReportResponse])
@inject
async def list_reports(
    user_id: str = Depends(get_user_id),
    reports: ReportService = Depends(Provide[DIContainer.report_service]),  # noqa: B008
) -> list[ReportResponse]:
    return [ReportResponse.model_validate(r) for r in await reports.list(user_id)]


@router.get("/reports/{report_id}", response_model=ReportResponse)
@inject
async def get_report(
    report_id: str,
    user_id: str = Depends(get_user_id),
    reports: ReportService = Depends(Provide[DIContainer.report_service]),  # noqa: B008
) -> ReportResponse:
    return ReportResponse.model_validate(await reports.get(user_id, report_id))


# --- Calculations ---


@router.post("/calculations", response_model=CalculationResponse)
async def perform_calculation(
    request: CalculationRequest,
    user_id: str = Depends(get_user_id),
) -> CalculationResponse:
    """Run a calculation directly, without the agent."""
    outcome = calculate(
        request.calculation_type,
        request.values,
        formula=request.formula,
        unit_from=request.unit_from,
        unit_to=request.unit_to,
    )
    return CalculationResponse(**outcome.to_dict())


# --- Health ---


@router.get("/health", response_model=HealthResponse)
@inject
async def health(
    config: AppConfig = Depends(Provide[DIContainer.config]),  # noqa: B008
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        llm_provider=config.llm.provider,
        llm_model=config.llm.model,
        storage_backend=config.storage.backend,
    )
