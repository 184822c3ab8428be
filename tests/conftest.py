"""Common test fixtures."""

import json

import pytest

from construction_ai.core.config import (
    AgentConfig,
    AppConfig,
    LLMConfig,
    ProcessingConfig,
    SearchConfig,
    StorageConfig,
)
from construction_ai.core.di_container import container as di_container
from construction_ai.documents.chunker import BoundaryAwareChunker
from construction_ai.documents.extraction import TextExtractor
from construction_ai.documents.models import Document, DocumentChunk, DocumentType, FileType, ProcessingStatus
from construction_ai.documents.processor import DocumentProcessor
from construction_ai.documents.search import DocumentSearch
from construction_ai.llm.types import AssistantMessage, Choice, LLMResponse, ToolCallRequest
from construction_ai.storage.blob import LocalBlobStore
from construction_ai.storage.memory import create_in_memory_repositories


def text_response(content: str) -> LLMResponse:
    """LLM reply with plain content and no tool calls."""
    return LLMResponse(choices=[Choice(AssistantMessage(content=content))], model="mock-model", total_tokens=10)


def tool_call_response(*calls: tuple[str, dict]) -> LLMResponse:
    """LLM reply requesting the given (name, arguments) tool calls."""
    requests = [
        ToolCallRequest(id=f"call_{i}", name=name, arguments=json.dumps(args)) for i, (name, args) in enumerate(calls)
    ]
    return LLMResponse(choices=[Choice(AssistantMessage(tool_calls=requests))], model="mock-model", total_tokens=5)


class MockLLM:
    """Scripted LLM provider for testing.

    Returns (or raises) the scripted items in order, then a default reply.
    Every call is recorded.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.calls: list[dict] = []

    async def invoke(self, messages, tools=None, tool_choice=None, response_format=None) -> LLMResponse:
        self.calls.append(
            {
                "messages": messages,
                "tools": tools,
                "tool_choice": tool_choice,
                "response_format": response_format,
            }
        )
        if not self.script:
            return text_response("This is a mock response.")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingNotifier:
    """Notifier that remembers what it was asked to send."""

    def __init__(self, succeed: bool = True):
        self.sent: list[tuple[str, str]] = []
        self.succeed = succeed

    async def notify(self, title: str, content: str) -> bool:
        self.sent.append((title, content))
        return self.succeed


@pytest.fixture
def test_config(tmp_path) -> AppConfig:
    """Create test configuration."""
    return AppConfig(
        debug=True,
        log_level="DEBUG",
        llm=LLMConfig(provider="openai", model="gpt-4o-mini", openai_api_key="test-key"),
        processing=ProcessingConfig(),
        search=SearchConfig(),
        agent=AgentConfig(history_window=10, history_max_tokens=0),
        storage=StorageConfig(backend="in_memory", blob_dir=str(tmp_path / "blobs")),
    )


@pytest.fixture
def mock_llm() -> MockLLM:
    """Create mock LLM provider."""
    return MockLLM()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def repositories():
    """Fresh in-memory repositories."""
    return create_in_memory_repositories()


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def search(repositories) -> DocumentSearch:
    return DocumentSearch(repositories.documents, repositories.chunks)


def make_processor(repositories, llm, blob_store) -> DocumentProcessor:
    return DocumentProcessor(
        repositories.documents,
        repositories.chunks,
        TextExtractor(llm, blob_store),
        BoundaryAwareChunker(),
    )


async def seed_document(
    repositories,
    user_id: str,
    name: str,
    chunks: list[str],
    document_type: DocumentType = DocumentType.SPECIFICATIONS,
    page_count: int | None = 3,
) -> Document:
    """Store a completed document with the given chunk contents."""
    document = await repositories.documents.create(
        Document(
            user_id=user_id,
            original_name=name,
            file_type=FileType.TXT,
            file_size=sum(len(c) for c in chunks),
            storage_key=f"documents/{user_id}/{name}",
            storage_url=f"file:///tmp/{name}",
            document_type=document_type,
            processing_status=ProcessingStatus.COMPLETED,
            page_count=page_count,
        )
    )
    await repositories.chunks.create_many(
        [
            DocumentChunk(
                document_id=document.id,
                user_id=user_id,
                chunk_index=i,
                content=content,
                page_number=1,
                section_title="03300 Cast in Place Concrete",
            )
            for i, content in enumerate(chunks)
        ]
    )
    return document


@pytest.fixture
def di_container_fixture():
    """Provide the DI container for testing."""
    yield di_container


@pytest.fixture
def override_llm(mock_llm):
    """Override LLM provider in DI container."""
    with di_container.llm.override(mock_llm):
        yield
