"""Text extraction from uploaded files."""

from __future__ import annotations

import math
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from construction_ai.core.exceptions import ExtractionError
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import BlobStore, LLMProvider
from construction_ai.documents.models import Document, FileType
from construction_ai.llm.types import file_content_block

logger = get_logger(__name__)

PAGE_BREAK_MARKER = "[PAGE BREAK]"

PDF_EXTRACTION_PROMPT = f"""You are a document text extraction assistant. Extract ALL text content from the provided PDF document.
Preserve the document structure including:
- Section headers and numbers
- Paragraph breaks
- Lists and bullet points
- Tables (convert to readable text format)
- Page breaks (indicate with {PAGE_BREAK_MARKER})

Output the complete extracted text without any commentary or summarization."""

DOCX_EXTRACTION_PROMPT = "Extract all text content from the provided document. Preserve structure and formatting."


@dataclass(frozen=True)
class ExtractedText:
    text: str
    page_count: int | None


class TextExtractor:
    """Turns a stored file into plain text.

    PDF and Word files are read by the LLM from their storage URL; plain
    text is fetched and decoded directly.
    """

    def __init__(
        self,
        llm: LLMProvider,
        blob_store: BlobStore,
        chars_per_page: int = 3000,
        http_timeout: float = 30.0,
    ):
        self.llm = llm
        self.blob_store = blob_store
        self.chars_per_page = chars_per_page
        self.http_timeout = http_timeout

    async def extract(self, document: Document) -> ExtractedText:
        """Extract text and a page count for ``document``.

        Raises:
            ExtractionError: The file could not be read or the model returned nothing
        """
        match document.file_type:
            case FileType.PDF:
                text = await self._extract_with_llm(
                    document,
                    PDF_EXTRACTION_PROMPT,
                    "Extract all text content from this PDF document. Preserve structure and formatting.",
                )
                return ExtractedText(text=text, page_count=text.count(PAGE_BREAK_MARKER) + 1)
            case FileType.DOCX:
                text = await self._extract_with_llm(
                    document,
                    DOCX_EXTRACTION_PROMPT,
                    "Extract all text content from this document.",
                )
                # Word files carry no reliable page markers
                return ExtractedText(text=text, page_count=None)
            case FileType.TXT:
                text = await self._fetch_text(document)
                return ExtractedText(text=text, page_count=max(1, math.ceil(len(text) / self.chars_per_page)))
            case _:
                raise ExtractionError(f"Unsupported file type: {document.file_type}", document.id)

    async def _extract_with_llm(self, document: Document, system_prompt: str, instruction: str) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {
                "role": "user",
                "content": [
                    file_content_block(document.storage_url, document.file_type.content_type),
                    {"type": "text", "text": instruction},
                ],
            },
        ]
        response = await self.llm.invoke(messages)
        message = response.message
        if message is None or not message.content.strip():
            raise ExtractionError("Model returned no extracted text", document.id)

        logger.debug("llm_extraction_complete", document_id=document.id, chars=len(message.content))
        return message.content

    async def _fetch_text(self, document: Document) -> str:
        scheme = urlparse(document.storage_url).scheme
        try:
            if scheme in ("http", "https"):
                async with httpx.AsyncClient(timeout=self.http_timeout) as client:
                    response = await client.get(document.storage_url)
                    response.raise_for_status()
                    data = response.content
            else:
                data = await self.blob_store.get(document.storage_key)
            return data.decode("utf-8")
        except (httpx.HTTPError, OSError, UnicodeDecodeError) as e:
            raise ExtractionError(f"Failed to read text file: {e}", document.id) from e
