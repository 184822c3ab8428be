"""LLM-based document metadata analysis."""

from __future__ import annotations

import json

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import LLMProvider
from construction_ai.documents.models import DocumentType

logger = get_logger(__name__)

METADATA_ANALYSIS_PROMPT = """Analyze this construction document and extract metadata. Return JSON with:
- title: Document title if found
- documentType: One of: project_plans, specifications, standard_plans, special_provisions, cpm_schedule, other
- keywords: Array of relevant construction keywords
- sections: Array of main section titles found"""

METADATA_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "document_metadata",
        "strict": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string"},
                "documentType": {"type": "string", "enum": [t.value for t in DocumentType]},
                "keywords": {"type": "array", "items": {"type": "string"}},
                "sections": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["documentType", "keywords", "sections"],
            "additionalProperties": False,
        },
    },
}


class DocumentMetadata(BaseModel):
    """Metadata the model infers from a document's opening text."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    document_type: DocumentType = Field(default=DocumentType.OTHER, alias="documentType")
    keywords: list[str] = Field(default_factory=list)
    sections: list[str] = Field(default_factory=list)


class MetadataAnalyzer:
    """Classifies a document and pulls keywords and section titles."""

    def __init__(self, llm: LLMProvider, sample_chars: int = 5000):
        self.llm = llm
        self.sample_chars = sample_chars

    async def analyze(self, original_name: str, extracted_text: str) -> DocumentMetadata:
        """Analyze a sample of the text.

        Unparseable model output falls back to an ``other`` document with no
        keywords or sections. LLM errors propagate.
        """
        messages = [
            {"role": "system", "content": METADATA_ANALYSIS_PROMPT},
            {
                "role": "user",
                "content": (
                    f"Filename: {original_name}\n\n"
                    f"Document content (first {self.sample_chars} chars):\n"
                    f"{extracted_text[: self.sample_chars]}"
                ),
            },
        ]
        response = await self.llm.invoke(messages, response_format=METADATA_RESPONSE_FORMAT)
        message = response.message
        if message is None or not message.content:
            return DocumentMetadata()

        try:
            return DocumentMetadata.model_validate(json.loads(message.content))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning("metadata_analysis_unparseable", file_name=original_name, error=str(e))
            return DocumentMetadata()
