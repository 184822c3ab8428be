"""Tests for LLM metadata analysis."""

import json

import pytest
from conftest import MockLLM, text_response

from construction_ai.core.exceptions import LLMError
from construction_ai.documents.analyzer import MetadataAnalyzer
from construction_ai.documents.models import DocumentType


class TestMetadataAnalyzer:
    @pytest.mark.asyncio
    async def test_parses_model_json(self):
        payload = {
            "title": "Bridge Rehabilitation",
            "documentType": "special_provisions",
            "keywords": ["concrete", "bridge"],
            "sections": ["SP-1 Scope"],
        }
        llm = MockLLM(text_response(json.dumps(payload)))

        metadata = await MetadataAnalyzer(llm).analyze("provisions.pdf", "Special provisions text")

        assert metadata.title == "Bridge Rehabilitation"
        assert metadata.document_type == DocumentType.SPECIAL_PROVISIONS
        assert metadata.keywords == ["concrete", "bridge"]
        assert metadata.sections == ["SP-1 Scope"]
        assert llm.calls[0]["response_format"]["json_schema"]["name"] == "document_metadata"

    @pytest.mark.asyncio
    async def test_samples_leading_text(self):
        llm = MockLLM(text_response("{}"))

        await MetadataAnalyzer(llm, sample_chars=10).analyze("a.txt", "0123456789ABCDEF")

        user_message = llm.calls[0]["messages"][1]["content"]
        assert "Filename: a.txt" in user_message
        assert user_message.endswith("0123456789")

    @pytest.mark.asyncio
    async def test_unparseable_output_defaults(self):
        llm = MockLLM(text_response("not json at all"))

        metadata = await MetadataAnalyzer(llm).analyze("a.txt", "text")

        assert metadata.document_type == DocumentType.OTHER
        assert metadata.keywords == []

    @pytest.mark.asyncio
    async def test_unknown_document_type_defaults(self):
        llm = MockLLM(text_response(json.dumps({"documentType": "blueprints"})))

        metadata = await MetadataAnalyzer(llm).analyze("a.txt", "text")

        assert metadata.document_type == DocumentType.OTHER

    @pytest.mark.asyncio
    async def test_llm_errors_propagate(self):
        llm = MockLLM(LLMError("rate limited", "openai"))

        with pytest.raises(LLMError):
            await MetadataAnalyzer(llm).analyze("a.txt", "text")
