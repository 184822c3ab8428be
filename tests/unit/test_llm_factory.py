"""Tests for LLM Factory and the langchain provider base."""

import asyncio
import base64

import pytest
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage

from construction_ai.core.config import LLMConfig
from construction_ai.core.exceptions import ConfigurationError, LLMError, LLMTimeoutError
from construction_ai.llm.base import LangChainProvider, from_langchain_message, to_langchain_messages
from construction_ai.llm.factory import LLMFactory
from construction_ai.llm.types import file_content_block


class TestLLMFactory:
    """Test cases for LLM Factory."""

    def test_available_providers(self):
        """Test that providers are registered."""
        providers = LLMFactory.available_providers()
        assert "openai" in providers
        assert "anthropic" in providers
        assert "ollama" in providers

    def test_create_openai_provider(self):
        """Test creating OpenAI provider."""
        config = LLMConfig(
            provider="openai",
            model="gpt-4o-mini",
            openai_api_key="test-key",
        )
        provider = LLMFactory.create(config)
        assert provider.__class__.__name__ == "OpenAIProvider"

    def test_create_ollama_provider(self):
        """Test creating Ollama provider."""
        config = LLMConfig(
            provider="ollama",
            model="llama3.1:8b",
            base_url="http://localhost:11434",
        )
        provider = LLMFactory.create(config)
        assert provider.__class__.__name__ == "OllamaProvider"

    def test_unknown_provider_raises(self):
        """Test that unknown provider raises error."""
        config = LLMConfig(provider="unknown", model="x")
        with pytest.raises(ConfigurationError) as exc_info:
            LLMFactory.create(config)
        assert "Unknown LLM provider" in str(exc_info.value.message)


class SlowClient:
    async def ainvoke(self, messages):
        await asyncio.sleep(1)


class BrokenClient:
    async def ainvoke(self, messages):
        raise RuntimeError("rate limited")


class TestLangChainProvider:
    """Test cases for the shared langchain invocation path."""

    @pytest.mark.asyncio
    async def test_invoke_returns_content(self):
        client = GenericFakeChatModel(messages=iter([AIMessage(content="Concrete is 4000 psi.")]))
        provider = LangChainProvider(LLMConfig(model="fake-model"), client)

        response = await provider.invoke([{"role": "user", "content": "strength?"}])

        assert response.model == "fake-model"
        assert response.message.content == "Concrete is 4000 psi."
        assert response.message.tool_calls == []

    @pytest.mark.asyncio
    async def test_timeout(self):
        provider = LangChainProvider(LLMConfig(model="x", timeout_seconds=0.01), SlowClient())

        with pytest.raises(LLMTimeoutError) as exc_info:
            await provider.invoke([{"role": "user", "content": "hi"}])

        assert exc_info.value.code == "LLM_TIMEOUT"

    @pytest.mark.asyncio
    async def test_client_failure(self):
        provider = LangChainProvider(LLMConfig(model="x"), BrokenClient())

        with pytest.raises(LLMError, match="rate limited"):
            await provider.invoke([{"role": "user", "content": "hi"}])


class TestMessageConversion:
    """Test cases for neutral <-> langchain message conversion."""

    def test_roles(self):
        messages = to_langchain_messages(
            [
                {"role": "system", "content": "sys"},
                {"role": "user", "content": "question"},
                {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [{"id": "call_0", "name": "search_documents", "arguments": '{"query": "x"}'}],
                },
                {"role": "tool", "tool_call_id": "call_0", "content": "{}"},
            ]
        )

        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, ToolMessage]
        assert messages[2].tool_calls[0]["args"] == {"query": "x"}
        assert messages[3].tool_call_id == "call_0"

    def test_unknown_role(self):
        with pytest.raises(ValueError, match="Unsupported message role"):
            to_langchain_messages([{"role": "narrator", "content": "x"}])

    def test_local_file_inlined(self, tmp_path):
        path = tmp_path / "plan.pdf"
        path.write_bytes(b"%PDF-1.4")

        (message,) = to_langchain_messages(
            [{"role": "user", "content": [file_content_block(path.as_uri(), "application/pdf")]}]
        )

        block = message.content[0]
        assert block["type"] == "file"
        assert block["source_type"] == "base64"
        assert base64.b64decode(block["data"]) == b"%PDF-1.4"
        assert block["filename"] == "plan.pdf"

    def test_remote_file_kept_as_url(self):
        (message,) = to_langchain_messages(
            [{"role": "user", "content": [file_content_block("https://files.example.com/a.pdf", "application/pdf")]}]
        )

        assert message.content[0] == {
            "type": "file",
            "source_type": "url",
            "url": "https://files.example.com/a.pdf",
            "mime_type": "application/pdf",
        }

    def test_from_langchain_tool_calls(self):
        message = AIMessage(
            content=[{"type": "text", "text": "Looking "}, {"type": "text", "text": "it up"}],
            tool_calls=[{"id": "abc", "name": "search_documents", "args": {"query": "rebar"}, "type": "tool_call"}],
        )

        converted = from_langchain_message(message)

        assert converted.content == "Looking it up"
        assert converted.tool_calls[0].id == "abc"
        assert converted.tool_calls[0].parsed_arguments() == {"query": "rebar"}
