"""OpenAI LLM Provider."""

from typing import Any
from typing_extensions import override

from langchain_openai import ChatOpenAI

from construction_ai.core.config import LLMConfig
from construction_ai.llm.base import LangChainProvider
from construction_ai.llm.factory import LLMFactory
from construction_ai.llm.types import ChatMessage


@LLMFactory.register("openai")
class OpenAIProvider(LangChainProvider):
    """OpenAI API provider using langchain-openai."""

    provider_name = "openai"

    def __init__(self, config: LLMConfig):
        client_kwargs = {
            "model": config.model,
            "api_key": config.openai_api_key,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if config.base_url:
            client_kwargs["openai_api_base"] = config.base_url
        super().__init__(config, ChatOpenAI(**client_kwargs))

    @override
    def _apply_response_format(
        self,
        runnable: Any,
        messages: list[ChatMessage],
        response_format: dict[str, Any],
    ) -> tuple[Any, list[ChatMessage]]:
        """Use OpenAI's native structured output."""
        return runnable.bind(response_format=response_format), messages
