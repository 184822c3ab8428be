"""Anthropic LLM Provider."""

from langchain_anthropic import ChatAnthropic

from construction_ai.core.config import LLMConfig
from construction_ai.llm.base import LangChainProvider
from construction_ai.llm.factory import LLMFactory


@LLMFactory.register("anthropic")
class AnthropicProvider(LangChainProvider):
    """Anthropic API provider using langchain-anthropic.

    Supports custom base_url for Anthropic-compatible APIs.
    """

    provider_name = "anthropic"

    def __init__(self, config: LLMConfig):
        client_kwargs = {
            "model": config.model,
            "api_key": config.anthropic_api_key,
            "temperature": config.temperature,
            "max_tokens": config.max_tokens,
        }
        if config.base_url:
            client_kwargs["anthropic_api_url"] = config.base_url
        super().__init__(config, ChatAnthropic(**client_kwargs))
