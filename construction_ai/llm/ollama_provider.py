"""Ollama LLM Provider for local models."""

from langchain_ollama import ChatOllama

from construction_ai.core.config import LLMConfig
from construction_ai.core.logging import get_logger
from construction_ai.llm.base import LangChainProvider
from construction_ai.llm.factory import LLMFactory

logger = get_logger(__name__)


@LLMFactory.register("ollama")
class OllamaProvider(LangChainProvider):
    """Ollama local LLM provider using langchain-ollama.

    File content blocks are only understood by multimodal local models.
    """

    provider_name = "ollama"

    def __init__(self, config: LLMConfig):
        base_url = config.base_url or "http://localhost:11434"
        client = ChatOllama(
            model=config.model,
            base_url=base_url,
            temperature=config.temperature,
            num_predict=config.max_tokens,
        )
        super().__init__(config, client)
        logger.info("ollama_provider_initialized", model=config.model, base_url=base_url)
