"""Chat model providers behind the tool-calling ``invoke`` interface."""

# Provider modules register themselves with the factory on import
from construction_ai.llm import anthropic_provider, ollama_provider, openai_provider
from construction_ai.llm.base import LangChainProvider
from construction_ai.llm.factory import LLMFactory

__all__ = ["LLMFactory", "LangChainProvider"]
