"""LLM provider registry."""

from construction_ai.core.config import LLMConfig
from construction_ai.core.exceptions import ConfigurationError
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import LLMProvider

logger = get_logger(__name__)


class LLMFactory:
    """Providers register by name with ``@LLMFactory.register("name")``.

    ``LLM_PROVIDER`` picks one at startup.
    """

    _registry: dict[str, type] = {}

    @classmethod
    def register(cls, name: str):
        def decorator(provider_cls: type) -> type:
            cls._registry[name] = provider_cls
            return provider_cls

        return decorator

    @classmethod
    def create(cls, config: LLMConfig) -> LLMProvider:
        """Build the configured provider.

        Raises:
            ConfigurationError: Unknown provider name, or the underlying chat
                model rejected the settings (missing API key, bad URL, ...)
        """
        provider_cls = cls._registry.get(config.provider)
        if provider_cls is None:
            available = ", ".join(sorted(cls._registry)) or "none registered"
            raise ConfigurationError(f"Unknown LLM provider: '{config.provider}'. Available: {available}")

        try:
            provider = provider_cls(config)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid settings for LLM provider '{config.provider}': {e}") from e

        logger.info(
            "llm_provider_created",
            provider=config.provider,
            model=config.model,
            timeout_seconds=config.timeout_seconds,
        )
        return provider

    @classmethod
    def available_providers(cls) -> list[str]:
        return sorted(cls._registry)
