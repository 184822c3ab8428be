"""Factory for creating repository sets by storage backend."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from construction_ai.core.config import StorageConfig
from construction_ai.core.exceptions import ConfigurationError
from construction_ai.core.protocols import (
    ChunkRepository,
    ConversationRepository,
    DocumentRepository,
    MessageRepository,
    ReportRepository,
)


@dataclass(frozen=True)
class Repositories:
    """All entity repositories of one storage backend."""

    documents: DocumentRepository
    chunks: ChunkRepository
    conversations: ConversationRepository
    messages: MessageRepository
    reports: ReportRepository


class StorageFactory:
    """Factory for repository sets using the registry pattern."""

    _registry: dict[str, Callable[[], Repositories]] = {}

    @classmethod
    def register(cls, backend: str):
        """Decorator to register a repository-set builder.

        Usage:
            @StorageFactory.register("in_memory")
            def create_in_memory_repositories() -> Repositories:
                ...
        """

        def decorator(builder: Callable[[], Repositories]) -> Callable[[], Repositories]:
            cls._registry[backend] = builder
            return builder

        return decorator

    @classmethod
    def create(cls, config: StorageConfig) -> Repositories:
        """Create repositories for the configured backend.

        Raises:
            ConfigurationError: If backend is not registered
        """
        builder = cls._registry.get(config.backend)
        if builder is None:
            raise ConfigurationError(
                f"Unknown storage backend: {config.backend}. Available: {list(cls._registry.keys())}"
            )
        return builder()

    @classmethod
    def available_backends(cls) -> list[str]:
        return list(cls._registry.keys())
