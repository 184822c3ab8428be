"""Dependency Injector based DI Container."""

from dependency_injector import containers, providers

from construction_ai.core.config import get_config

# --- Factory Functions (defined before class to avoid NameError) ---


def _create_llm(config):
    """Create LLM provider."""
    from construction_ai.llm import LLMFactory

    return LLMFactory.create(config)


def _create_repositories(config):
    """Create the repository set for the configured storage backend."""
    from construction_ai.storage import StorageFactory

    return StorageFactory.create(config)


def _create_blob_store(config):
    from construction_ai.storage import LocalBlobStore

    return LocalBlobStore(config.blob_dir)


def _create_notifier(config):
    """Webhook notifier when a URL is configured, log-only otherwise."""
    from construction_ai.notifications import LoggingNotifier, WebhookNotifier

    if config.webhook_url:
        return WebhookNotifier(config.webhook_url, timeout_seconds=config.timeout_seconds)
    return LoggingNotifier()


def _create_search(repositories, config):
    from construction_ai.documents.search import DocumentSearch

    return DocumentSearch(
        repositories.documents,
        repositories.chunks,
        max_results=config.max_results,
        excerpt_length=config.excerpt_length,
    )


def _create_processor(repositories, llm, blob_store, config):
    from construction_ai.documents.chunker import BoundaryAwareChunker
    from construction_ai.documents.extraction import TextExtractor
    from construction_ai.documents.processor import DocumentProcessor

    return DocumentProcessor(
        repositories.documents,
        repositories.chunks,
        TextExtractor(llm, blob_store, chars_per_page=config.chars_per_page),
        BoundaryAwareChunker(
            chunk_size=config.chunk_size,
            overlap=config.chunk_overlap,
            min_length=config.min_chunk_length,
        ),
    )


def _create_analyzer(llm, config):
    """Create metadata analyzer (None when analysis is disabled)."""
    from construction_ai.documents.analyzer import MetadataAnalyzer

    if not config.analyze_metadata:
        return None
    return MetadataAnalyzer(llm, sample_chars=config.metadata_sample_chars)


def _create_agent(llm, repositories, search, notifier, config):
    from construction_ai.agents.construction_agent import ConstructionAgent
    from construction_ai.tools.executor import ToolExecutor

    return ConstructionAgent(
        llm,
        repositories.documents,
        ToolExecutor(search, notifier),
        history_window=config.agent.history_window,
        history_max_tokens=config.agent.history_max_tokens,
        model_name=config.llm.model,
    )


def _create_document_service(repositories, blob_store, processor, analyzer, notifier):
    from construction_ai.documents.service import DocumentService

    return DocumentService(
        repositories.documents,
        repositories.chunks,
        blob_store,
        processor,
        analyzer,
        notifier,
    )


def _create_chat_service(repositories, agent, config):
    from construction_ai.chat.service import ChatService

    return ChatService(
        repositories.conversations,
        repositories.messages,
        agent,
        history_window=config.history_window,
    )


def _create_report_service(repositories, agent):
    from construction_ai.reports.service import ReportService

    return ReportService(repositories.reports, agent)


class DIContainer(containers.DeclarativeContainer):
    """Main dependency injection container."""

    # Configuration provider
    config = providers.Singleton(get_config)

    # LLM Provider
    llm = providers.Singleton(
        _create_llm,
        config=config.provided.llm,
    )

    # Storage
    repositories = providers.Singleton(
        _create_repositories,
        config=config.provided.storage,
    )

    blob_store = providers.Singleton(
        _create_blob_store,
        config=config.provided.storage,
    )

    # Owner notifications
    notifier = providers.Singleton(
        _create_notifier,
        config=config.provided.notifications,
    )

    # Retrieval
    search = providers.Singleton(
        _create_search,
        repositories=repositories,
        config=config.provided.search,
    )

    # Ingestion
    processor = providers.Singleton(
        _create_processor,
        repositories=repositories,
        llm=llm,
        blob_store=blob_store,
        config=config.provided.processing,
    )

    analyzer = providers.Singleton(
        _create_analyzer,
        llm=llm,
        config=config.provided.processing,
    )

    # Agent
    agent = providers.Singleton(
        _create_agent,
        llm=llm,
        repositories=repositories,
        search=search,
        notifier=notifier,
        config=config,
    )

    # Services
    document_service = providers.Singleton(
        _create_document_service,
        repositories=repositories,
        blob_store=blob_store,
        processor=processor,
        analyzer=analyzer,
        notifier=notifier,
    )

    chat_service = providers.Singleton(
        _create_chat_service,
        repositories=repositories,
        agent=agent,
        config=config.provided.agent,
    )

    report_service = providers.Singleton(
        _create_report_service,
        repositories=repositories,
        agent=agent,
    )


# Global container instance
container = DIContainer()
