"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


class LLMConfig(BaseSettings):
    """LLM provider configuration."""

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.2
    max_tokens: int = 4096
    base_url: str | None = None
    timeout_seconds: float = 120.0

    # API keys (used based on provider)
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    model_config = SettingsConfigDict(env_prefix="LLM_")


class ProcessingConfig(BaseSettings):
    """Document ingestion configuration."""

    chunk_size: int = 2000
    chunk_overlap: int = 200
    min_chunk_length: int = 50
    chars_per_page: int = 3000
    metadata_sample_chars: int = 5000
    analyze_metadata: bool = True

    model_config = SettingsConfigDict(env_prefix="PROCESSING_")


class SearchConfig(BaseSettings):
    """Keyword retrieval configuration."""

    max_results: int = 10
    excerpt_length: int = 200

    model_config = SettingsConfigDict(env_prefix="SEARCH_")


class AgentConfig(BaseSettings):
    """Chat agent configuration."""

    history_window: int = 10
    history_max_tokens: int = 8000

    model_config = SettingsConfigDict(env_prefix="AGENT_")


class StorageConfig(BaseSettings):
    """Repository and blob storage configuration."""

    backend: str = "in_memory"
    blob_dir: str = str(_project_root / "data" / "blobs")

    model_config = SettingsConfigDict(env_prefix="STORAGE_")


class NotificationConfig(BaseSettings):
    """Owner notification configuration."""

    webhook_url: str | None = None
    timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    app_name: str = "Construction Document Assistant"
    debug: bool = False
    log_level: str = "INFO"
    log_to_file: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list = Field(default_factory=lambda: ["*"])

    llm: LLMConfig = Field(default_factory=LLMConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    model_config = SettingsConfigDict(env_file=str(_env_file), env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
