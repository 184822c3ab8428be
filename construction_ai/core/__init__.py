"""Core infrastructure module - config, protocols, exceptions, logging."""

from construction_ai.core.config import AppConfig, LLMConfig, get_config
from construction_ai.core.exceptions import (
    AppError,
    ExtractionError,
    LLMError,
    LLMTimeoutError,
    NotFoundError,
)

__all__ = [
    "AppConfig",
    "LLMConfig",
    "get_config",
    "AppError",
    "LLMError",
    "LLMTimeoutError",
    "ExtractionError",
    "NotFoundError",
]
