"""Custom exception hierarchy."""

from typing import Any


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class LLMError(AppError):
    """LLM communication error."""

    def __init__(self, message: str, provider: str):
        self.provider = provider
        super().__init__(message, code="LLM_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"]["details"] = {"provider": self.provider}
        return result


class LLMTimeoutError(LLMError):
    """LLM call exceeded the configured timeout."""

    def __init__(self, provider: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"LLM call timed out after {timeout_seconds}s", provider)
        self.code = "LLM_TIMEOUT"


class ExtractionError(AppError):
    """Document text extraction failed."""

    def __init__(self, message: str, document_id: str):
        self.document_id = document_id
        super().__init__(message, code="EXTRACTION_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"]["details"] = {"document_id": self.document_id}
        return result


class NotFoundError(AppError):
    """Entity missing or not owned by the requesting user."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}", code="NOT_FOUND")


class ValidationError(AppError):
    """Invalid input."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, code="VALIDATION_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["error"]["details"] = {"field": self.field}
        return result


class ConfigurationError(AppError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")
