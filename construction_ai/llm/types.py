"""Provider-neutral request/response shapes for LLM invocation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

# A chat message as sent to a provider:
#   {"role": "system" | "user" | "assistant" | "tool", "content": str | list[dict], ...}
# Assistant messages may carry "tool_calls"; tool messages carry "tool_call_id".
ChatMessage = dict[str, Any]


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool invocation requested by the model."""

    id: str
    name: str
    arguments: str  # JSON-encoded

    def parsed_arguments(self) -> dict[str, Any]:
        """Decode the JSON arguments; raises ValueError when malformed."""
        decoded = json.loads(self.arguments or "{}")
        if not isinstance(decoded, dict):
            raise ValueError("tool arguments must be a JSON object")
        return decoded


@dataclass
class AssistantMessage:
    """Message produced by the model."""

    content: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)

    def to_chat_message(self) -> ChatMessage:
        """Convert to the dict form used in follow-up requests."""
        message: ChatMessage = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [
                {"id": call.id, "name": call.name, "arguments": call.arguments}
                for call in self.tool_calls
            ]
        return message


@dataclass
class Choice:
    message: AssistantMessage | None


@dataclass
class LLMResponse:
    """Result of one model invocation."""

    choices: list[Choice] = field(default_factory=list)
    model: str | None = None
    total_tokens: int | None = None

    @property
    def message(self) -> AssistantMessage | None:
        """First choice's message, if the model produced one."""
        if not self.choices:
            return None
        return self.choices[0].message


def tool_result_message(tool_call_id: str, output: dict[str, Any]) -> ChatMessage:
    """Build the message that feeds a tool's output back to the model."""
    return {
        "role": "tool",
        "tool_call_id": tool_call_id,
        "content": json.dumps(output, default=str),
    }


def file_content_block(url: str, mime_type: str) -> dict[str, Any]:
    """Content block referencing a stored file by URL."""
    return {"type": "file_url", "file_url": {"url": url, "mime_type": mime_type}}
