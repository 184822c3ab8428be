"""Shared tool-calling plumbing for langchain chat model providers."""

from __future__ import annotations

import asyncio
import base64
import json
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)

from construction_ai.core.config import LLMConfig
from construction_ai.core.exceptions import LLMError, LLMTimeoutError
from construction_ai.core.logging import get_logger
from construction_ai.llm.types import AssistantMessage, ChatMessage, Choice, LLMResponse, ToolCallRequest

logger = get_logger(__name__)


def _convert_content_block(block: dict[str, Any]) -> dict[str, Any]:
    """Translate a neutral content block into langchain's standard form.

    ``file_url`` blocks pointing at local ``file://`` storage are inlined as
    base64 since a hosted model cannot reach them.
    """
    if block.get("type") != "file_url":
        return block

    file_ref = block["file_url"]
    url = file_ref["url"]
    mime_type = file_ref.get("mime_type", "application/pdf")
    parsed = urlparse(url)

    if parsed.scheme == "file":
        path = Path(unquote(parsed.path))
        return {
            "type": "file",
            "source_type": "base64",
            "data": base64.b64encode(path.read_bytes()).decode("ascii"),
            "mime_type": mime_type,
            "filename": path.name,
        }

    return {"type": "file", "source_type": "url", "url": url, "mime_type": mime_type}


def _convert_content(content: Any) -> Any:
    if isinstance(content, list):
        return [_convert_content_block(block) if isinstance(block, dict) else block for block in content]
    return content if content is not None else ""


def to_langchain_messages(messages: list[ChatMessage]) -> list[BaseMessage]:
    """Convert neutral chat dicts to langchain message objects."""
    converted: list[BaseMessage] = []
    for message in messages:
        role = message.get("role")
        content = _convert_content(message.get("content"))

        if role == "system":
            converted.append(SystemMessage(content=content))
        elif role == "user":
            converted.append(HumanMessage(content=content))
        elif role == "assistant":
            tool_calls = [
                {
                    "id": call["id"],
                    "name": call["name"],
                    "args": json.loads(call.get("arguments") or "{}"),
                    "type": "tool_call",
                }
                for call in message.get("tool_calls", [])
            ]
            converted.append(AIMessage(content=content, tool_calls=tool_calls))
        elif role == "tool":
            converted.append(ToolMessage(content=content, tool_call_id=message["tool_call_id"]))
        else:
            raise ValueError(f"Unsupported message role: {role}")
    return converted


def _text_content(content: Any) -> str:
    """Flatten AIMessage content (string or block list) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return json.dumps(content, default=str)


def from_langchain_message(message: AIMessage) -> AssistantMessage:
    """Convert a langchain AIMessage into an AssistantMessage."""
    tool_calls = [
        ToolCallRequest(
            id=call.get("id") or f"call_{index}",
            name=call["name"],
            arguments=json.dumps(call.get("args", {})),
        )
        for index, call in enumerate(message.tool_calls or [])
    ]
    return AssistantMessage(content=_text_content(message.content), tool_calls=tool_calls)


class LangChainProvider:
    """Base class for providers backed by a langchain chat model.

    Subclasses build ``self.client`` and set ``provider_name``.
    """

    provider_name = "langchain"

    def __init__(self, config: LLMConfig, client: BaseChatModel):
        self.config = config
        self.client = client

    async def invoke(
        self,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str | None = None,
        response_format: dict[str, Any] | None = None,
    ) -> LLMResponse:
        """Invoke the model, optionally offering tools."""
        runnable: Any = self.client
        if tools:
            runnable = self.client.bind_tools(tools, tool_choice=tool_choice)
        if response_format:
            runnable, messages = self._apply_response_format(runnable, messages, response_format)

        lc_messages = to_langchain_messages(messages)

        try:
            result = await asyncio.wait_for(
                runnable.ainvoke(lc_messages),
                timeout=self.config.timeout_seconds,
            )
        except TimeoutError as e:
            logger.error(
                "llm_invoke_timeout",
                provider=self.provider_name,
                timeout_seconds=self.config.timeout_seconds,
            )
            raise LLMTimeoutError(self.provider_name, self.config.timeout_seconds) from e
        except Exception as e:
            logger.error("llm_invoke_failed", provider=self.provider_name, error=str(e))
            raise LLMError(str(e), self.provider_name) from e

        if not isinstance(result, AIMessage):
            return LLMResponse(choices=[], model=self.config.model)

        usage = result.usage_metadata or {}
        return LLMResponse(
            choices=[Choice(message=from_langchain_message(result))],
            model=self.config.model,
            total_tokens=usage.get("total_tokens"),
        )

    def _apply_response_format(
        self,
        runnable: Any,
        messages: list[ChatMessage],
        response_format: dict[str, Any],
    ) -> tuple[Any, list[ChatMessage]]:
        """Ask for JSON output through the prompt.

        Providers with a native JSON mode override this.
        """
        schema = response_format.get("json_schema", {}).get("schema", {})
        instruction = (
            "Respond ONLY with a JSON object matching this schema, no additional text:\n"
            f"{json.dumps(schema, indent=2)}"
        )
        return runnable, [{"role": "system", "content": instruction}, *messages]
