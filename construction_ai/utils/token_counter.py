"""Token counting utility using tiktoken."""

from __future__ import annotations

from functools import lru_cache

import tiktoken

from construction_ai.core.logging import get_logger

logger = get_logger(__name__)

# Per-message structural overhead (<|start|>{role}\n{content}<|end|>\n)
MESSAGE_OVERHEAD_TOKENS = 4


@lru_cache(maxsize=8)
def get_encoding_for_model(model: str) -> tiktoken.Encoding:
    """Get the tokenizer encoding for a model.

    Non-OpenAI models are approximated with cl100k_base.
    """
    try:
        return tiktoken.encoding_for_model(model.lower())
    except KeyError:
        return tiktoken.get_encoding("cl100k_base")


def count_message_tokens(message: dict, model: str = "gpt-4o") -> int:
    """Count tokens for a single text message."""
    encoding = get_encoding_for_model(model)
    content = message.get("content") or ""
    if not isinstance(content, str):
        content = str(content)
    return len(encoding.encode(message.get("role", ""))) + len(encoding.encode(content)) + MESSAGE_OVERHEAD_TOKENS


def trim_history(history: list[dict], max_tokens: int, model: str = "gpt-4o") -> list[dict]:
    """Keep the most recent messages whose combined size fits ``max_tokens``.

    Oldest messages are dropped first. A non-positive limit disables trimming.
    """
    if max_tokens <= 0 or not history:
        return list(history)

    kept: list[dict] = []
    total = 0
    for message in reversed(history):
        tokens = count_message_tokens(message, model)
        if total + tokens > max_tokens:
            break
        kept.append(message)
        total += tokens
    kept.reverse()

    if len(kept) < len(history):
        logger.debug(
            "history_truncated",
            original_count=len(history),
            kept_count=len(kept),
            tokens=total,
        )
    return kept
