"""Agent result types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from construction_ai.documents.models import Citation


@dataclass(frozen=True)
class ToolCallResult:
    """Audit record of one tool execution."""

    tool: str
    input: dict[str, Any]
    output: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"tool": self.tool, "input": self.input, "output": self.output}


@dataclass
class AgentResponse:
    """Final answer of one agent turn."""

    content: str
    citations: list[Citation] = field(default_factory=list)
    tool_calls: list[ToolCallResult] = field(default_factory=list)
    model: str | None = None
    total_tokens: int | None = None


def dedupe_citations(citations: list[Citation]) -> list[Citation]:
    """Drop citations repeating an earlier (document_id, excerpt) pair."""
    unique: dict[tuple[str, str], Citation] = {}
    for citation in citations:
        unique.setdefault(citation.key, citation)
    return list(unique.values())


@dataclass(frozen=True)
class AgentEvent:
    """One streamed event: ``tool``, ``content``, ``citation`` or ``done``."""

    type: str
    data: Any
