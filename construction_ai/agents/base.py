"""Base agent abstract class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from construction_ai.agents.models import AgentResponse
    from construction_ai.core.protocols import LLMProvider
    from construction_ai.llm.types import ChatMessage


class BaseAgent(ABC):
    """Base class for agents.

    - LLM dependency injected via constructor
    - One call to ``run`` answers one user turn
    """

    def __init__(self, llm: LLMProvider):
        self.llm = llm

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent identifier."""
        ...

    @abstractmethod
    async def run(self, user_id: str, message: str, history: list[ChatMessage] | None = None) -> AgentResponse:
        """Answer ``message`` in the context of ``history``."""
        ...
