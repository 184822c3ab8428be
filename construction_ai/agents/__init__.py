"""Agent implementations."""

from construction_ai.agents.base import BaseAgent
from construction_ai.agents.construction_agent import ConstructionAgent
from construction_ai.agents.models import AgentEvent, AgentResponse, ToolCallResult

__all__ = ["AgentEvent", "AgentResponse", "BaseAgent", "ConstructionAgent", "ToolCallResult"]
