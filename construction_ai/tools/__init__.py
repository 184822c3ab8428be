"""Agent tools: calculation engine, argument schemas and dispatch."""

from construction_ai.tools.calculator import CalculationError, CalculationResult, calculate
from construction_ai.tools.schemas import ToolName, parse_tool_call, tool_palette

__all__ = [
    "CalculationError",
    "CalculationResult",
    "ToolName",
    "calculate",
    "parse_tool_call",
    "tool_palette",
]
