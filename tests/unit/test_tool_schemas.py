"""Tests for tool argument validation and the function palette."""

import pytest
from pydantic import ValidationError

from construction_ai.tools.schemas import (
    AnalyzeScheduleArgs,
    CalculateQuantityArgs,
    SearchDocumentsArgs,
    ToolName,
    UnknownToolError,
    parse_tool_call,
    tool_palette,
)


class TestParseToolCall:
    def test_search_documents(self):
        args = parse_tool_call("search_documents", {"query": "rebar", "document_types": ["specifications"]})

        assert isinstance(args, SearchDocumentsArgs)
        assert args.query == "rebar"
        assert args.document_types == ["specifications"]

    def test_calculate_quantity(self):
        args = parse_tool_call(
            "calculate_quantity",
            {"calculation_type": "conversion", "values": {"value": 10}, "unit_from": "ft", "unit_to": "m"},
        )

        assert isinstance(args, CalculateQuantityArgs)
        assert args.unit_to == "m"

    def test_analyze_schedule_enum(self):
        args = parse_tool_call("analyze_schedule", {"analysis_type": "critical_path"})

        assert isinstance(args, AnalyzeScheduleArgs)
        assert args.date_range is None

    def test_invalid_enum_value(self):
        with pytest.raises(ValidationError):
            parse_tool_call("analyze_schedule", {"analysis_type": "everything"})

    def test_missing_required_argument(self):
        with pytest.raises(ValidationError):
            parse_tool_call("detect_conflicts", {})

    def test_unknown_tool(self):
        with pytest.raises(UnknownToolError, match="Unknown tool: web_search"):
            parse_tool_call("web_search", {"query": "x"})


class TestToolPalette:
    def test_six_tools(self):
        names = [tool["function"]["name"] for tool in tool_palette()]

        assert names == [t.value for t in ToolName]

    def test_required_fields(self):
        required = {tool["function"]["name"]: tool["function"]["parameters"]["required"] for tool in tool_palette()}

        assert required == {
            "search_documents": ["query"],
            "calculate_quantity": ["calculation_type", "values"],
            "analyze_schedule": ["analysis_type"],
            "generate_report": ["report_type"],
            "detect_conflicts": ["topics"],
            "extract_specifications": ["spec_type"],
        }
