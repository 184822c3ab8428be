"""Argument models and function schemas for the agent's tool palette."""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from construction_ai.documents.models import DocumentType
from construction_ai.reports.models import ReportType
from construction_ai.tools.calculator import CalculationType


class ToolName(StrEnum):
    SEARCH_DOCUMENTS = "search_documents"
    CALCULATE_QUANTITY = "calculate_quantity"
    ANALYZE_SCHEDULE = "analyze_schedule"
    GENERATE_REPORT = "generate_report"
    DETECT_CONFLICTS = "detect_conflicts"
    EXTRACT_SPECIFICATIONS = "extract_specifications"


class ScheduleAnalysisType(StrEnum):
    CRITICAL_PATH = "critical_path"
    MILESTONES = "milestones"
    DEPENDENCIES = "dependencies"
    TIMELINE = "timeline"
    DELAYS = "delays"
    SUMMARY = "summary"


class DateRange(BaseModel):
    start: str | None = None
    end: str | None = None


class SearchDocumentsArgs(BaseModel):
    tool: Literal[ToolName.SEARCH_DOCUMENTS] = ToolName.SEARCH_DOCUMENTS
    query: str
    document_types: list[DocumentType] | None = None


class CalculateQuantityArgs(BaseModel):
    tool: Literal[ToolName.CALCULATE_QUANTITY] = ToolName.CALCULATE_QUANTITY
    calculation_type: CalculationType
    values: dict[str, Any]
    formula: str | None = None
    unit_from: str | None = None
    unit_to: str | None = None


class AnalyzeScheduleArgs(BaseModel):
    tool: Literal[ToolName.ANALYZE_SCHEDULE] = ToolName.ANALYZE_SCHEDULE
    analysis_type: ScheduleAnalysisType
    date_range: DateRange | None = None


class GenerateReportArgs(BaseModel):
    tool: Literal[ToolName.GENERATE_REPORT] = ToolName.GENERATE_REPORT
    report_type: ReportType
    sections: list[str] | None = None
    document_ids: list[str] | None = None


class DetectConflictsArgs(BaseModel):
    tool: Literal[ToolName.DETECT_CONFLICTS] = ToolName.DETECT_CONFLICTS
    topics: list[str]
    document_ids: list[str] | None = None


class ExtractSpecificationsArgs(BaseModel):
    tool: Literal[ToolName.EXTRACT_SPECIFICATIONS] = ToolName.EXTRACT_SPECIFICATIONS
    spec_type: str
    attributes: list[str] = Field(default_factory=list)


ToolArgs = Annotated[
    SearchDocumentsArgs
    | CalculateQuantityArgs
    | AnalyzeScheduleArgs
    | GenerateReportArgs
    | DetectConflictsArgs
    | ExtractSpecificationsArgs,
    Field(discriminator="tool"),
]

_tool_args_adapter: TypeAdapter[ToolArgs] = TypeAdapter(ToolArgs)


class UnknownToolError(ValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


def parse_tool_call(name: str, arguments: dict[str, Any]) -> ToolArgs:
    """Validate a model-requested call into its typed argument model.

    Raises:
        UnknownToolError: ``name`` is not in the palette
        pydantic.ValidationError: Arguments don't match the tool's schema
    """
    if name not in {t.value for t in ToolName}:
        raise UnknownToolError(name)
    return _tool_args_adapter.validate_python({**arguments, "tool": name})


def _function(name: ToolName, description: str, properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name.value,
            "description": description,
            "parameters": {"type": "object", "properties": properties, "required": required},
        },
    }


_STRING_LIST = {"type": "array", "items": {"type": "string"}}

TOOL_PALETTE: list[dict[str, Any]] = [
    _function(
        ToolName.SEARCH_DOCUMENTS,
        "Search through uploaded construction documents to find relevant information. "
        "Use this to find specifications, requirements, measurements, or any document content.",
        {
            "query": {"type": "string", "description": "The search query to find relevant document sections"},
            "document_types": {
                **_STRING_LIST,
                "description": "Optional filter by document types: " + ", ".join(t.value for t in DocumentType),
            },
        },
        ["query"],
    ),
    _function(
        ToolName.CALCULATE_QUANTITY,
        "Perform construction quantity calculations including area, volume, material quantities, "
        "and unit conversions.",
        {
            "calculation_type": {
                "type": "string",
                "enum": [t.value for t in CalculationType],
                "description": "Type of calculation to perform",
            },
            "values": {
                "type": "object",
                "description": "Input values for the calculation (e.g., length, width, height, quantity, unit)",
            },
            "formula": {
                "type": "string",
                "description": "Optional arithmetic formula over the names in values, e.g. 'length * width * 2'",
            },
            "unit_from": {"type": "string", "description": "Source unit for conversions"},
            "unit_to": {"type": "string", "description": "Target unit for conversions"},
        },
        ["calculation_type", "values"],
    ),
    _function(
        ToolName.ANALYZE_SCHEDULE,
        "Analyze CPM schedules to extract timelines, milestones, critical path items, and dependencies "
        "from uploaded schedule documents.",
        {
            "analysis_type": {
                "type": "string",
                "enum": [t.value for t in ScheduleAnalysisType],
                "description": "Type of schedule analysis to perform",
            },
            "date_range": {
                "type": "object",
                "properties": {
                    "start": {"type": "string", "description": "Start date (YYYY-MM-DD)"},
                    "end": {"type": "string", "description": "End date (YYYY-MM-DD)"},
                },
                "description": "Optional date range filter",
            },
        },
        ["analysis_type"],
    ),
    _function(
        ToolName.GENERATE_REPORT,
        "Generate comprehensive reports from document analysis including requirements summaries, "
        "specification summaries, conflict analysis, and material estimates.",
        {
            "report_type": {
                "type": "string",
                "enum": [t.value for t in ReportType],
                "description": "Type of report to generate",
            },
            "sections": {**_STRING_LIST, "description": "Specific sections or topics to include in the report"},
            "document_ids": {**_STRING_LIST, "description": "Optional specific document IDs to include"},
        },
        ["report_type"],
    ),
    _function(
        ToolName.DETECT_CONFLICTS,
        "Analyze multiple documents to identify conflicting specifications, requirements, or standards "
        "across different document types.",
        {
            "topics": {
                **_STRING_LIST,
                "description": "Specific topics to check for conflicts (e.g., 'concrete strength', 'rebar spacing')",
            },
            "document_ids": {**_STRING_LIST, "description": "Optional specific document IDs to compare"},
        },
        ["topics"],
    ),
    _function(
        ToolName.EXTRACT_SPECIFICATIONS,
        "Extract specific technical specifications, standards, or requirements from documents.",
        {
            "spec_type": {
                "type": "string",
                "description": "Type of specification to extract (e.g., 'concrete', 'steel', 'electrical', 'plumbing')",
            },
            "attributes": {
                **_STRING_LIST,
                "description": "Specific attributes to extract (e.g., 'strength', 'grade', 'dimensions')",
            },
        },
        ["spec_type"],
    ),
]


def tool_palette() -> list[dict[str, Any]]:
    """OpenAI-style function schemas for every tool."""
    return [dict(tool) for tool in TOOL_PALETTE]
