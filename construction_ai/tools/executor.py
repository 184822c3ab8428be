"""Dispatches model-requested tool calls onto search and calculation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from construction_ai.agents.models import ToolCallResult
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import Notifier
from construction_ai.documents.models import Citation, DocumentType
from construction_ai.documents.search import DocumentSearch, SearchResult
from construction_ai.llm.types import ToolCallRequest
from construction_ai.notifications.notifier import notify_in_background
from construction_ai.tools.calculator import calculate
from construction_ai.tools.schemas import (
    AnalyzeScheduleArgs,
    CalculateQuantityArgs,
    DetectConflictsArgs,
    ExtractSpecificationsArgs,
    GenerateReportArgs,
    SearchDocumentsArgs,
    ToolArgs,
    UnknownToolError,
    parse_tool_call,
)

logger = get_logger(__name__)


@dataclass
class ToolExecution:
    """Outcome of one tool call: the audit record plus any citations."""

    result: ToolCallResult
    citations: list[Citation] = field(default_factory=list)


def _sources(results: list[SearchResult]) -> list[dict[str, Any]]:
    return [{"content": r.chunk.content, "source": r.citation.to_dict()} for r in results]


def _citations(results: list[SearchResult]) -> list[Citation]:
    return [r.citation for r in results]


class ToolExecutor:
    """Runs the fixed tool palette for one user."""

    def __init__(self, search: DocumentSearch, notifier: Notifier):
        self.search = search
        self.notifier = notifier

    async def execute(self, user_id: str, call: ToolCallRequest) -> ToolExecution:
        """Execute one tool call.

        Bad arguments and unknown tools yield an ``{"error": ...}`` output
        rather than an exception.
        """
        try:
            raw_input = call.parsed_arguments()
        except ValueError as e:
            return self._error(call.name, {}, f"Invalid arguments for {call.name}: {e}")

        try:
            args = parse_tool_call(call.name, raw_input)
        except UnknownToolError as e:
            return self._error(call.name, raw_input, str(e))
        except PydanticValidationError as e:
            return self._error(call.name, raw_input, f"Invalid arguments for {call.name}: {e.errors()[0]['msg']}")

        output, citations = await self._dispatch(user_id, args)
        logger.info(
            "agent_tool_executed",
            tool=call.name,
            user_id=user_id,
            citations=len(citations),
            error="error" in output,
        )
        return ToolExecution(ToolCallResult(call.name, raw_input, output), citations)

    def _error(self, tool: str, raw_input: dict[str, Any], message: str) -> ToolExecution:
        logger.warning("agent_tool_rejected", tool=tool, error=message)
        return ToolExecution(ToolCallResult(tool, raw_input, {"error": message}))

    async def _dispatch(self, user_id: str, args: ToolArgs) -> tuple[dict[str, Any], list[Citation]]:
        match args:
            case SearchDocumentsArgs(query=query, document_types=document_types):
                results = await self.search.search(user_id, query, document_types)
                return {"found": len(results), "results": _sources(results)}, _citations(results)

            case CalculateQuantityArgs():
                outcome = calculate(
                    args.calculation_type,
                    args.values,
                    formula=args.formula,
                    unit_from=args.unit_from,
                    unit_to=args.unit_to,
                )
                return outcome.to_dict(), []

            case AnalyzeScheduleArgs(analysis_type=analysis_type):
                results = await self.search.search(
                    user_id,
                    f"schedule {analysis_type} timeline milestone",
                    [DocumentType.CPM_SCHEDULE],
                )
                output = {
                    "analysis_type": str(analysis_type),
                    "found_items": len(results),
                    "schedule_data": _sources(results),
                }
                return output, _citations(results)

            case GenerateReportArgs(report_type=report_type):
                results = await self.search.search(user_id, report_type.label)
                output = {
                    "report_type": str(report_type),
                    "sections_found": len(results),
                    "content_sources": _sources(results),
                }
                return output, _citations(results)

            case DetectConflictsArgs(topics=topics):
                return await self._detect_conflicts(user_id, topics)

            case ExtractSpecificationsArgs(spec_type=spec_type, attributes=attributes):
                query = f"{spec_type} specification {' '.join(attributes)}"
                results = await self.search.search(user_id, query)
                output = {
                    "spec_type": spec_type,
                    "specifications_found": len(results),
                    "data": _sources(results),
                }
                return output, _citations(results)

    async def _detect_conflicts(self, user_id: str, topics: list[str]) -> tuple[dict[str, Any], list[Citation]]:
        conflicts = []
        citations: list[Citation] = []
        for topic in topics:
            results = await self.search.search(user_id, topic)
            conflicts.append({"topic": topic, "sources": _sources(results)})
            citations.extend(_citations(results))

        if any(len(conflict["sources"]) > 1 for conflict in conflicts):
            notify_in_background(
                self.notifier,
                "Specification Conflict Detected",
                f"A user has identified potential specification conflicts in topics: {', '.join(topics)}",
            )

        return {"topics_analyzed": topics, "potential_conflicts": conflicts}, citations
