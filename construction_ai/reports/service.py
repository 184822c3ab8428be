"""Agent-generated reports."""

from __future__ import annotations

from construction_ai.agents.construction_agent import ConstructionAgent
from construction_ai.core.exceptions import NotFoundError
from construction_ai.core.logging import get_logger
from construction_ai.core.protocols import ReportRepository
from construction_ai.reports.models import Report, ReportType

logger = get_logger(__name__)


def report_prompt(report_type: ReportType) -> str:
    return f"Generate a detailed {report_type.label} report based on the uploaded documents."


def default_report_title(report_type: ReportType) -> str:
    return f"{report_type.label.upper()} Report"


class ReportService:
    def __init__(self, reports: ReportRepository, agent: ConstructionAgent):
        self.reports = reports
        self.agent = agent

    async def generate(
        self,
        user_id: str,
        report_type: ReportType,
        title: str | None = None,
        document_ids: list[str] | None = None,
        conversation_id: str | None = None,
    ) -> Report:
        """Ask the agent for a report and store its answer."""
        response = await self.agent.run(user_id, report_prompt(report_type), [])
        report = Report(
            user_id=user_id,
            title=title or default_report_title(report_type),
            report_type=report_type,
            content=response.content,
            conversation_id=conversation_id,
            document_ids=document_ids or [],
            metadata={"generated_from": [c.document_name for c in response.citations]},
        )
        stored = await self.reports.create(report)
        logger.info("report_generated", report_id=stored.id, report_type=report_type, sources=len(response.citations))
        return stored

    async def list(self, user_id: str) -> list[Report]:
        return await self.reports.list_by_user(user_id)

    async def get(self, user_id: str, report_id: str) -> Report:
        report = await self.reports.get(report_id, user_id)
        if report is None:
            raise NotFoundError("Report", report_id)
        return report
