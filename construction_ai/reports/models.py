"""Report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4


class ReportType(StrEnum):
    REQUIREMENTS_SUMMARY = "requirements_summary"
    SPECIFICATIONS_SUMMARY = "specifications_summary"
    CRITICAL_PATH = "critical_path"
    CONFLICT_ANALYSIS = "conflict_analysis"
    SCHEDULE_ANALYSIS = "schedule_analysis"
    MATERIAL_ESTIMATE = "material_estimate"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``critical path``."""
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class Report:
    """A generated report. Never mutated after creation."""

    user_id: str
    title: str
    report_type: ReportType
    content: str
    conversation_id: str | None = None
    document_ids: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
