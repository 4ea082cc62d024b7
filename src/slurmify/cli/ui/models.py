"""View models for the run summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple


STATUS_WRITTEN = "written"
STATUS_FAILED = "failed"
STATUS_DRY_RUN = "dry run"
SCRIPT_STATUSES = (STATUS_WRITTEN, STATUS_FAILED, STATUS_DRY_RUN)


@dataclass(frozen=True)
class MetricItem:
    """A summary count, optionally tagged with a script status."""

    label: str
    value: str
    status: Optional[str] = None


@dataclass(frozen=True)
class TableSection:
    """Titled table whose status column is styled by the backend."""

    title: str
    headers: Sequence[str]
    rows: Sequence[Sequence[str]]
    status_column: Optional[int] = None
    empty_message: str = "  (no scripts)"


@dataclass(frozen=True)
class GenerationReport:
    """View model for the per-script summary of a run."""

    title: str
    metadata: Sequence[Tuple[str, str]]
    summary_title: str
    summary_metrics: Sequence[MetricItem]
    scripts_table: TableSection
    warnings: Sequence[str] = field(default_factory=tuple)
