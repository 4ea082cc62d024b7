"""Report builder and renderer for a generation run."""

from __future__ import annotations

from slurmify.cli.ui.backend import UIBackend
from slurmify.cli.ui.models import (
    STATUS_DRY_RUN,
    STATUS_FAILED,
    STATUS_WRITTEN,
    GenerationReport,
    MetricItem,
    TableSection,
)
from slurmify.config import JobConfig
from slurmify.generate import GeneratedScript, GenerationResult


def _script_status(script: GeneratedScript, dry_run: bool) -> str:
    if dry_run:
        return STATUS_DRY_RUN
    return STATUS_WRITTEN if script.written else STATUS_FAILED


def build_generation_report(
    *,
    result: GenerationResult,
    job_config: JobConfig,
    dry_run: bool = False,
) -> GenerationReport:
    """Build view-model for the generated scripts of a run."""
    metadata = [
        ("Input", job_config.input_file),
        ("Output dir", job_config.output_dir),
        ("Logs dir", job_config.logs_dir),
        ("Account", job_config.account),
        ("Partition", job_config.partition),
        ("Resources", f"{job_config.cpus} CPU(s), {job_config.mem}, {job_config.time}"),
    ]
    if job_config.gres:
        metadata.append(("GRES", job_config.gres))
    if job_config.module:
        metadata.append(("Module", job_config.module))

    rows = [
        [
            str(script.index),
            script.job_name,
            str(script.script_path),
            _script_status(script, dry_run),
        ]
        for script in result.scripts
    ]

    written = sum(1 for script in result.scripts if script.written)
    summary_metrics = [MetricItem(label="Commands", value=str(result.count))]
    if dry_run:
        summary_metrics.append(
            MetricItem(label=STATUS_DRY_RUN, value=str(result.count), status=STATUS_DRY_RUN)
        )
    else:
        summary_metrics.append(
            MetricItem(label=STATUS_WRITTEN, value=str(written), status=STATUS_WRITTEN)
        )
        summary_metrics.append(
            MetricItem(label=STATUS_FAILED, value=str(result.count - written), status=STATUS_FAILED)
        )

    title = "slurmify dry run" if dry_run else "slurmify scripts"
    return GenerationReport(
        title=title,
        metadata=metadata,
        summary_title="Summary:",
        summary_metrics=summary_metrics,
        scripts_table=TableSection(
            title="Scripts:",
            headers=["#", "Job Name", "Script", "Status"],
            rows=rows,
            status_column=3,
        ),
        warnings=list(result.warnings),
    )


def render_generation_report(report: GenerationReport, backend: UIBackend) -> None:
    """Render generation report with selected backend."""
    backend.heading(report.title)
    backend.kv_block(report.metadata)
    backend.metrics(report.summary_title, report.summary_metrics)
    backend.table(report.scripts_table)
    backend.notes(report.warnings)
