"""Printable Markdown view of a roadmap record."""

from __future__ import annotations

from pathlib import Path
from typing import List

from config import ReguflowConfig
from file_utils import write_text
from models import RoadmapRecord
from task_tracking import progress_percentage, task_id, task_ids

from .base import BaseRenderer


def _bullets(items: List[str]) -> List[str]:
    if not items:
        return ["_None identified._"]
    return [f"- {item}" for item in items]


def render_markdown(record: RoadmapRecord) -> str:
    data = record.data
    completed = set(record.completed_tasks)
    progress = progress_percentage(data, record.completed_tasks)
    ids = task_ids(data)
    done = len(completed.intersection(ids))

    lines: List[str] = [
        f"# {ReguflowConfig.PRODUCT_NAME} Compliance Roadmap",
        "",
        f"**Scenario:** {record.scenario}",
        f"**Generated:** {record.created_at.strftime('%Y-%m-%d %H:%M')}",
        f"**Progress:** {progress}% ({done}/{len(ids)} tasks)",
        "",
        f"> {ReguflowConfig.DISCLAIMER}",
        "",
        "## Applicable Regulations",
    ]
    if data.applicable_regulations:
        lines.extend(f"- **{reg.name}**: {reg.description}" for reg in data.applicable_regulations)
    else:
        lines.append("_None identified._")

    lines += ["", "## Actionable Task Checklist"]
    if data.actionable_task_checklist:
        for i, item in enumerate(data.actionable_task_checklist):
            mark = "x" if task_id(i) in completed else " "
            lines.append(f"- [{mark}] **{item.task}** ({task_id(i)}): {item.description}")
    else:
        lines.append("_None identified._")

    sections = [
        ("Compliance Obligations", data.compliance_obligations),
        ("Required Documents", data.required_documents),
        ("Deadlines & Frequency", data.deadlines_frequency),
        ("Risk Flags", data.risk_flags),
        ("Monitoring Suggestions", data.monitoring_suggestions),
    ]
    for title, items in sections:
        lines += ["", f"## {title}"]
        lines.extend(_bullets(items))

    if data.is_grounded and data.grounding_sources:
        lines += ["", "## Verified Sources"]
        lines.extend(f"- [{src.title}]({src.uri})" for src in data.grounding_sources)

    return "\n".join(lines).strip() + "\n"


class RoadmapMarkdownRenderer(BaseRenderer):
    """Render a roadmap record as a checklist document."""

    name = "roadmap_markdown"

    def render(self, record: RoadmapRecord, report_dir: str) -> List[str]:
        output_path = Path(report_dir) / f"roadmap_{record.id}.md"
        write_text(output_path, render_markdown(record))
        return [str(output_path)]
