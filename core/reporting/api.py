"""Reporting API wrappers around renderer classes."""

from pathlib import Path

from core.exceptions import BusinessRuleError
from core.reporting.renderers.excel import ScheduleExcelRenderer
from core.reporting.renderers.gantt import ScheduleGanttRenderer
from core.services.scheduling.models import ScheduleReport


def _ensure_parent(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _require_tasks(report: ScheduleReport) -> None:
    if not len(report):
        raise BusinessRuleError("The schedule has no tasks to export.", code="EMPTY_SCHEDULE")


def generate_schedule_excel(report: ScheduleReport, output_path: str | Path) -> Path:
    _require_tasks(report)
    renderer = ScheduleExcelRenderer()
    return renderer.render(report, _ensure_parent(Path(output_path)))


def generate_schedule_gantt_png(report: ScheduleReport, output_path: str | Path) -> Path:
    _require_tasks(report)
    renderer = ScheduleGanttRenderer()
    return renderer.render(report, _ensure_parent(Path(output_path)))


__all__ = ["generate_schedule_excel", "generate_schedule_gantt_png"]
