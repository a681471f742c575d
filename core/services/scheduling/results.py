from __future__ import annotations

from typing import Any, Dict, Hashable, List, Optional, Sequence

from core.models import Instant
from core.services.scheduling.graph import TaskGraph
from core.services.scheduling.models import ScheduledTask, ScheduleReport
from core.services.scheduling.timeline import is_zero


def build_schedule_report(
    graph: TaskGraph,
    es: Dict[Hashable, Instant],
    ef: Dict[Hashable, Instant],
    ls: Dict[Hashable, Instant],
    lf: Dict[Hashable, Instant],
    slack: Dict[Hashable, Any],
    project_start: Optional[Instant],
    project_finish: Optional[Instant],
    earliest_project_finish: Optional[Instant],
    critical_chains: Sequence[List[Hashable]] = (),
) -> ScheduleReport:
    scheduled: List[ScheduledTask] = []

    for task_id, task in graph.tasks_by_id.items():
        task_slack = slack[task_id]
        scheduled.append(
            ScheduledTask(
                task_id=task_id,
                name=task.name,
                duration=task.duration,
                earliest_start=es[task_id],
                earliest_finish=ef[task_id],
                latest_start=ls[task_id],
                latest_finish=lf[task_id],
                slack=task_slack,
                is_critical=is_zero(task_slack),
            )
        )

    return ScheduleReport(
        tasks=tuple(scheduled),
        project_start=project_start,
        project_finish=project_finish,
        earliest_project_finish=earliest_project_finish,
        topological_order=tuple(graph.topological_order),
        critical_chains=tuple(tuple(chain) for chain in critical_chains),
    )


__all__ = ["build_schedule_report"]
