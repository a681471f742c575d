from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from core.exceptions import DomainError, InfeasibleDeadlineError, ValidationError
from core.models import Instant, Task
from core.services.scheduling.graph import build_task_graph
from core.services.scheduling.models import ScheduledTask, ScheduleReport
from core.services.scheduling.passes import run_backward_pass, run_forward_pass
from core.services.scheduling.results import build_schedule_report
from core.services.scheduling.slack import DEFAULT_MAX_CHAINS, compute_slack, trace_critical_chains
from core.services.scheduling.timeline import (
    NUMERIC,
    detect_time_family,
    exact_task,
    from_exact,
    has_floats,
    resolve_project_finish,
    resolve_project_start,
    to_exact,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_TASKS = 10_000

_TIMING_FIELDS = (
    "duration",
    "earliest_start",
    "earliest_finish",
    "latest_start",
    "latest_finish",
    "slack",
)


def _restore_floats(report: ScheduleReport) -> ScheduleReport:
    def _task(scheduled: ScheduledTask) -> ScheduledTask:
        return replace(scheduled, **{name: from_exact(getattr(scheduled, name)) for name in _TIMING_FIELDS})

    return replace(
        report,
        tasks=tuple(_task(t) for t in report.tasks),
        project_start=from_exact(report.project_start),
        project_finish=from_exact(report.project_finish),
        earliest_project_finish=from_exact(report.earliest_project_finish),
    )


class SchedulingEngine:
    """
    CPM scheduling engine (finish-to-start dependencies):
    - Builder: id index, reverse adjacency, topological order, cycle check
    - Forward pass: ES/EF
    - Backward pass: LS/LF
    - Slack, critical task set and explicit critical chains

    Pure computation: no storage access, no shared state between calls.
    """

    def __init__(self, max_tasks: int = DEFAULT_MAX_TASKS, max_chains: int = DEFAULT_MAX_CHAINS):
        self._max_tasks = max_tasks
        self._max_chains = max_chains

    def compute(
        self,
        tasks: Iterable[Task],
        project_start: Optional[Instant] = None,
        project_finish: Optional[Instant] = None,
    ) -> ScheduleReport:
        """
        Full CPM calculation over one project's task set.

        - project_start (T0) defaults to the earliest root start bound
        - project_finish (Tend) defaults to the latest leaf deadline when every
          leaf declares one, else to the earliest possible project finish
        - raises instead of returning partial timings
        """
        tasks = list(tasks)
        try:
            return self._compute(tasks, project_start, project_finish)
        except DomainError as exc:
            logger.warning("Schedule rejected [%s]: %s", exc.code, exc)
            raise

    def _compute(
        self,
        tasks: list[Task],
        project_start: Optional[Instant],
        project_finish: Optional[Instant],
    ) -> ScheduleReport:
        if len(tasks) > self._max_tasks:
            raise ValidationError(
                f"Cannot schedule {len(tasks)} tasks; the limit is {self._max_tasks}.",
                code="TOO_MANY_TASKS",
            )

        family = detect_time_family(tasks, project_start, project_finish)
        # float inputs are scheduled as Fractions and converted back at the end
        exact = family == NUMERIC and has_floats(tasks, project_start, project_finish)
        if exact:
            tasks = [exact_task(t) for t in tasks]
            project_start = to_exact(project_start)
            project_finish = to_exact(project_finish)

        graph = build_task_graph(tasks)
        start = resolve_project_start(graph.roots(), project_start, family)

        es, ef, project_early_finish = run_forward_pass(graph, start)

        finish = resolve_project_finish(graph.leaves(), project_finish, project_early_finish)
        if finish is not None and project_early_finish is not None and finish < project_early_finish:
            raise InfeasibleDeadlineError(from_exact(finish), from_exact(project_early_finish))

        ls, lf = run_backward_pass(graph, finish)
        slack = compute_slack(graph, es, ls)
        chains = trace_critical_chains(graph, es, ef, slack, max_chains=self._max_chains)

        report = build_schedule_report(
            graph=graph,
            es=es,
            ef=ef,
            ls=ls,
            lf=lf,
            slack=slack,
            project_start=start,
            project_finish=finish,
            earliest_project_finish=project_early_finish,
            critical_chains=chains,
        )
        if exact:
            report = _restore_floats(report)
        logger.info(
            "Scheduled %d tasks: finish %s (earliest %s), %d critical",
            len(report),
            report.project_finish,
            report.earliest_project_finish,
            len(report.critical_task_ids),
        )
        return report


__all__ = ["SchedulingEngine", "DEFAULT_MAX_TASKS"]
