from __future__ import annotations

from typing import Dict, Hashable, Optional

from core.models import Instant
from core.services.scheduling.graph import TaskGraph


def run_forward_pass(
    graph: TaskGraph,
    project_start: Optional[Instant],
) -> tuple[Dict[Hashable, Instant], Dict[Hashable, Instant], Optional[Instant]]:
    """
    Earliest start/finish in topological order.

    Roots start at max(T0, own start bound); every other task starts when its
    last dependency finishes. Returns (es, ef, earliest project finish).
    """
    es: Dict[Hashable, Instant] = {}
    ef: Dict[Hashable, Instant] = {}

    for task_id in graph.topological_order:
        task = graph.task(task_id)
        if not task.dependencies:
            bound = task.earliest_start_bound
            est = project_start if bound is None else max(project_start, bound)
        else:
            est = max(ef[dep_id] for dep_id in task.dependencies)
        es[task_id] = est
        ef[task_id] = est + task.duration

    project_early_finish = max(ef.values()) if ef else project_start
    return es, ef, project_early_finish


def run_backward_pass(
    graph: TaskGraph,
    project_finish: Instant,
) -> tuple[Dict[Hashable, Instant], Dict[Hashable, Instant]]:
    """
    Latest start/finish in reverse topological order.

    Tasks without dependents finish by min(Tend, own deadline); every other
    task must finish before its earliest-latest dependent starts.
    """
    ls: Dict[Hashable, Instant] = {}
    lf: Dict[Hashable, Instant] = {}

    for task_id in graph.reverse_topological_order():
        task = graph.task(task_id)
        dependents = graph.dependents_of(task_id)
        if not dependents:
            bound = task.latest_finish_bound
            lft = project_finish if bound is None else min(project_finish, bound)
        else:
            lft = min(ls[succ_id] for succ_id in dependents)
        lf[task_id] = lft
        ls[task_id] = lft - task.duration

    return ls, lf


__all__ = ["run_forward_pass", "run_backward_pass"]
