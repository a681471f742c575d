from __future__ import annotations

from typing import Any, Dict, Hashable, List

from core.exceptions import NegativeSlackError
from core.models import Instant
from core.services.scheduling.graph import TaskGraph
from core.services.scheduling.timeline import from_exact, is_zero, zero_of

DEFAULT_MAX_CHAINS = 100


def compute_slack(
    graph: TaskGraph,
    es: Dict[Hashable, Instant],
    ls: Dict[Hashable, Instant],
) -> Dict[Hashable, Any]:
    slack: Dict[Hashable, Any] = {task_id: ls[task_id] - es[task_id] for task_id in graph.tasks_by_id}
    # a tight deadline propagates backwards; report the task nearest to it
    for task_id in graph.reverse_topological_order():
        value = slack[task_id]
        if value < zero_of(value):
            raise NegativeSlackError(task_id, from_exact(value))
    return slack


def critical_task_ids(slack: Dict[Hashable, Any]) -> List[Hashable]:
    return [task_id for task_id, value in slack.items() if is_zero(value)]


def trace_critical_chains(
    graph: TaskGraph,
    es: Dict[Hashable, Instant],
    ef: Dict[Hashable, Instant],
    slack: Dict[Hashable, Any],
    max_chains: int = DEFAULT_MAX_CHAINS,
) -> List[List[Hashable]]:
    """
    Explicit critical path sequences.

    Follows zero-slack edges where the dependent starts exactly when the
    dependency finishes, from every critical task with no such incoming edge
    to every critical task with no such outgoing edge. Enumeration stops after
    ``max_chains`` sequences; forks that rejoin can multiply the count.
    """
    critical = set(critical_task_ids(slack))

    def _tight_successors(task_id: Hashable) -> List[Hashable]:
        return [
            succ_id
            for succ_id in graph.dependents_of(task_id)
            if succ_id in critical and es[succ_id] == ef[task_id]
        ]

    def _has_tight_predecessor(task_id: Hashable) -> bool:
        return any(
            dep_id in critical and ef[dep_id] == es[task_id]
            for dep_id in graph.dependencies_of(task_id)
        )

    chains: List[List[Hashable]] = []
    starts = [tid for tid in graph.tasks_by_id if tid in critical and not _has_tight_predecessor(tid)]

    for start in starts:
        stack: List[List[Hashable]] = [[start]]
        while stack:
            if len(chains) >= max_chains:
                return chains
            path = stack.pop()
            successors = _tight_successors(path[-1])
            if not successors:
                chains.append(path)
                continue
            # reversed so the first dependent is expanded first
            for succ_id in reversed(successors):
                stack.append(path + [succ_id])

    return chains


__all__ = ["compute_slack", "critical_task_ids", "trace_critical_chains", "DEFAULT_MAX_CHAINS"]
