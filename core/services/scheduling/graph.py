from __future__ import annotations

import heapq
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List

from core.exceptions import CyclicDependencyError, UnknownDependencyError, ValidationError
from core.models import Task
from core.services.scheduling.timeline import ensure_non_negative


@dataclass(frozen=True)
class TaskGraph:
    """
    Validated dependency graph for one computation.

    ``tasks_by_id`` keeps the caller's presentation order; edges point from a
    dependency to its dependents.
    """

    tasks_by_id: Dict[Hashable, Task]
    dependents_by_id: Dict[Hashable, List[Hashable]]
    topological_order: List[Hashable]

    def __len__(self) -> int:
        return len(self.tasks_by_id)

    def task(self, task_id: Hashable) -> Task:
        return self.tasks_by_id[task_id]

    def dependencies_of(self, task_id: Hashable) -> tuple[Hashable, ...]:
        return self.tasks_by_id[task_id].dependencies

    def dependents_of(self, task_id: Hashable) -> List[Hashable]:
        return self.dependents_by_id[task_id]

    def roots(self) -> List[Task]:
        return [t for t in self.tasks_by_id.values() if not t.dependencies]

    def leaves(self) -> List[Task]:
        return [t for tid, t in self.tasks_by_id.items() if not self.dependents_by_id[tid]]

    def reverse_topological_order(self) -> List[Hashable]:
        return list(reversed(self.topological_order))


def _index_tasks(tasks: Iterable[Task]) -> Dict[Hashable, Task]:
    tasks_by_id: Dict[Hashable, Task] = {}
    for task in tasks:
        if task.id in tasks_by_id:
            raise ValidationError(f"Duplicate task id {task.id!r}.", code="DUPLICATE_TASK")
        ensure_non_negative(task)
        tasks_by_id[task.id] = task
    return tasks_by_id


def _find_cycle(tasks_by_id: Dict[Hashable, Task], unresolved: set[Hashable]) -> List[Hashable]:
    # Every unresolved task still waits on an unresolved dependency, so walking
    # dependency edges inside that set must revisit a task.
    start = next(tid for tid in tasks_by_id if tid in unresolved)
    path: List[Hashable] = []
    seen_at: Dict[Hashable, int] = {}
    current = start
    while current not in seen_at:
        seen_at[current] = len(path)
        path.append(current)
        current = next(d for d in tasks_by_id[current].dependencies if d in unresolved)
    cycle = path[seen_at[current]:]
    cycle.reverse()
    return cycle


def build_task_graph(tasks: Iterable[Task]) -> TaskGraph:
    """
    Index the tasks, derive the reverse adjacency and a topological order.

    Kahn's algorithm over a min-heap keyed on presentation index, so the order
    is deterministic and keeps independent tasks in the order the caller gave
    them.
    """
    tasks_by_id = _index_tasks(tasks)
    ids = list(tasks_by_id)
    position = {task_id: index for index, task_id in enumerate(ids)}

    dependents_by_id: Dict[Hashable, List[Hashable]] = {task_id: [] for task_id in ids}
    indegree: Dict[Hashable, int] = {task_id: 0 for task_id in ids}

    for task in tasks_by_id.values():
        for dep_id in task.dependencies:
            if dep_id not in tasks_by_id:
                raise UnknownDependencyError(task.id, dep_id)
            dependents_by_id[dep_id].append(task.id)
            indegree[task.id] += 1

    heap: List[int] = [position[tid] for tid, degree in indegree.items() if degree == 0]
    heapq.heapify(heap)

    topo_order: List[Hashable] = []
    while heap:
        task_id = ids[heapq.heappop(heap)]
        topo_order.append(task_id)
        for succ_id in dependents_by_id[task_id]:
            indegree[succ_id] -= 1
            if indegree[succ_id] == 0:
                heapq.heappush(heap, position[succ_id])

    if len(topo_order) != len(tasks_by_id):
        unresolved = {tid for tid, degree in indegree.items() if degree > 0}
        raise CyclicDependencyError(_find_cycle(tasks_by_id, unresolved))

    return TaskGraph(
        tasks_by_id=tasks_by_id,
        dependents_by_id=dependents_by_id,
        topological_order=topo_order,
    )


__all__ = ["TaskGraph", "build_task_graph"]
