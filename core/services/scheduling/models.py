from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, Iterator, List, Optional

from core.exceptions import NotFoundError
from core.models import Duration, Instant


@dataclass(frozen=True)
class ScheduledTask:
    task_id: Hashable
    name: str
    duration: Duration
    earliest_start: Instant
    earliest_finish: Instant
    latest_start: Instant
    latest_finish: Instant
    slack: Any
    is_critical: bool


@dataclass(frozen=True)
class ScheduleReport:
    """
    Result of one CPM computation.

    ``tasks`` follows the caller's presentation order; ``critical_chains``
    holds explicit zero-slack sequences, root to leaf.
    """

    tasks: tuple[ScheduledTask, ...]
    project_start: Optional[Instant]
    project_finish: Optional[Instant]
    earliest_project_finish: Optional[Instant]
    topological_order: tuple[Hashable, ...] = ()
    critical_chains: tuple[tuple[Hashable, ...], ...] = ()

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[ScheduledTask]:
        return iter(self.tasks)

    @property
    def critical_task_ids(self) -> List[Hashable]:
        return [t.task_id for t in self.tasks if t.is_critical]

    def critical_tasks(self) -> List[ScheduledTask]:
        return [t for t in self.tasks if t.is_critical]

    def by_id(self) -> Dict[Hashable, ScheduledTask]:
        return {t.task_id: t for t in self.tasks}

    def get(self, task_id: Hashable) -> ScheduledTask:
        for scheduled in self.tasks:
            if scheduled.task_id == task_id:
                return scheduled
        raise NotFoundError(f"Task {task_id!r} is not part of this schedule.")

    def as_rows(self) -> List[Dict[str, Any]]:
        return [
            {
                "task_id": t.task_id,
                "name": t.name,
                "duration": t.duration,
                "earliest_start": t.earliest_start,
                "earliest_finish": t.earliest_finish,
                "latest_start": t.latest_start,
                "latest_finish": t.latest_finish,
                "slack": t.slack,
                "is_critical": t.is_critical,
            }
            for t in self.tasks
        ]


__all__ = ["ScheduledTask", "ScheduleReport"]
