from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Hashable, Iterable, Optional, Union

from core.domain.identifiers import generate_id

# Abstract time model: numbers (e.g. day numbers) or date/datetime + timedelta.
Instant = Union[int, float, date]
Duration = Union[int, float, timedelta]


def _unique(ids: Iterable[Hashable]) -> tuple[Hashable, ...]:
    seen: dict[Hashable, None] = {}
    for item in ids or ():
        seen.setdefault(item, None)
    return tuple(seen)


@dataclass
class Task:
    """
    Scheduling input record.

    Only ``id``, ``duration``, ``dependencies`` and the two optional bounds
    drive the computation; ``name``, ``project_id`` and ``description`` are
    carried for reports and persistence.
    """

    id: Any
    duration: Duration
    dependencies: tuple[Hashable, ...] = ()
    name: str = ""
    earliest_start_bound: Optional[Instant] = None
    latest_finish_bound: Optional[Instant] = None
    project_id: Optional[str] = None
    description: str = ""

    def __post_init__(self) -> None:
        self.dependencies = _unique(self.dependencies)

    @property
    def is_root(self) -> bool:
        return not self.dependencies

    @staticmethod
    def create(name: str, duration: Duration, dependencies: Iterable[Hashable] = (), **extra) -> "Task":
        return Task(
            id=generate_id(),
            name=name,
            duration=duration,
            dependencies=tuple(dependencies),
            **extra,
        )


@dataclass
class TaskDependency:
    id: str
    predecessor_task_id: str
    successor_task_id: str

    @staticmethod
    def create(predecessor_id: str, successor_id: str) -> "TaskDependency":
        return TaskDependency(
            id=generate_id(),
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
        )


__all__ = ["Instant", "Duration", "Task", "TaskDependency"]
