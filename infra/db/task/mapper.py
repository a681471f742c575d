from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from core.models import Duration, Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM


def duration_to_days(duration: Duration) -> int:
    if isinstance(duration, timedelta):
        return duration.days
    return int(duration)


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        project_id=task.project_id,
        name=task.name,
        description=task.description,
        start_date=task.earliest_start_bound,
        end_date=task.latest_finish_bound,
        duration_days=duration_to_days(task.duration),
    )


def task_from_orm(obj: TaskORM, dependency_ids: Iterable[str] = ()) -> Task:
    return Task(
        id=obj.id,
        project_id=obj.project_id,
        name=obj.name,
        description=obj.description,
        duration=timedelta(days=obj.duration_days or 0),
        dependencies=tuple(dependency_ids),
        earliest_start_bound=obj.start_date,
        latest_finish_bound=obj.end_date,
    )


def dependency_to_orm(dependency: TaskDependency) -> TaskDependencyORM:
    return TaskDependencyORM(
        id=dependency.id,
        predecessor_task_id=dependency.predecessor_task_id,
        successor_task_id=dependency.successor_task_id,
    )


def dependency_rows_for(task: Task) -> list[TaskDependencyORM]:
    return [dependency_to_orm(TaskDependency.create(dep_id, task.id)) for dep_id in task.dependencies]


def dependency_from_orm(obj: TaskDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        predecessor_task_id=obj.predecessor_task_id,
        successor_task_id=obj.successor_task_id,
    )
