from __future__ import annotations

from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency
from core.services.scheduling.models import ScheduledTask
from infra.db.models import TaskDependencyORM, TaskORM
from infra.db.task.mapper import (
    dependency_from_orm,
    dependency_rows_for,
    dependency_to_orm,
    duration_to_days,
    task_from_orm,
    task_to_orm,
)


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> None:
        self.session.add(task_to_orm(task))
        self.session.add_all(dependency_rows_for(task))

    def get(self, task_id: str) -> Optional[Task]:
        obj = self.session.get(TaskORM, task_id)
        if obj is None:
            return None
        return task_from_orm(obj, self._dependency_ids([task_id]).get(task_id, []))

    def list_by_project(self, project_id: str) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.project_id == project_id).order_by(TaskORM.name, TaskORM.id)
        rows = self.session.execute(stmt).scalars().all()
        deps = self._dependency_ids([row.id for row in rows])
        return [task_from_orm(row, deps.get(row.id, [])) for row in rows]

    def update_schedule(self, scheduled: ScheduledTask) -> None:
        stmt = (
            update(TaskORM)
            .where(TaskORM.id == scheduled.task_id)
            .values(
                earliest_start=scheduled.earliest_start,
                earliest_finish=scheduled.earliest_finish,
                latest_start=scheduled.latest_start,
                latest_finish=scheduled.latest_finish,
                slack_days=duration_to_days(scheduled.slack),
                is_critical=scheduled.is_critical,
            )
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError(f"Task {scheduled.task_id!r} not found.")

    def _dependency_ids(self, task_ids: List[str]) -> Dict[str, List[str]]:
        # keyed by successor; predecessors may live outside the project
        if not task_ids:
            return {}
        stmt = (
            select(TaskDependencyORM)
            .where(TaskDependencyORM.successor_task_id.in_(task_ids))
            .order_by(TaskDependencyORM.predecessor_task_id)
        )
        grouped: Dict[str, List[str]] = defaultdict(list)
        for row in self.session.execute(stmt).scalars().all():
            dependency = dependency_from_orm(row)
            grouped[dependency.successor_task_id].append(dependency.predecessor_task_id)
        return grouped


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> None:
        self.session.add(dependency_to_orm(dependency))

    def get(self, dependency_id: str) -> Optional[TaskDependency]:
        obj = self.session.get(TaskDependencyORM, dependency_id)
        return dependency_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[TaskDependency]:
        task_ids_subq = select(TaskORM.id).where(TaskORM.project_id == project_id)
        stmt = select(TaskDependencyORM).where(TaskDependencyORM.successor_task_id.in_(task_ids_subq))
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(r) for r in rows]

    def delete(self, dependency_id: str) -> None:
        self.session.execute(delete(TaskDependencyORM).where(TaskDependencyORM.id == dependency_id))


__all__ = ["SqlAlchemyTaskRepository", "SqlAlchemyDependencyRepository"]
