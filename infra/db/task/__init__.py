from infra.db.task.mapper import (
    dependency_from_orm,
    dependency_rows_for,
    dependency_to_orm,
    duration_to_days,
    task_from_orm,
    task_to_orm,
)
from infra.db.task.repository import SqlAlchemyDependencyRepository, SqlAlchemyTaskRepository

__all__ = [
    "task_to_orm",
    "task_from_orm",
    "dependency_to_orm",
    "dependency_rows_for",
    "dependency_from_orm",
    "duration_to_days",
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
