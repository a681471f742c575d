# infra/db/repositories.py
from __future__ import annotations

from infra.db.project.repository import SqlAlchemyProjectRepository
from infra.db.task.repository import SqlAlchemyDependencyRepository, SqlAlchemyTaskRepository

__all__ = [
    "SqlAlchemyProjectRepository",
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
