# core/models.py
from __future__ import annotations

from core.domain import (
    Duration,
    Instant,
    Project,
    Task,
    TaskDependency,
    generate_id,
)

__all__ = [
    "generate_id",
    "Instant",
    "Duration",
    "Project",
    "Task",
    "TaskDependency",
]
