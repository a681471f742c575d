from core.domain.identifiers import generate_id
from core.domain.project import Project
from core.domain.task import Duration, Instant, Task, TaskDependency

__all__ = [
    "generate_id",
    "Instant",
    "Duration",
    "Project",
    "Task",
    "TaskDependency",
]
