from .engine import SchedulingEngine
from .graph import TaskGraph, build_task_graph
from .models import ScheduledTask, ScheduleReport
from .service import ProjectScheduleService

__all__ = [
    "SchedulingEngine",
    "TaskGraph",
    "build_task_graph",
    "ScheduledTask",
    "ScheduleReport",
    "ProjectScheduleService",
]
