from .scheduling import (
    ProjectScheduleService,
    ScheduledTask,
    ScheduleReport,
    SchedulingEngine,
    TaskGraph,
    build_task_graph,
)

__all__ = [
    "SchedulingEngine",
    "TaskGraph",
    "build_task_graph",
    "ScheduledTask",
    "ScheduleReport",
    "ProjectScheduleService",
]
