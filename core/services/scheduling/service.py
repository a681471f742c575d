from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import DomainError, NotFoundError
from core.interfaces import ProjectRepository, TaskRepository
from core.services.common.base import ServiceBase
from core.services.scheduling.engine import SchedulingEngine
from core.services.scheduling.models import ScheduleReport

logger = logging.getLogger(__name__)


class ProjectScheduleService(ServiceBase):
    """
    Storage-facing side of the scheduler: loads one project's tasks, runs the
    engine, writes the timing fields back.

    Tasks are always loaded per project; a dependency on a task of another
    project surfaces as UnknownDependencyError.
    """

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        task_repo: TaskRepository,
        engine: Optional[SchedulingEngine] = None,
    ):
        super().__init__(session)
        self._project_repo: ProjectRepository = project_repo
        self._task_repo: TaskRepository = task_repo
        self._engine: SchedulingEngine = engine or SchedulingEngine()

    def preview_project_schedule(self, project_id: str) -> ScheduleReport:
        """Compute the schedule without persisting anything."""
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.")
        tasks = self._task_repo.list_by_project(project_id)
        return self._engine.compute(
            tasks,
            project_start=project.start_date,
            project_finish=project.end_date,
        )

    def recalculate_project_schedule(self, project_id: str) -> ScheduleReport:
        """
        Full CPM calculation for a project:
        - project start/end dates anchor T0/Tend when set
        - every task gets ES/EF/LS/LF, slack and the critical flag
        - all-or-nothing: nothing is written when the engine rejects the input
        """
        try:
            report = self.preview_project_schedule(project_id)
        except DomainError:
            domain_events.schedule_rejected.emit(project_id)
            raise

        try:
            for scheduled in report:
                self._task_repo.update_schedule(scheduled)
        except Exception as e:
            self.rollback()
            logger.error("Error persisting schedule for project %s: %s", project_id, e)
            raise
        self.commit()

        logger.info(
            "Recalculated schedule for project %s: %d tasks, %d critical",
            project_id,
            len(report),
            len(report.critical_task_ids),
        )
        domain_events.schedule_recalculated.emit(project_id)
        return report


__all__ = ["ProjectScheduleService"]
