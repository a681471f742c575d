from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.exceptions import DomainError
from core.services.scheduling import ProjectScheduleService, ScheduleReport, SchedulingEngine
from infra.db.repositories import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyTaskRepository,
)
from infra.operational_support import OperationalSupport, bind_trace_id, get_operational_support

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    project_repo: SqlAlchemyProjectRepository
    task_repo: SqlAlchemyTaskRepository
    dependency_repo: SqlAlchemyDependencyRepository
    scheduling_engine: SchedulingEngine
    project_schedule_service: ProjectScheduleService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "project_repo": self.project_repo,
            "task_repo": self.task_repo,
            "dependency_repo": self.dependency_repo,
            "scheduling_engine": self.scheduling_engine,
            "project_schedule_service": self.project_schedule_service,
        }


def build_service_graph(session: Session, scheduling_engine: SchedulingEngine | None = None) -> ServiceGraph:
    project_repo = SqlAlchemyProjectRepository(session)
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)
    engine = scheduling_engine or SchedulingEngine()

    project_schedule_service = ProjectScheduleService(
        session,
        project_repo,
        task_repo,
        engine=engine,
    )

    return ServiceGraph(
        session=session,
        project_repo=project_repo,
        task_repo=task_repo,
        dependency_repo=dependency_repo,
        scheduling_engine=engine,
        project_schedule_service=project_schedule_service,
    )


def run_schedule_recalculation(
    services: ServiceGraph,
    project_id: str,
    *,
    trace_id: str | None = None,
    support: OperationalSupport | None = None,
) -> ScheduleReport:
    """
    Request-level entry point: recalculates one project under a trace id and
    records the outcome as a support event. Errors are re-raised unchanged.
    """
    recorder = support or get_operational_support()
    with bind_trace_id(trace_id) as resolved_trace:
        try:
            report = services.project_schedule_service.recalculate_project_schedule(project_id)
        except DomainError as exc:
            recorder.emit_event(
                event_type="schedule.rejected",
                level="WARNING",
                trace_id=resolved_trace,
                message=str(exc),
                data={"project_id": project_id, "code": exc.code},
            )
            raise

        recorder.emit_event(
            event_type="schedule.recalculated",
            trace_id=resolved_trace,
            message=f"Recalculated schedule for project {project_id}",
            data={
                "project_id": project_id,
                "tasks": len(report),
                "critical_task_ids": report.critical_task_ids,
                "project_finish": report.project_finish,
            },
        )
        logger.info("Schedule run %s finished for project %s", resolved_trace, project_id)
        return report


__all__ = ["ServiceGraph", "build_service_graph", "run_schedule_recalculation"]
