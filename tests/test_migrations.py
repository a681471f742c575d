from datetime import date, timedelta

from sqlalchemy import inspect

from core.models import Project, Task
from infra.db.base import create_db_engine, create_session_factory
from infra.migrate import run_migrations
from infra.services import build_service_graph


def test_migrations_create_schedule_schema(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'schedules.db').as_posix()}"

    run_migrations(db_url)

    engine = create_db_engine(db_url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert {"projects", "tasks", "task_dependencies", "alembic_version"} <= tables
        task_columns = {c["name"] for c in inspector.get_columns("tasks")}
        assert {"earliest_start", "latest_finish", "slack_days", "is_critical"} <= task_columns
    finally:
        engine.dispose()


def test_migrated_database_runs_a_schedule(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'schedules.db').as_posix()}"
    run_migrations(db_url)
    # second upgrade is a no-op
    run_migrations(db_url)

    engine = create_db_engine(db_url)
    session = create_session_factory(engine)()
    try:
        services = build_service_graph(session)
        project = Project.create("Migrated", start_date=date(2024, 5, 1))
        services.project_repo.add(project)
        first = Task.create("First", timedelta(days=1), project_id=project.id)
        second = Task.create("Second", timedelta(days=2), [first.id], project_id=project.id)
        services.task_repo.add(first)
        services.task_repo.add(second)
        session.commit()

        report = services.project_schedule_service.recalculate_project_schedule(project.id)

        assert report.project_finish == date(2024, 5, 4)
        assert report.critical_task_ids == [first.id, second.id]
    finally:
        session.close()
        engine.dispose()
