from datetime import date, timedelta

import pytest

from core.events.domain_events import domain_events
from core.exceptions import CyclicDependencyError, NotFoundError, UnknownDependencyError
from core.models import Project, Task, TaskDependency
from infra.db.models import TaskORM
from infra.operational_support import OperationalSupport
from infra.services import build_service_graph, run_schedule_recalculation


def _seed_project(services, **project_fields):
    project = Project.create("CPM Test", "Testing CPM", start_date=date(2024, 1, 1), **project_fields)
    services["project_repo"].add(project)

    ts = services["task_repo"]
    design = Task.create("Design", timedelta(days=2), project_id=project.id)
    build = Task.create("Build", timedelta(days=3), [design.id], project_id=project.id)
    docs = Task.create("Docs", timedelta(days=1), [design.id], project_id=project.id)
    for task in (design, build, docs):
        ts.add(task)
    services["session"].commit()
    return project, design, build, docs


def test_repository_round_trips_tasks_with_dependencies(services):
    project, design, build, docs = _seed_project(services)

    loaded = services["task_repo"].list_by_project(project.id)

    # ordered by name
    assert [t.name for t in loaded] == ["Build", "Design", "Docs"]
    by_id = {t.id: t for t in loaded}
    assert by_id[build.id].dependencies == (design.id,)
    assert by_id[design.id].dependencies == ()
    assert by_id[docs.id].duration == timedelta(days=1)
    assert services["task_repo"].get("missing") is None


def test_recalculate_writes_timings_back(services):
    project, design, build, docs = _seed_project(services)
    svc = services["project_schedule_service"]

    report = svc.recalculate_project_schedule(project.id)

    assert report.project_start == date(2024, 1, 1)
    assert report.project_finish == date(2024, 1, 6)
    assert report.critical_task_ids == [build.id, design.id]
    assert report.critical_chains == ((design.id, build.id),)

    session = services["session"]
    row_docs = session.get(TaskORM, docs.id)
    assert row_docs.earliest_start == date(2024, 1, 3)
    assert row_docs.latest_finish == date(2024, 1, 6)
    assert row_docs.slack_days == 2
    assert row_docs.is_critical is False

    row_build = session.get(TaskORM, build.id)
    assert row_build.earliest_finish == date(2024, 1, 6)
    assert row_build.slack_days == 0
    assert row_build.is_critical is True


def test_project_end_date_is_used_as_finish(services):
    project, design, build, docs = _seed_project(services, end_date=date(2024, 1, 10))

    report = services["project_schedule_service"].recalculate_project_schedule(project.id)

    assert report.project_finish == date(2024, 1, 10)
    assert report.critical_task_ids == []
    assert report.get(build.id).slack == timedelta(days=4)


def test_preview_does_not_persist(services):
    project, design, build, docs = _seed_project(services)

    report = services["project_schedule_service"].preview_project_schedule(project.id)

    assert len(report) == 3
    assert services["session"].get(TaskORM, design.id).earliest_start is None


def test_unknown_project_is_not_found(services):
    with pytest.raises(NotFoundError):
        services["project_schedule_service"].recalculate_project_schedule("nope")


def test_cross_project_dependency_rejects_and_persists_nothing(services):
    project, design, build, docs = _seed_project(services)
    other = Project.create("Other", start_date=date(2024, 2, 1))
    services["project_repo"].add(other)
    foreign = Task.create("Foreign", timedelta(days=1), [design.id], project_id=other.id)
    services["task_repo"].add(foreign)
    services["session"].commit()

    rejected: list[str] = []
    recalculated: list[str] = []
    domain_events.schedule_rejected.connect(rejected.append)
    domain_events.schedule_recalculated.connect(recalculated.append)
    try:
        with pytest.raises(UnknownDependencyError) as exc:
            services["project_schedule_service"].recalculate_project_schedule(other.id)
    finally:
        domain_events.schedule_rejected.disconnect(rejected.append)
        domain_events.schedule_recalculated.disconnect(recalculated.append)

    assert exc.value.task_id == foreign.id
    assert exc.value.missing_id == design.id
    assert rejected == [other.id]
    assert recalculated == []
    assert services["session"].get(TaskORM, foreign.id).earliest_start is None


def test_recalculation_emits_domain_event(services):
    project, *_ = _seed_project(services)
    seen: list[str] = []
    domain_events.schedule_recalculated.connect(seen.append)
    try:
        services["project_schedule_service"].recalculate_project_schedule(project.id)
    finally:
        domain_events.schedule_recalculated.disconnect(seen.append)

    assert seen == [project.id]


def test_run_schedule_recalculation_records_support_events(session, tmp_path):
    graph = build_service_graph(session)
    services = graph.as_dict()
    project, design, build, docs = _seed_project(services)
    support = OperationalSupport(events_path=tmp_path / "events.jsonl")

    report = run_schedule_recalculation(graph, project.id, trace_id="run-test-1", support=support)

    events = support.read_events(trace_id="run-test-1")
    assert len(events) == 1
    event = events[0]
    assert event["event_type"] == "schedule.recalculated"
    assert event["data"]["project_id"] == project.id
    assert event["data"]["tasks"] == len(report) == 3
    assert event["data"]["project_finish"] == "2024-01-06"
    assert event["data"]["critical_task_ids"] == [build.id, design.id]


def test_run_schedule_recalculation_records_rejection(session, tmp_path):
    graph = build_service_graph(session)
    support = OperationalSupport(events_path=tmp_path / "events.jsonl")

    with pytest.raises(NotFoundError):
        run_schedule_recalculation(graph, "missing", trace_id="run-test-2", support=support)

    events = support.read_events(trace_id="run-test-2")
    assert [e["event_type"] for e in events] == ["schedule.rejected"]
    assert events[0]["level"] == "WARNING"
    assert events[0]["data"]["code"] == "NotFoundError"


def test_dependency_repository_adds_lists_and_deletes(services):
    project, design, build, docs = _seed_project(services)
    deps = services["dependency_repo"]

    link = TaskDependency.create(build.id, docs.id)
    deps.add(link)
    services["session"].commit()

    listed = deps.list_by_project(project.id)
    assert len(listed) == 3
    assert deps.get(link.id).predecessor_task_id == build.id

    report = services["project_schedule_service"].recalculate_project_schedule(project.id)
    assert report.get(docs.id).earliest_start == date(2024, 1, 6)
    assert report.project_finish == date(2024, 1, 7)

    deps.delete(link.id)
    services["session"].commit()
    assert deps.get(link.id) is None
    assert len(deps.list_by_project(project.id)) == 2


def test_dependency_added_later_can_close_a_cycle(services):
    project, design, build, docs = _seed_project(services)
    services["dependency_repo"].add(TaskDependency.create(build.id, design.id))
    services["session"].commit()

    with pytest.raises(CyclicDependencyError) as exc:
        services["project_schedule_service"].recalculate_project_schedule(project.id)

    assert set(exc.value.cycle_task_ids) == {design.id, build.id}
