# tests/conftest.py
import pytest

from core.models import Task
from core.services.scheduling import SchedulingEngine
from infra.db.base import create_db_engine, create_session_factory, init_db
from infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    TestingSessionLocal = create_session_factory(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def services(session):
    return build_service_graph(session).as_dict()


@pytest.fixture
def engine():
    return SchedulingEngine()


@pytest.fixture
def make_task():
    def _make(task_id, duration, deps=(), **extra):
        return Task(id=task_id, name=extra.pop("name", f"Task {task_id}"), duration=duration, dependencies=tuple(deps), **extra)

    return _make
