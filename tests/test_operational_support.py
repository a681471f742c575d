from __future__ import annotations

import json
import logging
from datetime import date, timedelta

from infra.logging_config import setup_logging
from infra.operational_support import (
    OperationalSupport,
    TraceIdLogFilter,
    bind_trace_id,
    current_trace_id,
)


def test_operational_support_emits_structured_event(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)

    with bind_trace_id("run-test-123"):
        trace_id = support.emit_event(
            event_type="schedule.test",
            message="scheduled",
            data={"finish": date(2024, 1, 6), "slack": timedelta(days=1), "ids": ("A", "B")},
        )

    assert trace_id == "run-test-123"
    rows = events_path.read_text(encoding="utf-8").splitlines()
    assert len(rows) == 1
    payload = json.loads(rows[0])
    assert payload["trace_id"] == "run-test-123"
    assert payload["event_type"] == "schedule.test"
    assert payload["level"] == "INFO"
    assert payload["data"] == {"finish": "2024-01-06", "slack": 86400.0, "ids": ["A", "B"]}


def test_read_events_filters_by_trace_and_skips_garbage(tmp_path):
    events_path = tmp_path / "support-events.jsonl"
    support = OperationalSupport(events_path=events_path)
    support.emit_event(event_type="a", message="", trace_id="run-a")
    with events_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n\n")
    support.emit_event(event_type="b", message="", trace_id="run-b", level="warning")

    assert [e["event_type"] for e in support.read_events()] == ["a", "b"]
    only_b = support.read_events(trace_id="run-b")
    assert len(only_b) == 1
    assert only_b[0]["level"] == "WARNING"


def test_bind_trace_id_generates_and_restores():
    assert current_trace_id() is None
    with bind_trace_id(None) as trace_id:
        assert trace_id.startswith("run-")
        assert current_trace_id() == trace_id
    assert current_trace_id() is None


def test_trace_filter_stamps_records():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    log_filter = TraceIdLogFilter()

    assert log_filter.filter(record) is True
    assert record.trace_id == "-"

    with bind_trace_id("run-xyz"):
        log_filter.filter(record)
    assert record.trace_id == "run-xyz"


def test_setup_logging_writes_trace_id_to_file(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        log_file = setup_logging(log_dir=tmp_path)
        with bind_trace_id("run-log-1"):
            logging.getLogger("core.services.scheduling").info("scheduled 3 tasks")
        for handler in root.handlers:
            handler.flush()

        assert log_file == tmp_path / "scheduler.log"
        text = log_file.read_text(encoding="utf-8")
        assert "trace=run-log-1" in text
        assert "scheduled 3 tasks" in text
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
