from datetime import date, timedelta

import matplotlib

matplotlib.use("Agg")

import pytest
from openpyxl import load_workbook

from core.exceptions import BusinessRuleError
from core.reporting.api import generate_schedule_excel, generate_schedule_gantt_png

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def dated_report(engine, make_task):
    tasks = [
        make_task("A", timedelta(days=2), name="Design"),
        make_task("B", timedelta(days=3), ["A"], name="Build"),
        make_task("C", timedelta(days=1), ["A"], name="Docs"),
    ]
    return engine.compute(tasks, project_start=date(2024, 1, 1))


def test_excel_export_has_overview_schedule_and_chains(dated_report, tmp_path):
    path = generate_schedule_excel(dated_report, tmp_path / "out" / "schedule.xlsx")

    assert path.exists()
    wb = load_workbook(path)
    assert wb.sheetnames == ["Overview", "Schedule", "Critical chains"]

    ws = wb["Schedule"]
    assert ws["A1"].value == "Task ID"
    assert ws["I1"].value == "Critical"
    rows = list(ws.iter_rows(min_row=2, values_only=True))
    assert rows[0] == ("A", "Design", 2, "2024-01-01", "2024-01-03", "2024-01-01", "2024-01-03", 0, "Yes")
    assert rows[2][0] == "C"
    assert rows[2][7] == 2
    assert rows[2][8] == "No"

    chains = wb["Critical chains"]
    assert chains["B2"].value == "Design -> Build"


def test_excel_export_of_numeric_schedule(engine, make_task, tmp_path):
    report = engine.compute([make_task("A", 5), make_task("B", 2, ["A"])])

    path = generate_schedule_excel(report, tmp_path / "numeric.xlsx")

    ws = load_workbook(path)["Overview"]
    values = {ws.cell(r, 1).value: ws.cell(r, 2).value for r in range(3, ws.max_row + 1)}
    assert values["Project start"] == 0
    assert values["Project finish"] == 7
    assert values["Critical tasks"] == 2


def test_gantt_export_writes_png(dated_report, tmp_path):
    path = generate_schedule_gantt_png(dated_report, tmp_path / "charts" / "gantt.png")

    assert path.read_bytes()[:8] == PNG_MAGIC


def test_gantt_export_handles_numeric_axis(engine, make_task, tmp_path):
    report = engine.compute([make_task("A", 5), make_task("B", 2, ["A"]), make_task("C", 1, ["A"])])

    path = generate_schedule_gantt_png(report, tmp_path / "numeric.png")

    assert path.read_bytes()[:8] == PNG_MAGIC


def test_exports_refuse_empty_schedule(engine, tmp_path):
    report = engine.compute([])

    with pytest.raises(BusinessRuleError) as exc:
        generate_schedule_excel(report, tmp_path / "empty.xlsx")
    assert exc.value.code == "EMPTY_SCHEDULE"

    with pytest.raises(BusinessRuleError):
        generate_schedule_gantt_png(report, tmp_path / "empty.png")
    assert not (tmp_path / "empty.png").exists()
