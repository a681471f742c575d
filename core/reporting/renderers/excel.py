from datetime import date, timedelta
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side

from core.services.scheduling.models import ScheduleReport


def _cell_value(value):
    if isinstance(value, timedelta):
        return value.days if not value.seconds else value.total_seconds() / 86400.0
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return ""
    if isinstance(value, (int, float, str, bool)):
        return value
    return str(value)


class ScheduleExcelRenderer:
    def render(self, report: ScheduleReport, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()

        header_font = Font(bold=True)
        title_font = Font(bold=True, size=14)
        critical_font = Font(bold=True, color="C00000")
        center = Alignment(horizontal="center")
        thin_border = Border(
            left=Side(style="thin"),
            right=Side(style="thin"),
            top=Side(style="thin"),
            bottom=Side(style="thin"),
        )
        header_fill = PatternFill("solid", fgColor="DDDDDD")

        # ---------------- Overview ----------------
        ws = wb.active
        ws.title = "Overview"

        ws["A1"] = "Critical path schedule"
        ws["A1"].font = title_font

        row = 3

        def kv(key, value):
            nonlocal row
            ws[f"A{row}"] = key
            ws[f"B{row}"] = _cell_value(value)
            ws[f"A{row}"].font = header_font
            ws[f"A{row}"].border = thin_border
            ws[f"B{row}"].border = thin_border
            row += 1

        kv("Project start", report.project_start)
        kv("Project finish", report.project_finish)
        kv("Earliest possible finish", report.earliest_project_finish)

        row += 1
        kv("Tasks - total", len(report))
        kv("Critical tasks", len(report.critical_task_ids))
        kv("Critical chains", len(report.critical_chains))

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 25

        # ---------------- Schedule ----------------
        ws_tasks = wb.create_sheet("Schedule")
        headers = [
            "Task ID",
            "Name",
            "Duration",
            "Earliest start",
            "Earliest finish",
            "Latest start",
            "Latest finish",
            "Slack",
            "Critical",
        ]
        for col_index, h in enumerate(headers, start=1):
            cell = ws_tasks.cell(row=1, column=col_index, value=h)
            cell.font = header_font
            cell.alignment = center
            cell.fill = header_fill
            cell.border = thin_border

        for row_index, t in enumerate(report.tasks, start=2):
            values = [
                t.task_id,
                t.name,
                t.duration,
                t.earliest_start,
                t.earliest_finish,
                t.latest_start,
                t.latest_finish,
                t.slack,
                "Yes" if t.is_critical else "No",
            ]
            for col_index, v in enumerate(values, start=1):
                cell = ws_tasks.cell(row=row_index, column=col_index, value=_cell_value(v))
                cell.border = thin_border
                if t.is_critical:
                    cell.font = critical_font

        ws_tasks.column_dimensions["A"].width = 36
        ws_tasks.column_dimensions["B"].width = 30
        for col_letter in ("C", "D", "E", "F", "G", "H", "I"):
            ws_tasks.column_dimensions[col_letter].width = 15

        # ---------------- Critical chains ----------------
        ws_chains = wb.create_sheet("Critical chains")
        for c, h in enumerate(("Chain", "Sequence"), start=1):
            cell = ws_chains.cell(1, c, h)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = center
            cell.border = thin_border

        names = {t.task_id: (t.name or str(t.task_id)) for t in report.tasks}
        for r, chain in enumerate(report.critical_chains, start=2):
            ws_chains.cell(r, 1, r - 1).border = thin_border
            ws_chains.cell(r, 2, " -> ".join(names[tid] for tid in chain)).border = thin_border

        ws_chains.column_dimensions["A"].width = 10
        ws_chains.column_dimensions["B"].width = 80

        wb.save(output_path)
        return output_path
