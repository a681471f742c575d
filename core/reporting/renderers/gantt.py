from datetime import date, timedelta
from pathlib import Path

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from matplotlib.dates import date2num
from matplotlib import ticker

from core.services.scheduling.models import ScheduleReport


def _axis_value(value) -> float:
    if isinstance(value, date):
        return float(date2num(value))
    return float(value)


def _axis_span(value) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds() / 86400.0
    return float(value)


class ScheduleGanttRenderer:
    def render(self, report: ScheduleReport, output_path: Path) -> Path:
        rows = sorted(report.tasks, key=lambda t: (t.earliest_start, t.earliest_finish))
        dated = isinstance(report.project_start, date)

        names = [t.name or str(t.task_id) for t in rows]

        fig, ax = plt.subplots(figsize=(12, max(3, 0.4 * len(rows) + 1.5)))

        for i, t in enumerate(rows):
            start = _axis_value(t.earliest_start)
            width = _axis_span(t.duration)
            ax.barh(i, width, left=start, height=0.4,
                    color="#ffcccc" if t.is_critical else "#d0d0ff",
                    edgecolor="black", linewidth=0.6)
            slack = _axis_span(t.slack)
            if slack > 0:
                # float tail: how far the task may slip
                ax.barh(i, slack, left=start + width, height=0.1,
                        color="#999999")

        ax.set_yticks(range(len(names)))
        ax.set_yticklabels(names, fontsize=9)
        ax.invert_yaxis()

        if dated:
            locator = mdates.AutoDateLocator(minticks=4, maxticks=10)
            ax.xaxis.set_major_locator(locator)
            ax.xaxis.set_major_formatter(mdates.ConciseDateFormatter(locator))
            ax.xaxis.set_minor_locator(ticker.NullLocator())
        else:
            ax.set_xlabel("Time units")

        if report.project_finish is not None:
            ax.axvline(_axis_value(report.project_finish), color="red", linestyle="--", linewidth=1)

        ax.set_title("Critical Path Schedule")
        ax.grid(True, axis="x", linestyle=":", linewidth=0.5)

        fig.tight_layout()
        fig.savefig(output_path, dpi=150)
        plt.close(fig)

        return output_path
