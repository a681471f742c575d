from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, datetime, timedelta
from fractions import Fraction
from typing import Any, Iterable, Optional, Sequence

from core.exceptions import ValidationError
from core.models import Instant, Task

NUMERIC = "numeric"
TEMPORAL = "temporal"


def zero_of(value: Any) -> Any:
    """Zero of the same kind as a duration/slack value (0 or timedelta(0))."""
    return value - value


def is_zero(value: Any) -> bool:
    return value == zero_of(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _duration_family(task: Task) -> str:
    duration = task.duration
    if _is_number(duration):
        if not math.isfinite(duration):
            raise ValidationError(
                f"Task {task.id!r} has a non-finite duration {duration!r}.",
                code="INVALID_DURATION",
            )
        return NUMERIC
    if isinstance(duration, timedelta):
        return TEMPORAL
    raise ValidationError(
        f"Task {task.id!r} has an unsupported duration {duration!r}.",
        code="INVALID_DURATION",
    )


def _instant_family(value: Instant, label: str) -> tuple[str, Optional[type]]:
    if _is_number(value):
        if not math.isfinite(value):
            raise ValidationError(f"{label} is not a finite instant: {value!r}.", code="INVALID_INSTANT")
        return NUMERIC, None
    if isinstance(value, datetime):
        return TEMPORAL, datetime
    if isinstance(value, date):
        return TEMPORAL, date
    raise ValidationError(f"{label} has an unsupported instant {value!r}.", code="INVALID_INSTANT")


def detect_time_family(
    tasks: Sequence[Task],
    project_start: Optional[Instant] = None,
    project_finish: Optional[Instant] = None,
) -> Optional[str]:
    """
    Return NUMERIC or TEMPORAL for the values of one computation.

    Numbers and dates cannot be combined, and neither can plain dates and
    datetimes (they do not compare). Returns None when there is nothing to
    inspect (no tasks and no anchors).
    """
    families: set[str] = set()
    instant_types: set[type] = set()

    def _instant(value: Optional[Instant], label: str) -> None:
        if value is None:
            return
        family, kind = _instant_family(value, label)
        families.add(family)
        if kind is not None:
            instant_types.add(kind)

    _instant(project_start, "Project start")
    _instant(project_finish, "Project finish")
    for task in tasks:
        families.add(_duration_family(task))
        _instant(task.earliest_start_bound, f"Task {task.id!r} start bound")
        _instant(task.latest_finish_bound, f"Task {task.id!r} finish bound")

    if len(families) > 1 or len(instant_types) > 1:
        raise ValidationError(
            "Cannot mix numeric time units with dates, or dates with datetimes, in one schedule.",
            code="MIXED_TIME_UNITS",
        )
    if instant_types == {date}:
        _ensure_whole_days(tasks)
    return families.pop() if families else None


def _ensure_whole_days(tasks: Sequence[Task]) -> None:
    # date + timedelta silently drops the sub-day part
    for task in tasks:
        duration = task.duration
        if duration.seconds or duration.microseconds:
            raise ValidationError(
                f"Task {task.id!r} has a sub-day duration ({duration!r}); "
                "use datetime instants for hour-level schedules.",
                code="INVALID_DURATION",
            )


def ensure_non_negative(task: Task) -> None:
    if _is_number(task.duration) and not math.isfinite(task.duration):
        raise ValidationError(
            f"Task {task.id!r} has a non-finite duration {task.duration!r}.",
            code="INVALID_DURATION",
        )
    if task.duration < zero_of(task.duration):
        raise ValidationError(
            f"Task {task.id!r} has a negative duration ({task.duration!r}).",
            code="INVALID_DURATION",
        )


def resolve_project_start(
    roots: Iterable[Task],
    project_start: Optional[Instant],
    family: Optional[str],
) -> Optional[Instant]:
    """T0: explicit value, else the earliest root bound, else 0 for numeric schedules."""
    if project_start is not None:
        return project_start
    bounds = [t.earliest_start_bound for t in roots if t.earliest_start_bound is not None]
    if bounds:
        return min(bounds)
    if family == NUMERIC:
        return 0
    if family == TEMPORAL:
        raise ValidationError(
            "A project start date is required when no task declares a start date.",
            code="PROJECT_START_REQUIRED",
        )
    return None


def resolve_project_finish(
    leaves: Iterable[Task],
    project_finish: Optional[Instant],
    earliest_finish: Optional[Instant],
) -> Optional[Instant]:
    """
    Tend: explicit value, else the latest leaf deadline when every leaf declares
    one, else the earliest project finish. Individual leaf deadlines still cap
    their own task in the backward pass.
    """
    if project_finish is not None:
        return project_finish
    leaves = list(leaves)
    bounds = [t.latest_finish_bound for t in leaves if t.latest_finish_bound is not None]
    if leaves and len(bounds) == len(leaves):
        return max(bounds)
    return earliest_finish


def has_floats(tasks: Sequence[Task], *anchors: Optional[Instant]) -> bool:
    values = list(anchors)
    for task in tasks:
        values.extend((task.duration, task.earliest_start_bound, task.latest_finish_bound))
    return any(isinstance(v, float) for v in values)


def to_exact(value: Any) -> Any:
    """Floats become Fractions so sums and differences stay exact."""
    if isinstance(value, float):
        return Fraction(value)
    return value


def from_exact(value: Any) -> Any:
    if isinstance(value, Fraction):
        return float(value)
    return value


def exact_task(task: Task) -> Task:
    return replace(
        task,
        duration=to_exact(task.duration),
        earliest_start_bound=to_exact(task.earliest_start_bound),
        latest_finish_bound=to_exact(task.latest_finish_bound),
    )


__all__ = [
    "NUMERIC",
    "TEMPORAL",
    "zero_of",
    "is_zero",
    "detect_time_family",
    "ensure_non_negative",
    "resolve_project_start",
    "resolve_project_finish",
    "has_floats",
    "to_exact",
    "from_exact",
    "exact_task",
]
