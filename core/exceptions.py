# core/exceptions.py
from __future__ import annotations

from typing import Any, Sequence


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., circular dependencies)."""


# ---------- Scheduling ----------

class SchedulingError(DomainError):
    """Base class for errors raised while computing a CPM schedule."""


class UnknownDependencyError(SchedulingError, ValidationError):
    """A task depends on an id that is not part of the computation set."""

    def __init__(self, task_id: Any, missing_id: Any):
        super().__init__(
            f"Task {task_id!r} depends on unknown task {missing_id!r}.",
            code="UNKNOWN_DEPENDENCY",
        )
        self.task_id = task_id
        self.missing_id = missing_id


class CyclicDependencyError(SchedulingError, BusinessRuleError):
    """The dependency relation is not a DAG."""

    def __init__(self, cycle_task_ids: Sequence[Any]):
        ids = list(cycle_task_ids)
        chain = " -> ".join(repr(i) for i in ids + ids[:1])
        super().__init__(
            f"Cannot schedule project: circular dependency detected ({chain}).",
            code="SCHEDULE_CYCLE",
        )
        self.cycle_task_ids = ids


class InfeasibleDeadlineError(SchedulingError, BusinessRuleError):
    """The project completion instant precedes the earliest possible finish."""

    def __init__(self, project_finish: Any, earliest_finish: Any):
        super().__init__(
            f"Project completion {project_finish!r} precedes the earliest "
            f"possible finish {earliest_finish!r}.",
            code="INFEASIBLE_DEADLINE",
        )
        self.project_finish = project_finish
        self.earliest_finish = earliest_finish


class NegativeSlackError(SchedulingError):
    """A deadline or start bound leaves a task with negative slack."""

    def __init__(self, task_id: Any, slack: Any):
        super().__init__(
            f"Task {task_id!r} has negative slack ({slack!r}); "
            "check its deadline and start bounds.",
            code="NEGATIVE_SLACK",
        )
        self.task_id = task_id
        self.slack = slack
