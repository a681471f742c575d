"""Notify listeners (dashboards, exporters, caches) about schedule changes."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.schedule_recalculated: Signal[str] = Signal()  # project_id
        self.schedule_rejected: Signal[str] = Signal()      # project_id


# SINGLE global instance
domain_events = DomainEvents()
