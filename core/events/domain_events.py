"""Process-wide change notifications: task graph edits and persisted schedule runs."""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        # payload: id of the task whose row or edges changed
        self.tasks_changed: Signal[int] = Signal()
        # payload: ids on the critical path after a persisted recalculation
        self.schedule_changed: Signal[list[int]] = Signal()


# SINGLE global instance
domain_events = DomainEvents()
