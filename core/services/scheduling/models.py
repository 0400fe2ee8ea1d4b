from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional, Tuple

TaskId = int
AdjacencyMap = Dict[TaskId, List[TaskId]]

# Zero epoch used when the caller does not anchor the run; keeps repeated runs identical.
SCHEDULE_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Numeric safety margin for slack comparisons, not a business rule.
TOLERANCE = timedelta(seconds=1)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class SchedulingTask:
    id: TaskId
    duration_days: Optional[float] = 1
    completed: bool = False
    depends_on: Tuple[TaskId, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or isinstance(self.id, bool):
            raise TypeError(f"Task id must be an int, got {self.id!r}")
        duration = 1 if self.duration_days is None else self.duration_days
        if not isinstance(duration, (int, float)) or isinstance(duration, bool):
            raise TypeError(f"Task {self.id}: duration_days must be a number, got {duration!r}")
        if duration < 0:
            raise ValueError(f"Task {self.id}: duration_days cannot be negative ({duration}).")
        object.__setattr__(self, "duration_days", duration)
        object.__setattr__(self, "depends_on", tuple(self.depends_on))

    @property
    def duration(self) -> timedelta:
        return self.duration_days * ONE_DAY


class BackwardRegime(str, Enum):
    CONNECTED = "CONNECTED"
    INDEPENDENT = "INDEPENDENT"
    DISCONNECTED = "DISCONNECTED"


@dataclass
class PartialSchedule:
    earliest_start: datetime
    earliest_finish: datetime


@dataclass(frozen=True)
class ScheduleEntry:
    earliest_start: datetime
    earliest_finish: datetime
    latest_start: datetime
    latest_finish: datetime
    slack: timedelta
    is_on_critical_path: bool

    @property
    def slack_days(self) -> float:
        return self.slack / ONE_DAY


@dataclass(frozen=True)
class CircularDependency:
    cycle: List[TaskId]
    message: str


@dataclass(frozen=True)
class CriticalPathResult:
    is_valid: bool
    critical_path: List[TaskId] = field(default_factory=list)
    schedule: Dict[TaskId, ScheduleEntry] = field(default_factory=dict)
    circular_dependency: Optional[CircularDependency] = None

    @property
    def critical_task_count(self) -> int:
        return len(self.critical_path)

    @property
    def project_end(self) -> Optional[datetime]:
        if not self.schedule:
            return None
        return max(entry.earliest_finish for entry in self.schedule.values())


@dataclass(frozen=True)
class DependencyValidation:
    ok: bool
    cycle: Optional[List[TaskId]] = None

    @property
    def message(self) -> str:
        if self.ok or not self.cycle:
            return ""
        return format_cycle_message(self.cycle)


def format_cycle_message(cycle: List[TaskId]) -> str:
    return "Circular dependency detected: " + " → ".join(str(task_id) for task_id in cycle)
