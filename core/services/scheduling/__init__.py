from .engine import calculate_critical_path, scheduling_tasks_from, validate_new_dependency
from .models import (
    SCHEDULE_EPOCH,
    TOLERANCE,
    BackwardRegime,
    CircularDependency,
    CriticalPathResult,
    DependencyValidation,
    ScheduleEntry,
    SchedulingTask,
)

__all__ = [
    "calculate_critical_path",
    "scheduling_tasks_from",
    "validate_new_dependency",
    "SCHEDULE_EPOCH",
    "TOLERANCE",
    "BackwardRegime",
    "CircularDependency",
    "CriticalPathResult",
    "DependencyValidation",
    "ScheduleEntry",
    "SchedulingTask",
]
