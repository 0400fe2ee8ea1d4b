"""Flat import surface for the domain types used by services and repositories."""
from core.domain import (
    Task,
    TaskDependency,
    TaskImage,
    TaskScheduleUpdate,
    parse_task_id,
    utc_now,
)

__all__ = [
    "utc_now",
    "parse_task_id",
    "Task",
    "TaskDependency",
    "TaskImage",
    "TaskScheduleUpdate",
]
