from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from core.domain.identifiers import utc_now


@dataclass
class Task:
    id: Optional[int]
    title: str
    completed: bool = False
    due_date: Optional[date] = None
    estimated_days: Optional[int] = 1
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    image_url: Optional[str] = None
    image_alt: Optional[str] = None
    image_loading: bool = False
    last_image_search: Optional[str] = None

    actual_start_date: Optional[datetime] = None
    actual_end_date: Optional[datetime] = None

    # persisted output of the last schedule run
    earliest_start_date: Optional[datetime] = None
    is_on_critical_path: bool = False

    # loaded relations
    depends_on_ids: list[int] = field(default_factory=list)
    dependent_ids: list[int] = field(default_factory=list)

    @staticmethod
    def create(title: str, **extra) -> "Task":
        return Task(id=None, title=title, **extra)


@dataclass
class TaskDependency:
    id: Optional[int]
    task_id: int
    depends_on_id: int
    created_at: datetime = field(default_factory=utc_now)

    @staticmethod
    def create(task_id: int, depends_on_id: int) -> "TaskDependency":
        return TaskDependency(id=None, task_id=task_id, depends_on_id=depends_on_id)


@dataclass(frozen=True)
class TaskScheduleUpdate:
    task_id: int
    earliest_start_date: datetime
    is_on_critical_path: bool


@dataclass(frozen=True)
class TaskImage:
    url: str
    alt: str


__all__ = ["Task", "TaskDependency", "TaskScheduleUpdate", "TaskImage"]
