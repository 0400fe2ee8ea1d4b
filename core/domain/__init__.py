from core.domain.identifiers import parse_task_id, utc_now
from core.domain.task import Task, TaskDependency, TaskImage, TaskScheduleUpdate

__all__ = [
    "utc_now",
    "parse_task_id",
    "Task",
    "TaskDependency",
    "TaskImage",
    "TaskScheduleUpdate",
]
