from .critical_path import CriticalPathService, CriticalPathSummary, RecalculationOutcome, RecalculationQueue
from .image import InlineExecutor, TaskImageService
from .scheduling import calculate_critical_path, scheduling_tasks_from, validate_new_dependency
from .task import TaskService

__all__ = [
    "TaskService",
    "CriticalPathService",
    "CriticalPathSummary",
    "RecalculationOutcome",
    "RecalculationQueue",
    "TaskImageService",
    "InlineExecutor",
    "calculate_critical_path",
    "scheduling_tasks_from",
    "validate_new_dependency",
]
