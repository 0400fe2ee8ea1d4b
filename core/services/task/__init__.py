from core.services.task.lifecycle import UNSET
from core.services.task.service import TaskService

__all__ = ["TaskService", "UNSET"]
