from __future__ import annotations

from typing import List

from core.exceptions import NotFoundError
from core.interfaces import TaskRepository
from core.models import Task


def _is_ready(task: Task, completed_by_id: dict[int, bool]) -> bool:
    if task.completed:
        return False
    # a prerequisite that no longer exists counts as not done
    return all(completed_by_id.get(dep_id, False) for dep_id in task.depends_on_ids)


class TaskQueryMixin:
    _task_repo: TaskRepository

    def get_task(self, task_id: int) -> Task:
        task = self._task_repo.get(task_id)
        if not task:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return task

    def list_tasks(self) -> List[Task]:
        return self._task_repo.list_all()

    def list_ready_tasks(self, limit: int = 5) -> List[Task]:
        """
        Open tasks whose prerequisites are all completed.
        Critical tasks come first, then longer estimates.
        """
        ready = self._ready_tasks()
        ready.sort(key=lambda t: (not t.is_on_critical_path, -(t.estimated_days or 1)))
        return ready[: max(limit, 0)]

    def count_ready_tasks(self) -> int:
        return len(self._ready_tasks())

    def _ready_tasks(self) -> List[Task]:
        tasks = self._task_repo.list_all()
        completed_by_id = {t.id: t.completed for t in tasks}
        return [t for t in tasks if _is_ready(t, completed_by_id)]
