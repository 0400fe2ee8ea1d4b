# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from core.models import Task, TaskDependency, TaskImage, TaskScheduleUpdate


class TaskRepository(ABC):
    @abstractmethod
    def add(self, task: Task) -> Task: ...

    @abstractmethod
    def update(self, task: Task, *, mark_image_loading: bool = False) -> None:
        """Write the user-editable fields; schedule and image fields are left alone."""

    @abstractmethod
    def delete(self, task_id: int) -> None: ...

    @abstractmethod
    def get(self, task_id: int) -> Optional[Task]: ...

    @abstractmethod
    def list_all(self) -> List[Task]:
        """All tasks with relations loaded, newest first."""

    @abstractmethod
    def list_for_scheduling(self) -> List[Task]:
        """All tasks with relations loaded, in stable id order."""

    @abstractmethod
    def update_schedule_many(self, updates: Iterable[TaskScheduleUpdate]) -> int:
        """Stage schedule fields for many tasks; the caller commits once."""

    @abstractmethod
    def update_image(
        self,
        task_id: int,
        image: Optional[TaskImage],
        *,
        search_text: Optional[str],
    ) -> None: ...


class DependencyRepository(ABC):
    @abstractmethod
    def add(self, dependency: TaskDependency) -> TaskDependency: ...

    @abstractmethod
    def get(self, task_id: int, depends_on_id: int) -> Optional[TaskDependency]: ...

    @abstractmethod
    def delete(self, task_id: int, depends_on_id: int) -> int:
        """Returns the number of deleted rows."""

    @abstractmethod
    def list_by_task(self, task_id: int) -> List[TaskDependency]: ...

    @abstractmethod
    def delete_for_task(self, task_id: int) -> None: ...


class ImageSearchClient(ABC):
    @abstractmethod
    def search_image(self, text: str) -> Optional[TaskImage]:
        """Best matching image for a task title, or None."""
