from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Union

from sqlalchemy.orm import Session

from core.events.domain_events import DomainEvents
from core.exceptions import NotFoundError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency
from core.services.image import TaskImageService


logger = logging.getLogger(__name__)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# distinguishes "leave the due date alone" from "clear it" (None)
UNSET = _Unset()

DueDateInput = Union[date, datetime, str, None]


class TaskLifecycleMixin:
    _session: Session
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository
    _image_service: Optional[TaskImageService]
    _events: DomainEvents

    def create_task(
        self,
        title: str,
        due_date: DueDateInput = None,
        estimated_days: int = 1,
        dependencies: Iterable[int] = (),
    ) -> Task:
        cleaned_title = self._validate_title(title)
        days = self._validate_estimated_days(estimated_days)
        parsed_due = self._parse_due_date(due_date)
        depends_on = list(dict.fromkeys(dependencies))

        for dep_id in depends_on:
            if not self._task_repo.get(dep_id):
                raise NotFoundError(f"Dependency task {dep_id} not found.", code="TASK_NOT_FOUND")

        task = Task.create(
            cleaned_title,
            due_date=parsed_due,
            estimated_days=days,
            image_loading=self._image_service is not None,
        )

        try:
            self._task_repo.add(task)
            for dep_id in depends_on:
                self._check_dependency_allowed(task.id, dep_id)
                self._dependency_repo.add(TaskDependency.create(task.id, dep_id))
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error("Error creating task: %s", exc)
            raise

        task.depends_on_ids = depends_on
        logger.info("Created task %s - %s", task.id, task.title)
        self._events.tasks_changed.emit(task.id)
        self._request_image(task.id, task.title)
        self._request_recalculation()
        return task

    def update_task(
        self,
        task_id: int,
        title: Optional[str] = None,
        completed: Optional[bool] = None,
        due_date: DueDateInput | _Unset = UNSET,
        estimated_days: Optional[int] = None,
    ) -> Task:
        """Partial update. Only the arguments that are passed are applied."""
        task = self._task_repo.get(task_id)
        if not task:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")

        title_changed = False
        if title is not None:
            cleaned_title = self._validate_title(title)
            title_changed = cleaned_title != task.title
            task.title = cleaned_title
        if completed is not None:
            task.completed = bool(completed)
        if not isinstance(due_date, _Unset):
            task.due_date = self._parse_due_date(due_date)

        estimate_changed = False
        if estimated_days is not None:
            days = self._validate_estimated_days(estimated_days)
            estimate_changed = days != task.estimated_days
            task.estimated_days = days

        mark_image_loading = title_changed and self._image_service is not None
        if mark_image_loading:
            task.image_loading = True

        try:
            self._task_repo.update(task, mark_image_loading=mark_image_loading)
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error("Error updating task %s: %s", task_id, exc)
            raise

        self._events.tasks_changed.emit(task.id)
        if title_changed:
            self._request_image(task.id, task.title)
        if estimate_changed:
            self._request_recalculation()
        return task

    def set_completed(self, task_id: int, completed: bool) -> Task:
        return self.update_task(task_id, completed=completed)

    def delete_task(self, task_id: int) -> None:
        task = self._task_repo.get(task_id)
        if not task:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")

        try:
            self._dependency_repo.delete_for_task(task_id)
            self._task_repo.delete(task_id)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info("Deleted task %s - %s", task_id, task.title)
        self._events.tasks_changed.emit(task_id)
        self._request_recalculation()

    def _request_image(self, task_id: int, title: str) -> None:
        if self._image_service is None:
            return
        self._image_service.schedule_lookup(task_id, title)
