from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import DomainEvents
from core.exceptions import CycleError, NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import TaskDependency, parse_task_id
from core.services.scheduling import scheduling_tasks_from, validate_new_dependency

logger = logging.getLogger(__name__)


class TaskDependencyMixin:
    _session: Session
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository
    _events: DomainEvents

    def list_dependencies(self, task_id: int) -> List[TaskDependency]:
        task_id = parse_task_id(task_id)
        if not self._task_repo.get(task_id):
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return self._dependency_repo.list_by_task(task_id)

    def add_dependency(self, task_id: int, depends_on_id: int) -> TaskDependency:
        """Record that ``task_id`` cannot start before ``depends_on_id`` finishes."""
        task_id, depends_on_id = parse_task_id(task_id), parse_task_id(depends_on_id)
        if not self._task_repo.get(task_id) or not self._task_repo.get(depends_on_id):
            raise NotFoundError("One or both tasks not found.", code="TASK_NOT_FOUND")

        self._check_dependency_allowed(task_id, depends_on_id)

        if self._dependency_repo.get(task_id, depends_on_id):
            raise ValidationError("Dependency already exists.", code="DEPENDENCY_DUPLICATE")

        dep = TaskDependency.create(task_id, depends_on_id)
        try:
            self._dependency_repo.add(dep)
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            logger.error("Error adding dependency %s -> %s: %s", task_id, depends_on_id, exc)
            raise

        logger.info("Task %s now depends on task %s", task_id, depends_on_id)
        self._events.tasks_changed.emit(task_id)
        self._request_recalculation()
        return dep

    def remove_dependency(self, task_id: int, depends_on_id: int) -> None:
        task_id, depends_on_id = parse_task_id(task_id), parse_task_id(depends_on_id)
        try:
            removed = self._dependency_repo.delete(task_id, depends_on_id)
            if removed == 0:
                raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info("Removed dependency %s -> %s", task_id, depends_on_id)
        self._events.tasks_changed.emit(task_id)
        self._request_recalculation()

    def _check_dependency_allowed(self, task_id: int, depends_on_id: int) -> None:
        snapshot = scheduling_tasks_from(self._task_repo.list_for_scheduling())
        validation = validate_new_dependency(snapshot, task_id, depends_on_id)
        if validation.ok:
            return
        code = "DEPENDENCY_SELF" if len(validation.cycle or []) == 1 else "DEPENDENCY_CYCLE"
        raise CycleError(validation.message, cycle=validation.cycle or [], code=code)
