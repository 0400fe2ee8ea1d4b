from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import DomainEvents, domain_events
from core.exceptions import CycleError
from core.interfaces import DependencyRepository, TaskRepository
from core.services.image import TaskImageService
from core.services.task.dependency import TaskDependencyMixin
from core.services.task.lifecycle import TaskLifecycleMixin
from core.services.task.query import TaskQueryMixin
from core.services.task.validation import TaskValidationMixin

logger = logging.getLogger(__name__)

ScheduleTrigger = Callable[[], object]


class TaskService(
    TaskLifecycleMixin,
    TaskDependencyMixin,
    TaskQueryMixin,
    TaskValidationMixin,
):
    def __init__(
        self,
        session: Session,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        *,
        image_service: TaskImageService | None = None,
        schedule_trigger: ScheduleTrigger | None = None,
        events: DomainEvents = domain_events,
    ):
        self._session: Session = session
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._image_service: Optional[TaskImageService] = image_service
        self._schedule_trigger: Optional[ScheduleTrigger] = schedule_trigger
        self._events: DomainEvents = events

    def _request_recalculation(self) -> None:
        # the write that triggered this is already committed; a stale schedule is not fatal
        if self._schedule_trigger is None:
            return
        try:
            self._schedule_trigger()
        except CycleError as exc:
            logger.warning("Schedule not recalculated: %s", exc)
