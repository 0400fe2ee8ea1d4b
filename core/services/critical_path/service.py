from __future__ import annotations

import logging
import time
from datetime import datetime
from threading import Lock
from typing import Callable, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import DomainEvents, domain_events
from core.exceptions import CycleError
from core.interfaces import TaskRepository
from core.models import TaskScheduleUpdate, utc_now
from core.services.critical_path.models import CriticalPathSummary, RecalculationOutcome
from core.services.scheduling import calculate_critical_path, scheduling_tasks_from

logger = logging.getLogger(__name__)


class CriticalPathService:
    """
    Reads a snapshot of all tasks, runs the scheduling engine and, on request, persists
    earliest start / critical flag for every task in one transaction.

    get_critical_path() is a read-through cache with a short TTL. Any graph-changing
    write (tasks_changed) or persisted recalculation (schedule_changed) drops it.
    """

    def __init__(
        self,
        session: Session,
        task_repo: TaskRepository,
        *,
        cache_ttl_seconds: float = 5.0,
        events: DomainEvents = domain_events,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._session: Session = session
        self._task_repo: TaskRepository = task_repo
        self._cache_ttl = cache_ttl_seconds
        self._events = events
        self._clock = clock
        self._lock = Lock()
        self._cached: Optional[CriticalPathSummary] = None
        self._cached_at = 0.0
        # bumped on every invalidation; a result computed across a bump is not cached
        self._generation = 0

        events.tasks_changed.connect(self._on_graph_changed)
        events.schedule_changed.connect(self._on_graph_changed)

    def get_critical_path(self) -> CriticalPathSummary:
        """Current critical path without writing to the database."""
        now = self._clock()
        with self._lock:
            if self._cached is not None and (now - self._cached_at) < self._cache_ttl:
                return self._cached
            generation = self._generation

        tasks = self._task_repo.list_for_scheduling()
        result = calculate_critical_path(scheduling_tasks_from(tasks), epoch=utc_now())

        project_end_date = None
        if result.critical_path:
            project_end_date = result.schedule[result.critical_path[-1]].earliest_finish

        circular = result.circular_dependency
        summary = CriticalPathSummary(
            critical_path=result.critical_path,
            schedule=result.schedule,
            is_valid=result.is_valid,
            error=circular.message if circular else None,
            total_tasks=len(tasks),
            critical_task_count=result.critical_task_count,
            project_end_date=project_end_date,
            cycle=circular.cycle if circular else None,
        )

        with self._lock:
            if generation == self._generation:
                self._cached = summary
                self._cached_at = now
            else:
                logger.debug("Task graph changed while computing critical path; not cached")
        return summary

    def recalculate_and_update(self, now: Optional[datetime] = None) -> RecalculationOutcome:
        """
        Recompute the schedule anchored at ``now`` and persist it for every task.
        Raises CycleError when the stored graph is circular; nothing is written then.
        """
        return self.recalculate_in(self._session, self._task_repo, now=now)

    def recalculate_in(
        self,
        session: Session,
        task_repo: TaskRepository,
        now: Optional[datetime] = None,
    ) -> RecalculationOutcome:
        """Same as recalculate_and_update, on a caller-owned session (background jobs)."""
        self.invalidate_cache()

        tasks = task_repo.list_for_scheduling()
        result = calculate_critical_path(scheduling_tasks_from(tasks), epoch=now or utc_now())

        if not result.is_valid:
            circular = result.circular_dependency
            message = circular.message if circular else "Cannot calculate critical path"
            raise CycleError(
                message,
                cycle=circular.cycle if circular else [],
                code="SCHEDULE_CYCLE",
            )

        if not result.schedule:
            return RecalculationOutcome(message="No tasks to update")

        updates = [
            TaskScheduleUpdate(
                task_id=task_id,
                earliest_start_date=entry.earliest_start,
                is_on_critical_path=entry.is_on_critical_path,
            )
            for task_id, entry in result.schedule.items()
        ]
        try:
            updated = task_repo.update_schedule_many(updates)
            session.commit()
        except Exception as exc:
            session.rollback()
            logger.error("Error persisting critical path: %s", exc)
            raise

        logger.info(
            "Critical path recalculated: %d tasks updated, path=%s",
            updated,
            result.critical_path,
        )
        self._events.schedule_changed.emit(list(result.critical_path))
        return RecalculationOutcome(
            message="Critical path recalculated successfully",
            critical_path=result.critical_path,
            updated_tasks=updated,
            schedule=result.schedule,
        )

    def invalidate_cache(self) -> None:
        with self._lock:
            self._cached = None
            self._cached_at = 0.0
            self._generation += 1

    def _on_graph_changed(self, _payload: object) -> None:
        self.invalidate_cache()
