from __future__ import annotations

import logging
from concurrent.futures import Executor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple

from sqlalchemy.orm import Session, sessionmaker

from core.events.domain_events import DomainEvents, domain_events
from core.interfaces import ImageSearchClient, TaskRepository
from core.services.critical_path import CriticalPathService, RecalculationQueue
from core.services.image import InlineExecutor, TaskImageService
from core.services.task import TaskService
from infra.config import critical_path_cache_ttl, pexels_api_key, recalculation_interval
from infra.db.repositories import SqlAlchemyDependencyRepository, SqlAlchemyTaskRepository
from infra.operational_support import bind_trace_id, create_trace_id
from infra.pexels import PexelsImageClient

logger = logging.getLogger(__name__)


def task_repository_scope(session_factory: sessionmaker):
    """Scope factory for background work: a fresh session per unit of work."""

    @contextmanager
    def scope() -> Iterator[Tuple[Session, TaskRepository]]:
        session = session_factory()
        try:
            yield session, SqlAlchemyTaskRepository(session)
        finally:
            session.close()

    return scope


def shared_session_scope(session: Session, task_repo: TaskRepository):
    """Scope factory that reuses the caller's session (single-threaded setups and tests)."""

    @contextmanager
    def scope() -> Iterator[Tuple[Session, TaskRepository]]:
        yield session, task_repo

    return scope


def _default_image_client() -> Optional[ImageSearchClient]:
    api_key = pexels_api_key()
    if not api_key:
        logger.info("PEXELS_API_KEY not set; task images disabled")
        return None
    return PexelsImageClient(api_key)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    task_service: TaskService
    critical_path_service: CriticalPathService
    image_service: TaskImageService
    recalculation_queue: Optional[RecalculationQueue]

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "task_service": self.task_service,
            "critical_path_service": self.critical_path_service,
            "image_service": self.image_service,
            "recalculation_queue": self.recalculation_queue,
        }

    def shutdown(self) -> None:
        if self.recalculation_queue is not None:
            self.recalculation_queue.flush()
            self.recalculation_queue.shutdown()
        self.image_service.shutdown(wait=True)


def build_service_graph(
    session: Session,
    *,
    session_factory: sessionmaker | None = None,
    image_client: ImageSearchClient | None = None,
    image_executor: Executor | None = None,
    events: DomainEvents = domain_events,
) -> ServiceGraph:
    """
    Wire repositories and services around ``session``.

    With a ``session_factory`` image lookups run on ``image_executor`` (a thread pool by
    default) and schedule recalculation is coalesced through a RecalculationQueue, each
    job on its own session.
    Without one, everything runs inline on ``session``.
    """
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)

    critical_path_service = CriticalPathService(
        session,
        task_repo,
        cache_ttl_seconds=critical_path_cache_ttl(),
        events=events,
    )

    client = image_client if image_client is not None else _default_image_client()
    queue: RecalculationQueue | None = None
    if session_factory is not None:
        background_scope = task_repository_scope(session_factory)
        image_service = TaskImageService(background_scope, client, executor=image_executor)

        def recalculate() -> None:
            with bind_trace_id(create_trace_id("recalc")):
                with background_scope() as (job_session, job_repo):
                    critical_path_service.recalculate_in(job_session, job_repo)

        queue = RecalculationQueue(min_interval=recalculation_interval())
        schedule_trigger: Callable[[], object] = lambda: queue.enqueue(recalculate)
    else:
        image_service = TaskImageService(
            shared_session_scope(session, task_repo),
            client,
            executor=InlineExecutor(),
        )
        schedule_trigger = critical_path_service.recalculate_and_update

    task_service = TaskService(
        session,
        task_repo,
        dependency_repo,
        image_service=image_service,
        schedule_trigger=schedule_trigger,
        events=events,
    )

    return ServiceGraph(
        session=session,
        task_service=task_service,
        critical_path_service=critical_path_service,
        image_service=image_service,
        recalculation_queue=queue,
    )


def build_service_dict(session: Session, **kwargs) -> dict[str, Any]:
    return build_service_graph(session, **kwargs).as_dict()


__all__ = [
    "ServiceGraph",
    "build_service_graph",
    "build_service_dict",
    "task_repository_scope",
    "shared_session_scope",
]
