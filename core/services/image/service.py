from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, ContextManager, Optional, Tuple

from sqlalchemy.orm import Session

from core.interfaces import ImageSearchClient, TaskRepository
from core.models import TaskImage

logger = logging.getLogger(__name__)

TaskScope = Callable[[], ContextManager[Tuple[Session, TaskRepository]]]


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:  # noqa: BLE001
            future.set_exception(exc)
        else:
            future.set_result(result)
        return future


class TaskImageService:
    """
    Fire-and-forget image lookup for task titles.

    Work runs on its own executor and its own session (``task_scope``); it never touches
    the caller's transaction. Lookup or storage failures are logged and the task's
    loading flag is always cleared.
    """

    def __init__(
        self,
        task_scope: TaskScope,
        client: Optional[ImageSearchClient],
        executor: Optional[Executor] = None,
    ):
        self._task_scope = task_scope
        self._client = client
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="image-lookup")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def schedule_lookup(self, task_id: int, title: str) -> Future:
        return self._executor.submit(self.generate_and_save_image, task_id, title)

    def generate_and_save_image(self, task_id: int, title: str) -> Optional[TaskImage]:
        image = self._search(task_id, title)
        search_text = title if self._client is not None else None

        with self._task_scope() as (session, task_repo):
            try:
                task_repo.update_image(task_id, image, search_text=search_text)
                session.commit()
            except Exception as exc:  # noqa: BLE001
                session.rollback()
                logger.error("Error saving image for task %s: %s", task_id, exc)
                return None

        if image is not None:
            logger.info("Stored image for task %s (%s)", task_id, title)
        return image

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _search(self, task_id: int, title: str) -> Optional[TaskImage]:
        if self._client is None:
            return None
        try:
            found = self._client.search_image(title)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error searching image for task %s: %s", task_id, exc)
            return None
        if found is None:
            return None
        return TaskImage(url=found.url, alt=found.alt or f"Image for {title}")
