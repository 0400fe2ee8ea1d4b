from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Job = Callable[[], object]


class RecalculationQueue:
    """
    Coalescing, throttled runner for schedule recomputation.

    Bursts of requests collapse into a single run of the most recent job, and runs are
    spaced at least ``min_interval`` seconds apart. Deferred runs happen on a
    ``threading.Timer`` thread, so jobs must open their own database session.
    """

    def __init__(
        self,
        *,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        timer_factory: Callable[[float, Callable[[], None]], threading.Timer] = threading.Timer,
    ) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending: Optional[Job] = None
        self._processing = False
        self._last_run: Optional[float] = None
        self._timer: Optional[threading.Timer] = None

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def enqueue(self, job: Job) -> None:
        with self._lock:
            self._pending = job
        self._process()

    def flush(self) -> bool:
        """Run the pending job now, ignoring the interval. Returns False if nothing was pending."""
        with self._lock:
            self._cancel_timer()
            if self._processing or self._pending is None:
                return False
            job = self._take()
        self._run(job)
        return True

    def shutdown(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._pending = None

    def _process(self) -> None:
        with self._lock:
            if self._processing or self._pending is None or self._timer is not None:
                return
            if self._last_run is not None:
                wait = self._min_interval - (self._clock() - self._last_run)
                if wait > 0:
                    self._schedule(wait)
                    return
            job = self._take()
        self._run(job)

    def _take(self) -> Job:
        # caller holds the lock
        job = self._pending
        self._pending = None
        self._processing = True
        return job

    def _run(self, job: Job) -> None:
        try:
            job()
        except Exception:
            logger.exception("Schedule recalculation failed")
        finally:
            with self._lock:
                self._processing = False
                self._last_run = self._clock()
                if self._pending is not None and self._timer is None:
                    self._schedule(self._min_interval)

    def _schedule(self, delay: float) -> None:
        # caller holds the lock
        timer = self._timer_factory(delay, self._on_timer)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _on_timer(self) -> None:
        with self._lock:
            self._timer = None
        self._process()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
