"""Fixed-delay scheduler that drives polling notifiers on a shared pool.

Brief:
  A single dispatcher thread keeps a heap of due times and hands due tasks to
  a ThreadPoolExecutor. A task is re-armed only after its run has finished
  (fixed delay, not fixed rate); when the task returns a Future, the delay
  starts once that Future completes.

Inputs:
  - max_workers: Worker threads executing ticks.
  - thread_name_prefix: Prefix for worker and dispatcher thread names.
  - now: Optional monotonic clock in seconds.

Outputs:
  - PollingScheduler instance; explicitly constructed and owned by the caller.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ScheduledTask:
    """Handle for one periodically executed callable."""

    def __init__(
        self,
        scheduler: "PollingScheduler",
        fn: Callable[[], Any],
        interval_seconds: float,
        name: str,
    ) -> None:
        self._scheduler = scheduler
        self.fn = fn
        self.interval_seconds = interval_seconds
        self.name = name
        self.runs = 0
        self._cancelled = threading.Event()

    def __repr__(self) -> str:
        return f"ScheduledTask({self.name!r}, every {self.interval_seconds}s)"

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Brief: Stop future runs. A run already in progress is not interrupted."""

        self._cancelled.set()
        self._scheduler._forget(self)


class PollingScheduler:
    """Runs callables repeatedly with a fixed delay between runs.

    Example:
      >>> scheduler = PollingScheduler(max_workers=2)
      >>> task = scheduler.schedule_with_fixed_delay(lambda: None, 30.0)
      >>> scheduler.shutdown()
    """

    def __init__(
        self,
        max_workers: int = 1,
        *,
        thread_name_prefix: str = "srv-lookup",
        now: Optional[Callable[[], float]] = None,
    ) -> None:
        if int(max_workers) < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self._now: Callable[[], float] = now or time.monotonic
        self._thread_name_prefix = thread_name_prefix
        self._executor = ThreadPoolExecutor(
            max_workers=int(max_workers), thread_name_prefix=thread_name_prefix
        )
        self._queue: List[Tuple[float, int, ScheduledTask]] = []
        self._seq = itertools.count()
        self._tasks: set[ScheduledTask] = set()
        self._cond = threading.Condition()
        self._shutdown = False
        self._dispatcher: Optional[threading.Thread] = None

    def __enter__(self) -> "PollingScheduler":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def pending_tasks(self) -> List[ScheduledTask]:
        with self._cond:
            return list(self._tasks)

    def schedule_with_fixed_delay(
        self,
        fn: Callable[[], Any],
        interval_seconds: float,
        *,
        initial_delay: float = 0.0,
        name: Optional[str] = None,
    ) -> ScheduledTask:
        """Brief: Run fn after initial_delay, then interval_seconds after each run ends.

        Inputs:
          - fn: Zero-argument callable; may return a Future to extend the run.
          - interval_seconds: Positive delay between the end of one run and
            the start of the next.
          - initial_delay: Non-negative delay before the first run.
          - name: Label used in logs.

        Outputs:
          - ScheduledTask handle.

        Raises:
          - ValueError: for a non-positive interval or negative initial delay.
          - RuntimeError: if the scheduler has been shut down.
        """

        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval_seconds}")
        if initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {initial_delay}")

        task = ScheduledTask(self, fn, float(interval_seconds), name or repr(fn))
        with self._cond:
            if self._shutdown:
                raise RuntimeError("cannot schedule new tasks after shutdown")
            self._tasks.add(task)
            self._push_locked(task, self._now() + initial_delay)
            self._ensure_dispatcher_locked()
        return task

    def shutdown(self, wait: bool = False) -> None:
        """Brief: Cancel every task and stop the dispatcher. Idempotent.

        Inputs:
          - wait: Join worker threads (in-flight ticks) before returning.
        """

        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            tasks = list(self._tasks)
            self._tasks.clear()
            self._queue.clear()
            self._cond.notify_all()
        for task in tasks:
            task._cancelled.set()
        self._executor.shutdown(wait=wait, cancel_futures=True)
        logger.debug("Scheduler %s shut down", self._thread_name_prefix)

    # ---------------- Internal helpers -----------------

    def _forget(self, task: ScheduledTask) -> None:
        with self._cond:
            self._tasks.discard(task)
            self._cond.notify_all()

    def _push_locked(self, task: ScheduledTask, due: float) -> None:
        heapq.heappush(self._queue, (due, next(self._seq), task))
        self._cond.notify_all()

    def _ensure_dispatcher_locked(self) -> None:
        if self._dispatcher is not None:
            return
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            name=f"{self._thread_name_prefix}-dispatcher",
            daemon=True,
        )
        self._dispatcher.start()

    def _dispatch_loop(self) -> None:
        while True:
            with self._cond:
                while not self._shutdown:
                    # Drop cancelled tasks sitting at the head.
                    while self._queue and self._queue[0][2].cancelled:
                        heapq.heappop(self._queue)
                    if not self._queue:
                        self._cond.wait()
                        continue
                    due = self._queue[0][0]
                    delay = due - self._now()
                    if delay <= 0:
                        break
                    self._cond.wait(timeout=delay)
                if self._shutdown:
                    return
                _, _, task = heapq.heappop(self._queue)

            try:
                self._executor.submit(self._execute, task)
            except RuntimeError:
                # Executor shut down between the check and submit.
                return

    def _execute(self, task: ScheduledTask) -> None:
        if task.cancelled:
            return
        task.runs += 1
        try:
            result = task.fn()
        except Exception:
            logger.error("Scheduled task %r raised", task, exc_info=True)
            self._rearm(task)
            return

        if isinstance(result, Future):
            result.add_done_callback(lambda _done: self._rearm(task))
        else:
            self._rearm(task)

    def _rearm(self, task: ScheduledTask) -> None:
        with self._cond:
            if self._shutdown or task.cancelled:
                return
            self._push_locked(task, self._now() + task.interval_seconds)
