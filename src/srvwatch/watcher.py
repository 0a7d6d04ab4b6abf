"""Watchers: create a change notifier per watched name and drive it."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

from .change_notifier import ChangeNotifier, RunnableChangeNotifier
from .errors import ProtocolError
from .polling import ErrorHandler, ServiceResolvingChangeNotifier, Transform
from .resolver import SrvResolver
from .scheduler import PollingScheduler, ScheduledTask

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SrvWatcher(Generic[T], ABC):
    """Contract: watch(name) -> ChangeNotifier, plus close()."""

    @abstractmethod
    def watch(self, fqdn: str) -> ChangeNotifier[T]:
        """Brief: Start watching fqdn and return its change notifier."""

    @abstractmethod
    def close(self) -> None:
        """Brief: Stop every watch started by this watcher."""

    def __enter__(self) -> "SrvWatcher[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ChangeNotifierFactory(Generic[T]):
    """Creates runnable notifiers for names; when to run them is up to the watcher.

    Inputs:
      - resolver: SrvResolver shared by every created notifier.
      - transform: Optional LookupResult -> T mapping (identity by default).
      - error_handler: Optional callable(fqdn, exc) for lookup failures.
    """

    def __init__(
        self,
        resolver: SrvResolver,
        transform: Optional[Transform] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        if resolver is None:
            raise ValueError("resolver cannot be None")
        self.resolver = resolver
        self.transform = transform
        self.error_handler = error_handler

    def __call__(self, fqdn: str) -> ServiceResolvingChangeNotifier[T]:
        return self.create(fqdn)

    def create(self, fqdn: str) -> ServiceResolvingChangeNotifier[T]:
        return ServiceResolvingChangeNotifier(
            self.resolver,
            fqdn,
            self.transform,
            error_handler=self.error_handler,
        )


WatcherFactory = Callable[[ChangeNotifierFactory], SrvWatcher]


class PollingSrvWatcher(SrvWatcher[T]):
    """Polls every watched name on a shared PollingScheduler.

    Brief:
      - watch() creates a notifier, schedules it with a fixed delay starting
        immediately, and returns it before the first tick has necessarily run.
      - Closing a notifier cancels its scheduled task.
      - close() cancels all outstanding ticks without waiting for in-flight
        ones, and shuts the scheduler down when this watcher owns it.

    Inputs:
      - notifier_factory: ChangeNotifierFactory for new names.
      - scheduler: PollingScheduler running the ticks.
      - polling_interval: Positive seconds between the end of a tick and the
        start of the next.
      - owns_scheduler: Shut the scheduler down on close().
    """

    def __init__(
        self,
        notifier_factory: Callable[[str], RunnableChangeNotifier[T]],
        scheduler: PollingScheduler,
        polling_interval: float,
        *,
        owns_scheduler: bool = False,
    ) -> None:
        if notifier_factory is None:
            raise ValueError("notifier_factory cannot be None")
        if scheduler is None:
            raise ValueError("scheduler cannot be None")
        if polling_interval <= 0:
            raise ValueError(
                f"polling interval must be positive, got {polling_interval}"
            )
        self._factory = notifier_factory
        self._scheduler = scheduler
        self.polling_interval = float(polling_interval)
        self._owns_scheduler = owns_scheduler
        self._notifiers: List[RunnableChangeNotifier[T]] = []
        self._tasks: List[ScheduledTask] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def watch(self, fqdn: str) -> ChangeNotifier[T]:
        with self._lock:
            if self._closed:
                raise ProtocolError("watch() called on a closed watcher")
            notifier = self._factory(fqdn)
            task = self._scheduler.schedule_with_fixed_delay(
                notifier.run, self.polling_interval, name=fqdn
            )
            bind = getattr(notifier, "bind_task", None)
            if callable(bind):
                bind(task)
            self._notifiers.append(notifier)
            self._tasks.append(task)
        logger.info("Watching %s every %.1fs", fqdn, self.polling_interval)
        return notifier

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            notifiers, self._notifiers = self._notifiers, []
            tasks, self._tasks = self._tasks, []

        for task in tasks:
            task.cancel()
        for notifier in notifiers:
            notifier.close()
        if self._owns_scheduler:
            self._scheduler.shutdown(wait=False)
