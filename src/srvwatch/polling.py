"""Change notifier that polls a resolver for one name and diffs the results."""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, Iterable, List, Optional, TypeVar

from .change_notifier import AbstractChangeNotifier, RunnableChangeNotifier
from .errors import TransformError
from .records import ChangeNotification, LookupResult, RecordSet
from .resolver import SrvResolver, chain_future

logger = logging.getLogger(__name__)

T = TypeVar("T")

Transform = Callable[[LookupResult], T]
ErrorHandler = Callable[[str, BaseException], None]


def identity(record: LookupResult) -> Any:
    return record


class ServiceResolvingChangeNotifier(AbstractChangeNotifier[T], RunnableChangeNotifier[T]):
    """Resolve a name on every run() and notify when the transformed set changes.

    Brief:
      - Successful lookups are transformed record by record and compared with
        the held set; the first successful lookup always counts as a change,
        even when it finds nothing.
      - A failed lookup (or failed transform) is reported to the optional
        error handler. If nothing was ever published, the notifier publishes
        a known-empty set so consumers are not left waiting on Initial. Later
        failures keep the last known-good set.
      - Results of a tick superseded by a newer tick are dropped.

    Inputs:
      - resolver: SrvResolver to query; may be synchronous or future based.
      - fqdn: Name to watch.
      - transform: Pure function LookupResult -> T; None results are errors.
      - error_handler: Optional callable(fqdn, exc) for lookup failures.

    Outputs:
      - RunnableChangeNotifier[T].

    Example:
      >>> notifier = ServiceResolvingChangeNotifier(resolver, "_http._tcp.example.com")
      >>> notifier.run()  # doctest: +SKIP
      >>> notifier.current()  # doctest: +SKIP
    """

    def __init__(
        self,
        resolver: SrvResolver,
        fqdn: str,
        transform: Optional[Transform] = None,
        *,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        if resolver is None:
            raise ValueError("resolver cannot be None")
        if not isinstance(fqdn, str) or not fqdn:
            raise ValueError("fqdn must be a non-empty string")
        super().__init__()

        self.fqdn = fqdn
        self._resolver = resolver
        self._transform: Transform = transform or identity
        self._error_handler = error_handler

        self._records: RecordSet[T] = RecordSet.initial_marker()
        self._awaiting_first_event = True
        self._running = True
        self._tick_ids = itertools.count(1)
        self._last_applied_tick = 0
        self._task: Any = None
        self._task_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"ServiceResolvingChangeNotifier({self.fqdn!r})"

    def current(self) -> RecordSet[T]:
        return self._records

    @property
    def awaiting_first_event(self) -> bool:
        return self._awaiting_first_event

    def bind_task(self, task: Any) -> None:
        """Brief: Tie a scheduled task's lifetime to this notifier.

        Inputs:
          - task: Object with a cancel() method; cancelled when this notifier
            closes (immediately if it already has).
        """

        with self._task_lock:
            self._task = task
        if not self._running:
            task.cancel()

    def close_implementation(self) -> None:
        self._running = False
        with self._task_lock:
            task, self._task = self._task, None
        if task is not None:
            task.cancel()

    def run(self) -> Optional["Future[None]"]:
        """Brief: Perform one poll tick.

        Outputs:
          - None for synchronous resolvers (the tick is complete on return),
            or a Future that completes once an asynchronous lookup has been
            diffed and published.
        """

        if not self._running:
            return None

        tick = next(self._tick_ids)
        try:
            result = self._resolver.resolve(self.fqdn)
        except Exception as exc:
            self._handle_error(tick, exc)
            return None

        if isinstance(result, Future):
            return chain_future(result, lambda done: self._complete(tick, done))
        self._handle_result(tick, result)
        return None

    def _complete(self, tick: int, done: Future) -> None:
        # result() raises CancelledError for a cancelled lookup; that is a failed tick too.
        try:
            nodes = done.result()
        except Exception as exc:
            self._handle_error(tick, exc)
            return
        self._handle_result(tick, nodes)

    def _handle_result(self, tick: int, nodes: Iterable[LookupResult]) -> None:
        try:
            records = self._transform_all(nodes)
        except Exception as exc:
            self._handle_error(tick, exc)
            return

        with self._lock:
            if not self._accept_tick(tick):
                return
            if self._publish(records, self.current, self._set_records):
                self._awaiting_first_event = False
                logger.debug(
                    "Records for %s changed: %d record(s)", self.fqdn, len(records)
                )
            else:
                logger.debug("Records for %s unchanged", self.fqdn)

    def _handle_error(self, tick: int, exc: BaseException) -> None:
        logger.warning("Error resolving %s: %s", self.fqdn, exc)

        if self._error_handler is not None:
            try:
                self._error_handler(self.fqdn, exc)
            except Exception:
                logger.error(
                    "Error handler for %s threw exception", self.fqdn, exc_info=True
                )

        with self._lock:
            if not self._accept_tick(tick):
                return
            if not self._awaiting_first_event:
                return
            self._awaiting_first_event = False
            previous = self._records
            self._records = RecordSet.empty()
            self.fire_records_updated(ChangeNotification(self._records, previous))

    def _accept_tick(self, tick: int) -> bool:
        # Caller holds self._lock.
        if not self._running:
            return False
        if tick < self._last_applied_tick:
            logger.debug("Dropping superseded result for %s", self.fqdn)
            return False
        self._last_applied_tick = tick
        return True

    def _set_records(self, records: RecordSet[T]) -> None:
        self._records = records

    def _transform_all(self, nodes: Iterable[LookupResult]) -> RecordSet[T]:
        transformed: List[T] = []
        for node in nodes:
            try:
                value = self._transform(node)
            except Exception as exc:
                raise TransformError(
                    f"transform failed for {node} of {self.fqdn}: {exc}",
                    fqdn=self.fqdn,
                    record=node,
                ) from exc
            if value is None:
                raise TransformError(
                    f"transform returned None for {node} of {self.fqdn}",
                    fqdn=self.fqdn,
                    record=node,
                )
            transformed.append(value)
        return RecordSet.of(transformed)
