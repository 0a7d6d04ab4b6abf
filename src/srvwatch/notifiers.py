"""Ready-made change notifiers and constructors for them.

Brief:
  - static_records(): a notifier over a fixed set.
  - direct(): a runnable notifier polling an in-process supplier, handy for
    tests and for sources other than DNS.
  - aggregate(): union of several notifiers.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, TypeVar, Union

from .aggregating import AggregatingChangeNotifier
from .change_notifier import AbstractChangeNotifier, ChangeNotifier, RunnableChangeNotifier
from .records import RecordSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StaticChangeNotifier(AbstractChangeNotifier[T]):
    """Notifier over a fixed set; only ever fires on set_listener(fire=True)."""

    def __init__(self, records: Iterable[T]) -> None:
        super().__init__()
        self._records: RecordSet[T] = RecordSet.of(records)

    def current(self) -> RecordSet[T]:
        return self._records

    def close_implementation(self) -> None:
        pass


class DirectChangeNotifier(AbstractChangeNotifier[T], RunnableChangeNotifier[T]):
    """Runnable notifier that reads its records from a supplier on each run().

    Inputs:
      - supplier: Zero-argument callable returning an iterable of records.

    Outputs:
      - RunnableChangeNotifier[T], Initial until the first run().
    """

    def __init__(self, supplier: Callable[[], Iterable[T]]) -> None:
        if supplier is None:
            raise ValueError("supplier cannot be None")
        super().__init__()
        self._supplier = supplier
        self._records: RecordSet[T] = RecordSet.initial_marker()
        self._running = True

    def current(self) -> RecordSet[T]:
        return self._records

    def close_implementation(self) -> None:
        self._running = False

    def run(self) -> None:
        if not self._running:
            return
        records = RecordSet.of(self._supplier())
        with self._lock:
            if not self._running:
                return
            self._publish(records, self.current, self._set_records)

    def _set_records(self, records: RecordSet[T]) -> None:
        self._records = records


def static_records(*records: T) -> ChangeNotifier[T]:
    """Brief: Create a notifier holding exactly the given records.

    Example:
      >>> static_records("a", "b").current().records == frozenset({"a", "b"})
      True
    """

    return StaticChangeNotifier(records)


def direct(supplier: Callable[[], Iterable[T]]) -> RunnableChangeNotifier[T]:
    """Brief: Create a runnable notifier that polls supplier on each run()."""

    return DirectChangeNotifier(supplier)


def aggregate(
    *notifiers: Union[ChangeNotifier[T], Iterable[ChangeNotifier[T]]]
) -> ChangeNotifier[T]:
    """Brief: Aggregate notifiers passed either as arguments or as one iterable.

    Inputs:
      - *notifiers: ChangeNotifier instances, or a single iterable of them.

    Outputs:
      - AggregatingChangeNotifier over all of them.
    """

    if len(notifiers) == 1 and not isinstance(notifiers[0], ChangeNotifier):
        children = list(notifiers[0])  # type: ignore[arg-type]
    else:
        children = list(notifiers)  # type: ignore[arg-type]
    return AggregatingChangeNotifier(children)
