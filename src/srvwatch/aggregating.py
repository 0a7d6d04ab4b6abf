"""Change notifier presenting the union of several child notifiers."""

from __future__ import annotations

import logging
from typing import Iterable, List, TypeVar

from .change_notifier import AbstractChangeNotifier, ChangeNotifier
from .records import ChangeNotification, RecordSet

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AggregatingChangeNotifier(AbstractChangeNotifier[T]):
    """Union of child notifiers, re-diffed whenever any child changes.

    Brief:
      - While every child is still Initial, the aggregate is Initial too.
      - Otherwise the aggregate is the union of the children's known sets;
        Initial children contribute nothing.
      - Child events are not forwarded verbatim: each one triggers a
        recompute under this notifier's lock, and a notification is issued
        only when the union actually changed.

    Inputs:
      - notifiers: Child notifiers. Their listeners are claimed by this
        aggregate, and closing the aggregate closes them.

    Outputs:
      - ChangeNotifier[T].
    """

    def __init__(self, notifiers: Iterable[ChangeNotifier[T]]) -> None:
        if notifiers is None:
            raise ValueError("notifiers cannot be None")
        super().__init__()
        self._children: List[ChangeNotifier[T]] = list(notifiers)
        self._records: RecordSet[T] = RecordSet.initial_marker()

        claimed: List[ChangeNotifier[T]] = []
        try:
            for child in self._children:
                child.set_listener(self._on_child_change, fire=False)
                claimed.append(child)
        except Exception:
            self._release(claimed)
            raise

        # Children may have resolved before they were handed to us.
        with self._lock:
            self._records = self._compute()

    def __repr__(self) -> str:
        return f"AggregatingChangeNotifier({len(self._children)} children)"

    @property
    def children(self) -> List[ChangeNotifier[T]]:
        return list(self._children)

    def current(self) -> RecordSet[T]:
        return self._records

    def _on_child_change(self, _notification: ChangeNotification[T]) -> None:
        with self._lock:
            if self.closed:
                return
            if self._publish(self._compute(), self.current, self._set_records):
                logger.debug(
                    "Aggregate changed: %d record(s)", len(self._records)
                )

    def _compute(self) -> RecordSet[T]:
        snapshots = [child.current() for child in self._children]
        if all(s.is_initial for s in snapshots):
            return RecordSet.initial_marker()
        return RecordSet.empty().union(*snapshots)

    def _set_records(self, records: RecordSet[T]) -> None:
        self._records = records

    def close_implementation(self) -> None:
        for child in self._children:
            child.close()

    def _release(self, children: List[ChangeNotifier[T]]) -> None:
        # Undo set_listener() on children claimed before a failed construction.
        for child in children:
            release = getattr(child, "release_listener", None)
            if not callable(release) or not release(self._on_child_change):
                logger.warning("Could not release listener of %r", child)
