"""ChangeNotifier contract and the shared listener bookkeeping.

Brief:
  A ChangeNotifier exposes a current RecordSet, accepts exactly one listener
  for its lifetime, and delivers ChangeNotification events to it until closed.
  AbstractChangeNotifier implements the listener state machine

      UNSET --set_listener--> SET --close--> CLOSED
      UNSET ------------close-------------> CLOSED

  behind a single re-entrant lock. Subclasses publish state transitions with
  _publish() (swap + deliver under that same lock) so a listener attached with
  fire=True can never interleave a synthetic event with a real one.
"""

from __future__ import annotations

import enum
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, TypeVar

from .errors import ListenerAlreadySetError
from .records import ChangeNotification, RecordSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[ChangeNotification[T]], None]


class ChangeNotifier(Generic[T], ABC):
    """Observer over a changing set of records."""

    @abstractmethod
    def current(self) -> RecordSet[T]:
        """Brief: Return the current set (possibly the Initial marker); never blocks."""

    @abstractmethod
    def set_listener(self, listener: Listener[T], fire: bool = False) -> None:
        """Brief: Register the single listener for this notifier.

        Inputs:
          - listener: Callable receiving ChangeNotification objects.
          - fire: Deliver (current(), empty) immediately if nothing was
            delivered yet and the notifier already holds a known set.

        Raises:
          - ListenerAlreadySetError: when a listener was registered before.
        """

    @abstractmethod
    def close(self) -> None:
        """Brief: Stop delivering events and release resources. Idempotent, never raises."""

    def __enter__(self) -> "ChangeNotifier[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RunnableChangeNotifier(ChangeNotifier[T]):
    """A ChangeNotifier refreshed by an external trigger calling run()."""

    @abstractmethod
    def run(self) -> None:
        """Brief: Check for changes once."""


class _ListenerState(enum.Enum):
    UNSET = "unset"
    SET = "set"
    CLOSED = "closed"


class AbstractChangeNotifier(ChangeNotifier[T]):
    """Listener bookkeeping shared by every notifier implementation.

    Subclasses implement current() and close_implementation(), and hold their
    record state in a plain attribute that current() reads without locking.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._state = _ListenerState.UNSET
        self._listener: Optional[Listener[T]] = None
        self._listener_notified = False

    @property
    def closed(self) -> bool:
        return self._state is _ListenerState.CLOSED

    def set_listener(self, listener: Listener[T], fire: bool = False) -> None:
        if listener is None:
            raise ValueError("listener cannot be None")
        if not callable(listener):
            raise TypeError(
                f"listener must be callable, got {type(listener).__name__}."
            )

        with self._lock:
            if self._state is _ListenerState.SET:
                raise ListenerAlreadySetError("Listener already set!")
            if self._state is _ListenerState.CLOSED:
                logger.debug("set_listener() on closed notifier %r ignored", self)
                return
            self._listener = listener
            self._state = _ListenerState.SET

            if fire:
                records = self.current()
                # An Initial notifier has nothing to report yet; its first
                # real transition will reach the listener instead.
                if not records.is_initial:
                    self._notify(
                        ChangeNotification(records, RecordSet.empty()),
                        new_listener=True,
                    )

    def release_listener(self, listener: Listener[T]) -> bool:
        """Brief: Detach listener if it is the registered one, so another may be set.

        Inputs:
          - listener: The callable previously passed to set_listener().

        Outputs:
          - bool: True when it was detached; False for another listener or a
            closed notifier.
        """

        with self._lock:
            if self._state is not _ListenerState.SET or self._listener != listener:
                return False
            self._listener = None
            self._listener_notified = False
            self._state = _ListenerState.UNSET
            return True

    def close(self) -> None:
        with self._lock:
            if self._state is _ListenerState.CLOSED:
                return
            self._state = _ListenerState.CLOSED
            self._listener = None

        # Outside the lock: implementations may close other notifiers whose
        # listeners call back into this one.
        try:
            self.close_implementation()
        except Exception:
            logger.error("Error while closing change notifier %r", self, exc_info=True)

    @abstractmethod
    def close_implementation(self) -> None:
        """Brief: Release subclass resources; called once by close()."""

    def fire_records_updated(self, notification: ChangeNotification[T]) -> None:
        """Brief: Deliver notification to the listener, if one is attached.

        Inputs:
          - notification: The transition to publish.

        Outputs:
          - None; listener exceptions are logged and swallowed.
        """

        self._notify(notification, new_listener=False)

    def _publish(
        self,
        new: RecordSet[T],
        read: Callable[[], RecordSet[T]],
        write: Callable[[RecordSet[T]], None],
    ) -> bool:
        """Brief: Atomically compare, swap and deliver a state transition.

        Inputs:
          - new: Candidate state.
          - read: Returns the held state.
          - write: Stores the new state.

        Outputs:
          - bool: True when the state changed and a notification was issued.
        """

        with self._lock:
            old = read()
            if new == old:
                return False
            write(new)
            self.fire_records_updated(ChangeNotification(new, old))
            return True

    def _notify(self, notification: ChangeNotification[T], new_listener: bool) -> None:
        if notification is None:
            raise ValueError("notification cannot be None")

        with self._lock:
            listener = self._listener
            if listener is None:
                return
            already_notified = self._listener_notified
            self._listener_notified = True
            if new_listener and already_notified:
                return
            try:
                listener(notification)
            except Exception:
                logger.error(
                    "Change notification listener threw exception", exc_info=True
                )
