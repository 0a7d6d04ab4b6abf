"""
Brief: Global pytest configuration and shared fakes for srvwatch tests.

Inputs:
  - None

Outputs:
  - Fixtures: make_resolver, listener, clock, record
"""

import os
import signal
import sys
import threading
from concurrent.futures import Future

import pytest

# Ensure 'src' is on sys.path so 'srvwatch' package is importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_DIR = os.path.join(ROOT, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from srvwatch.records import LookupResult  # noqa: E402
from srvwatch.resolver import SrvResolver  # noqa: E402


def _alarm_handler(signum, frame):
    """
    Brief: Signal handler that raises TimeoutError when alarm triggers.

    Inputs:
      - signum: signal number (int)
      - frame: current frame (ignored)

    Outputs:
      - None: Raises TimeoutError to fail the test
    """
    raise TimeoutError("Test exceeded 10 seconds")


if hasattr(signal, "SIGALRM"):
    signal.signal(signal.SIGALRM, _alarm_handler)


@pytest.fixture(autouse=True)
def enforce_test_timeout():
    """
    Brief: Enforce a hard 10-second timeout for each test.

    Inputs:
      - None

    Outputs:
      - None: Cancels alarm after test
    """
    if hasattr(signal, "SIGALRM"):
        signal.alarm(10)
        try:
            yield
        finally:
            signal.alarm(0)
    else:
        yield


class AsyncAnswer:
    """Marker step: answer through a Future the test completes by hand."""

    def __init__(self):
        self.future = Future()


class ScriptedResolver(SrvResolver):
    """
    Brief: Resolver replaying a script of answers.

    Inputs:
      - steps: list of steps; each is a list (returned), an exception
        instance (raised) or an AsyncAnswer (its future is returned). The
        last step repeats once the script is exhausted.

    Outputs:
      - SrvResolver recording every queried name in .calls
    """

    def __init__(self, *steps):
        self.steps = list(steps)
        self.calls = []
        self._lock = threading.Lock()

    def resolve(self, fqdn):
        with self._lock:
            self.calls.append(fqdn)
            step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]
        if isinstance(step, BaseException):
            raise step
        if isinstance(step, AsyncAnswer):
            return step.future
        return step


class RecordingListener:
    """
    Brief: Listener collecting notifications.

    Outputs:
      - Callable; .notifications holds every delivered ChangeNotification
    """

    def __init__(self):
        self.notifications = []
        self.event = threading.Event()
        self._lock = threading.Lock()

    def __call__(self, notification):
        with self._lock:
            self.notifications.append(notification)
        self.event.set()

    @property
    def count(self):
        with self._lock:
            return len(self.notifications)

    @property
    def last(self):
        with self._lock:
            return self.notifications[-1]


class FakeClock:
    """Brief: Controllable monotonic clock in seconds."""

    def __init__(self, start=1000.0):
        self.value = float(start)

    def __call__(self):
        return self.value

    def advance(self, seconds):
        self.value += float(seconds)


@pytest.fixture
def make_resolver():
    """Brief: Factory fixture building ScriptedResolver instances."""
    return ScriptedResolver


@pytest.fixture
def async_answer():
    """Brief: Factory fixture building AsyncAnswer steps."""
    return AsyncAnswer


@pytest.fixture
def listener():
    """Brief: Fresh RecordingListener."""
    return RecordingListener()


@pytest.fixture
def make_listener():
    """Brief: Factory fixture for additional RecordingListener instances."""
    return RecordingListener


@pytest.fixture
def clock():
    """Brief: FakeClock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def record():
    """
    Brief: Factory building LookupResult values with sensible defaults.

    Inputs:
      - host, port: endpoint; priority/weight/ttl default to 1/5000/300
    """

    def _make(host="host", port=1234, priority=1, weight=5000, ttl=300):
        return LookupResult(host, port, priority, weight, ttl)

    return _make
