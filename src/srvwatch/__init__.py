"""srvwatch package"""

from .aggregating import AggregatingChangeNotifier
from .builders import build_resolver, build_watcher, watch_from_config, watcher_from_config
from .change_notifier import (
    AbstractChangeNotifier,
    ChangeNotifier,
    Listener,
    RunnableChangeNotifier,
)
from .errors import (
    ConfigError,
    ListenerAlreadySetError,
    ProtocolError,
    ResolutionError,
    SrvWatchError,
    TransformError,
)
from .notifiers import (
    DirectChangeNotifier,
    StaticChangeNotifier,
    aggregate,
    direct,
    static_records,
)
from .polling import ServiceResolvingChangeNotifier
from .records import ChangeNotification, LookupResult, RecordSet, is_initial
from .resolver import SrvResolver
from .retaining import RetainingSrvResolver
from .scheduler import PollingScheduler, ScheduledTask
from .watcher import ChangeNotifierFactory, PollingSrvWatcher, SrvWatcher

__all__ = [
    "AbstractChangeNotifier",
    "AggregatingChangeNotifier",
    "ChangeNotification",
    "ChangeNotifier",
    "ChangeNotifierFactory",
    "ConfigError",
    "DirectChangeNotifier",
    "Listener",
    "ListenerAlreadySetError",
    "LookupResult",
    "PollingScheduler",
    "PollingSrvWatcher",
    "ProtocolError",
    "RecordSet",
    "ResolutionError",
    "RetainingSrvResolver",
    "RunnableChangeNotifier",
    "ScheduledTask",
    "ServiceResolvingChangeNotifier",
    "SrvResolver",
    "SrvWatchError",
    "SrvWatcher",
    "StaticChangeNotifier",
    "TransformError",
    "aggregate",
    "build_resolver",
    "build_watcher",
    "direct",
    "is_initial",
    "static_records",
    "watch_from_config",
    "watcher_from_config",
]
