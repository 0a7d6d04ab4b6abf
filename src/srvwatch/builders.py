"""Composition helpers: resolver chains and watchers built from parameters."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

from .change_notifier import ChangeNotifier
from .config.config_schema import SrvWatchConfig
from .config.logging_config import init_logging
from .dnspython_resolver import DEFAULT_TIMEOUT_SECONDS, DnsPythonSrvResolver
from .polling import ErrorHandler, Transform
from .resolver import SrvResolver
from .retaining import RetainingSrvResolver
from .scheduler import PollingScheduler
from .watcher import ChangeNotifierFactory, PollingSrvWatcher, SrvWatcher, WatcherFactory

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_SECONDS = 3600.0
DEFAULT_MAX_RETAINED_NAMES = 4096


def build_resolver(
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    cache_lookups: bool = False,
    retain_data: bool = False,
    retention_seconds: float = DEFAULT_RETENTION_SECONDS,
    nameservers: Optional[Sequence[str]] = None,
    delegate: Optional[SrvResolver] = None,
    max_retained_names: int = DEFAULT_MAX_RETAINED_NAMES,
    now: Optional[Callable[[], float]] = None,
) -> SrvResolver:
    """Brief: Compose a resolver chain.

    Inputs:
      - timeout_seconds: Per-lookup lifetime for the dnspython resolver.
      - cache_lookups: Enable dnspython's answer cache.
      - retain_data: Wrap the chain with RetainingSrvResolver.
      - retention_seconds: Retention duration when retain_data is set.
      - max_retained_names: Bound on names the retention cache holds.
      - nameservers: Optional explicit nameservers.
      - delegate: Use this resolver instead of building a dnspython one.
      - now: Optional clock for the retention cache.

    Outputs:
      - SrvResolver.

    Example:
      >>> resolver = build_resolver(retain_data=True, retention_seconds=600)  # doctest: +SKIP
    """

    resolver: SrvResolver
    if delegate is not None:
        resolver = delegate
    else:
        resolver = DnsPythonSrvResolver(
            timeout_seconds,
            cache_lookups=cache_lookups,
            nameservers=nameservers,
        )

    if retain_data:
        resolver = RetainingSrvResolver(
            resolver, retention_seconds, max_entries=max_retained_names, now=now
        )
    return resolver


def build_watcher(
    resolver: SrvResolver,
    *,
    transform: Optional[Transform] = None,
    polling_interval: Optional[float] = None,
    scheduler: Optional[PollingScheduler] = None,
    watcher_factory: Optional[WatcherFactory] = None,
    error_handler: Optional[ErrorHandler] = None,
    max_workers: int = 1,
    thread_name_prefix: str = "srv-lookup",
) -> SrvWatcher:
    """Brief: Build a watcher that polls on a schedule or uses a custom trigger.

    Inputs:
      - resolver: SrvResolver used by every notifier.
      - transform: Optional LookupResult -> T mapping (identity by default).
      - polling_interval: Seconds between ticks; mutually exclusive with
        watcher_factory.
      - scheduler: Caller-owned PollingScheduler. When omitted, the watcher
        creates one from max_workers/thread_name_prefix and owns it.
      - watcher_factory: Callable(ChangeNotifierFactory) -> SrvWatcher for
        custom triggering schemes.
      - error_handler: Optional callable(fqdn, exc) for lookup failures.

    Outputs:
      - SrvWatcher.

    Raises:
      - ValueError: when both or neither of polling_interval and
        watcher_factory are given, or the interval is not positive.
    """

    if resolver is None:
        raise ValueError("resolver cannot be None")
    if (polling_interval is None) == (watcher_factory is None):
        raise ValueError("specify either polling_interval or watcher_factory")

    notifier_factory: ChangeNotifierFactory = ChangeNotifierFactory(
        resolver, transform, error_handler
    )

    if watcher_factory is not None:
        return watcher_factory(notifier_factory)

    assert polling_interval is not None
    if polling_interval <= 0:
        raise ValueError(f"polling interval must be positive, got {polling_interval}")

    owns_scheduler = scheduler is None
    if scheduler is None:
        scheduler = PollingScheduler(
            max_workers, thread_name_prefix=thread_name_prefix
        )
    return PollingSrvWatcher(
        notifier_factory,
        scheduler,
        polling_interval,
        owns_scheduler=owns_scheduler,
    )


def watcher_from_config(
    cfg: SrvWatchConfig,
    *,
    transform: Optional[Transform] = None,
    error_handler: Optional[ErrorHandler] = None,
    delegate: Optional[SrvResolver] = None,
    scheduler: Optional[PollingScheduler] = None,
) -> SrvWatcher:
    """Brief: Build the resolver chain and a polling watcher from configuration.

    Inputs:
      - cfg: Validated SrvWatchConfig.
      - transform: Optional LookupResult -> T mapping.
      - error_handler: Optional callable(fqdn, exc).
      - delegate: Optional resolver replacing the dnspython one.
      - scheduler: Optional caller-owned scheduler.

    Outputs:
      - SrvWatcher polling at cfg.watcher.polling_interval_seconds.
    """

    rcfg = cfg.resolver
    resolver = build_resolver(
        timeout_seconds=rcfg.timeout_seconds,
        cache_lookups=rcfg.cache_lookups,
        retain_data=rcfg.retain_data,
        retention_seconds=rcfg.retention_seconds,
        max_retained_names=rcfg.max_retained_names,
        nameservers=rcfg.nameservers or None,
        delegate=delegate,
    )
    wcfg = cfg.watcher
    logger.debug(
        "Building watcher: interval=%.1fs retain=%s", wcfg.polling_interval_seconds, rcfg.retain_data
    )
    return build_watcher(
        resolver,
        transform=transform,
        polling_interval=wcfg.polling_interval_seconds,
        scheduler=scheduler,
        error_handler=error_handler,
        max_workers=wcfg.max_workers,
        thread_name_prefix=wcfg.thread_name_prefix,
    )


def watch_from_config(
    cfg: SrvWatchConfig,
    *,
    transform: Optional[Transform] = None,
    error_handler: Optional[ErrorHandler] = None,
    delegate: Optional[SrvResolver] = None,
    scheduler: Optional[PollingScheduler] = None,
    configure_logging: bool = True,
) -> Tuple[SrvWatcher, Dict[str, ChangeNotifier]]:
    """Brief: Apply a whole configuration document: logging, watcher and names.

    Inputs:
      - cfg: Validated SrvWatchConfig.
      - transform, error_handler, delegate, scheduler: As for watcher_from_config.
      - configure_logging: Pass cfg.logging to init_logging first.

    Outputs:
      - (watcher, notifiers): the watcher and one notifier per distinct name
        in cfg.names, keyed by name. Closing the watcher closes them all.

    Example:
      >>> watcher, notifiers = watch_from_config(load_config("srvwatch.yaml"))  # doctest: +SKIP
    """

    if configure_logging:
        init_logging(cfg.logging_config())

    watcher = watcher_from_config(
        cfg,
        transform=transform,
        error_handler=error_handler,
        delegate=delegate,
        scheduler=scheduler,
    )
    notifiers: Dict[str, ChangeNotifier] = {}
    try:
        for fqdn in dict.fromkeys(cfg.names):
            notifiers[fqdn] = watcher.watch(fqdn)
    except Exception:
        watcher.close()
        raise
    return watcher, notifiers
