"""Resolver decorator that masks transient failures with recent good data."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Callable, List, Optional

from .records import LookupResult
from .resolver import ResolveResult, SrvResolver, chain_future
from .retention_cache import RetentionCache

logger = logging.getLogger(__name__)


class RetainingSrvResolver(SrvResolver):
    """Keep the previous non-empty result of each name and serve it on trouble.

    Brief:
      - A non-empty answer from the delegate is stored (restarting its
        retention window) and returned unchanged.
      - An empty answer is replaced by the retained answer while it is younger
        than the retention duration; otherwise the empty answer is returned.
      - A failure is replaced by the retained answer while it is fresh;
        otherwise the original exception is re-raised unchanged.
      - Empty answers are never stored.

    Inputs:
      - delegate: Wrapped SrvResolver.
      - retention_seconds: Positive retention duration in seconds.
      - max_entries: Most names retained at once. Past this bound the least
        recently used name is dropped even if its data is still fresh, so a
        later failure for that name propagates. Size it above the number of
        watched names.
      - now: Optional clock for tests (seconds, monotonic).

    Outputs:
      - SrvResolver. Synchronous delegates yield synchronous answers; future
        returning delegates yield futures.

    Example:
      >>> resolver = RetainingSrvResolver(delegate, retention_seconds=3600)
      >>> resolver.resolve("_http._tcp.example.com")  # doctest: +SKIP
    """

    def __init__(
        self,
        delegate: SrvResolver,
        retention_seconds: float,
        *,
        max_entries: int = 4096,
        now: Optional[Callable[[], float]] = None,
    ) -> None:
        if delegate is None:
            raise ValueError("delegate cannot be None for RetainingSrvResolver.")
        if retention_seconds <= 0:
            raise ValueError(
                f"retention duration must be positive, got {retention_seconds}"
            )
        self._delegate = delegate
        self._cache: RetentionCache[List[LookupResult]] = RetentionCache(
            retention_seconds, max_entries=max_entries, now=now
        )

    @property
    def retention_seconds(self) -> float:
        return self._cache.retention_seconds

    def resolve(self, fqdn: str) -> ResolveResult:
        if fqdn is None:
            raise ValueError("fqdn cannot be None")

        try:
            result = self._delegate.resolve(fqdn)
        except Exception as exc:
            return self._on_failure(fqdn, exc)

        if isinstance(result, Future):
            return chain_future(result, lambda done: self._on_future_done(fqdn, done))
        return self._on_success(fqdn, result)

    def _on_future_done(self, fqdn: str, done: Future) -> List[LookupResult]:
        try:
            nodes = done.result()
        except Exception as exc:
            return self._on_failure(fqdn, exc)
        return self._on_success(fqdn, nodes)

    def _on_success(self, fqdn: str, nodes: List[LookupResult]) -> List[LookupResult]:
        if nodes:
            self._cache.put(fqdn, nodes)
            return nodes

        retained, age = self._cache.get_with_age(fqdn)
        if retained is not None:
            logger.info(
                "Empty result for %s; serving %d retained record(s) (age %.1fs)",
                fqdn,
                len(retained),
                age,
            )
            return retained
        return nodes

    def _on_failure(self, fqdn: str, exc: BaseException) -> List[LookupResult]:
        retained, age = self._cache.get_with_age(fqdn)
        if retained is not None:
            logger.warning(
                "Lookup of %s failed (%s); serving %d retained record(s) (age %.1fs)",
                fqdn,
                exc,
                len(retained),
                age,
            )
            return retained
        raise exc
