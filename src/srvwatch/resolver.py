"""Resolver contract consumed by the polling layer.

Brief:
  A resolver turns a name into a list of LookupResult. It may answer
  synchronously (return a list) or asynchronously (return a
  concurrent.futures.Future resolving to a list). Failures are reported by
  raising (or failing the future with) an exception; "no records" is an empty
  list, never an exception.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future
from typing import Callable, List, TypeVar, Union

from .records import LookupResult

logger = logging.getLogger(__name__)

A = TypeVar("A")
B = TypeVar("B")

ResolveResult = Union[List[LookupResult], "Future[List[LookupResult]]"]


class SrvResolver(ABC):
    """Contract for SRV lookups."""

    @abstractmethod
    def resolve(self, fqdn: str) -> ResolveResult:
        """Brief: Look up SRV records for fqdn.

        Inputs:
          - fqdn: Name to query.

        Outputs:
          - list[LookupResult] (possibly empty), or a Future of one.

        Raises:
          - Exception (typically ResolutionError) when the lookup failed.
        """

        raise NotImplementedError("SrvResolver.resolve() must be implemented by a subclass")


def chain_future(
    source: "Future[A]", on_done: Callable[["Future[A]"], B]
) -> "Future[B]":
    """Brief: Derive a Future from source by applying on_done once it completes.

    Inputs:
      - source: Upstream future.
      - on_done: Called with the completed source; its return value (or
        raised exception) completes the derived future.

    Outputs:
      - Future completed on whichever thread completes source.
    """

    derived: Future = Future()

    def _callback(done: "Future[A]") -> None:
        try:
            derived.set_result(on_done(done))
        except Exception as exc:
            derived.set_exception(exc)

    source.add_done_callback(_callback)
    return derived
