"""Exception hierarchy for srvwatch."""

from __future__ import annotations

from typing import Any, Optional


class SrvWatchError(Exception):
    """
    Brief: Base class for all srvwatch errors.

    Inputs:
    - message: description

    Outputs:
    - Exception instance
    """

    pass


class ResolutionError(SrvWatchError):
    """
    Brief: A name could not be resolved by the resolver collaborator.

    Inputs:
    - message: description
    - fqdn: queried name, when known

    Outputs:
    - Exception instance
    """

    def __init__(self, message: str, *, fqdn: Optional[str] = None) -> None:
        super().__init__(message)
        self.fqdn = fqdn


class TransformError(SrvWatchError):
    """
    Brief: The caller supplied transform raised or returned None.

    Inputs:
    - message: description
    - fqdn: name being polled
    - record: the raw record that could not be transformed

    Outputs:
    - Exception instance
    """

    def __init__(
        self, message: str, *, fqdn: Optional[str] = None, record: Any = None
    ) -> None:
        super().__init__(message)
        self.fqdn = fqdn
        self.record = record


class ProtocolError(SrvWatchError):
    """Brief: API misuse detected synchronously at the call site."""

    pass


class ListenerAlreadySetError(ProtocolError):
    """Brief: set_listener() was called on a notifier that already has one."""

    pass


class ConfigError(SrvWatchError):
    """Brief: Configuration document is malformed."""

    pass
