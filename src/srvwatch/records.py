"""Value types shared by resolvers and change notifiers.

Brief:
  - LookupResult: one SRV endpoint as returned by a resolver.
  - RecordSet: either the Initial marker (nothing resolved yet) or a known,
    possibly empty, frozen set of records.
  - ChangeNotification: (current, previous) pair handed to listeners.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")

_UINT16_MAX = 0xFFFF


@dataclass(frozen=True)
class LookupResult:
    """Single resolved SRV endpoint.

    Inputs:
      - host: Target host name as published in the SRV record.
      - port: Target port (0-65535).
      - priority: SRV priority (0-65535), lower is preferred.
      - weight: SRV weight (0-65535) among equal priorities.
      - ttl: Record TTL in seconds, a freshness hint only.

    Outputs:
      - Immutable, hashable record compared by value.

    Example:
      >>> LookupResult("a.example.", 8080, 1, 10, 300).port
      8080
    """

    host: str
    port: int
    priority: int = 0
    weight: int = 0
    ttl: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host:
            raise ValueError("host must be a non-empty string")
        for name in ("port", "priority", "weight"):
            value = getattr(self, name)
            if not 0 <= int(value) <= _UINT16_MAX:
                raise ValueError(f"{name} out of range: {value}")
        if int(self.ttl) < 0:
            raise ValueError(f"ttl must be non-negative: {self.ttl}")

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class RecordSet(Generic[T]):
    """Tagged record set: Initial, or a known frozenset of records.

    Brief:
      Equality compares both the tag and the content, so the Initial marker
      is never equal to any known set, including the known-empty one. A
      RecordSet built from real data can never be Initial.

    Inputs:
      - records: Frozen set of records (ignored for the Initial marker).
      - initial: True only for the marker returned by RecordSet.initial_marker().

    Outputs:
      - Immutable, iterable, sized container.
    """

    records: FrozenSet[T] = field(default_factory=frozenset)
    initial: bool = False

    @classmethod
    def initial_marker(cls) -> "RecordSet[T]":
        return _INITIAL  # type: ignore[return-value]

    @classmethod
    def empty(cls) -> "RecordSet[T]":
        return _EMPTY  # type: ignore[return-value]

    @classmethod
    def of(cls, records: Iterable[T]) -> "RecordSet[T]":
        return cls(records=frozenset(records))

    @property
    def is_initial(self) -> bool:
        return self.initial

    def union(self, *others: "RecordSet[T]") -> "RecordSet[T]":
        """Brief: Union of this set with others; Initial operands contribute nothing.

        Inputs:
          - *others: Additional record sets.

        Outputs:
          - RecordSet: Known set holding every record of every operand.
        """

        merged = set(self.records)
        for other in others:
            merged.update(other.records)
        return RecordSet(records=frozenset(merged))

    def __iter__(self) -> Iterator[T]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, item: object) -> bool:
        return item in self.records

    def __repr__(self) -> str:
        if self.initial:
            return "RecordSet(<initial>)"
        return f"RecordSet({sorted(map(repr, self.records))})"


_INITIAL: RecordSet = RecordSet(records=frozenset(), initial=True)
_EMPTY: RecordSet = RecordSet(records=frozenset())


def is_initial(records: RecordSet) -> bool:
    """Brief: Return True when records is the Initial marker."""

    return records.initial


@dataclass(frozen=True)
class ChangeNotification(Generic[T]):
    """A single observed transition of a change notifier.

    Inputs:
      - current: State after the transition.
      - previous: State before the transition.

    Outputs:
      - Immutable notification passed to the listener.
    """

    current: RecordSet[T]
    previous: RecordSet[T]

    @property
    def added(self) -> FrozenSet[T]:
        return self.current.records - self.previous.records

    @property
    def removed(self) -> FrozenSet[T]:
        return self.previous.records - self.current.records
