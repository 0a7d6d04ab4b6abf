"""Typed configuration models for srvwatch.

Brief:
  pydantic models describing the optional YAML configuration. Field
  constraints reject invalid values (non-positive intervals and retention,
  zero workers) when the document is validated.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResolverConfig(BaseModel):
    """Brief: Settings for the resolver chain.

    Inputs:
      - timeout_seconds: Lifetime of a single DNS lookup.
      - cache_lookups: Reuse DNS answers for their TTL inside the process.
      - retain_data: Wrap the resolver with RetainingSrvResolver.
      - retention_seconds: How long a retained answer stays usable.
      - max_retained_names: Most names retained at once; least recently used
        names are dropped early past this bound.
      - nameservers: Optional nameserver addresses overriding system config.

    Outputs:
      - ResolverConfig instance.
    """

    model_config = ConfigDict(extra="forbid")

    timeout_seconds: float = Field(default=5.0, gt=0)
    cache_lookups: bool = False
    retain_data: bool = False
    retention_seconds: float = Field(default=3600.0, gt=0)
    max_retained_names: int = Field(default=4096, ge=1)
    nameservers: List[str] = Field(default_factory=list)


class WatcherConfig(BaseModel):
    """Brief: Settings for the polling watcher.

    Inputs:
      - polling_interval_seconds: Fixed delay between two ticks of one name.
      - max_workers: Worker threads of the default scheduler.
      - thread_name_prefix: Thread name prefix of the default scheduler.

    Outputs:
      - WatcherConfig instance.
    """

    model_config = ConfigDict(extra="forbid")

    polling_interval_seconds: float = Field(default=30.0, gt=0)
    max_workers: int = Field(default=1, ge=1)
    thread_name_prefix: str = "srv-lookup"


class SrvWatchConfig(BaseModel):
    """Brief: Top-level configuration document."""

    model_config = ConfigDict(extra="forbid")

    logging: Dict[str, Any] = Field(default_factory=dict)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
    names: List[str] = Field(default_factory=list)

    def logging_config(self) -> Optional[Dict[str, Any]]:
        return dict(self.logging) if self.logging else None
