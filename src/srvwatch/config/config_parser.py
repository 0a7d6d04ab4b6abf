"""Configuration loading helpers for srvwatch.

Brief:
  Reads YAML documents and validates them into SrvWatchConfig models.

Inputs:
  - YAML config paths or already-parsed mappings

Outputs:
  - Validated SrvWatchConfig instances
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional, Union

import yaml

from ..errors import ConfigError
from .config_schema import SrvWatchConfig


def parse_config(cfg: Optional[Mapping[str, Any]]) -> SrvWatchConfig:
    """Brief: Validate a parsed configuration mapping.

    Inputs:
      - cfg: Mapping (typically from YAML); None means all defaults.

    Outputs:
      - SrvWatchConfig.

    Raises:
      - ConfigError: when cfg is not a mapping.
      - pydantic.ValidationError: when a value violates its constraints.

    Example:
      >>> parse_config({"watcher": {"polling_interval_seconds": 10}}).watcher.max_workers
      1
    """

    if cfg is None:
        cfg = {}
    if not isinstance(cfg, Mapping):
        raise ConfigError(
            f"configuration must be a mapping, got {type(cfg).__name__}"
        )
    return SrvWatchConfig.model_validate(dict(cfg))


def load_config(path: Union[str, "os.PathLike[str]"]) -> SrvWatchConfig:
    """Brief: Read and validate a YAML configuration file.

    Inputs:
      - path: Filesystem path; "~" is expanded.

    Outputs:
      - SrvWatchConfig.

    Raises:
      - OSError: when the file cannot be read.
      - ConfigError: when the YAML is invalid or not a mapping.
    """

    full = os.path.abspath(os.path.expanduser(os.fspath(path)))
    with open(full, "r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {full}: {exc}") from exc
    return parse_config(data)
