"""Brief: Unit tests for srvwatch.config parse/load helpers and models.

Inputs:
  - None

Outputs:
  - None
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from srvwatch.config import load_config, parse_config
from srvwatch.errors import ConfigError


def test_parse_config_none_gives_defaults() -> None:
    """Brief: An empty document yields the documented defaults.

    Inputs:
      - None.

    Outputs:
      - None; asserts default resolver and watcher values.
    """

    cfg = parse_config(None)
    assert cfg.resolver.timeout_seconds == 5.0
    assert cfg.resolver.retain_data is False
    assert cfg.resolver.retention_seconds == 3600.0
    assert cfg.resolver.max_retained_names == 4096
    assert cfg.watcher.polling_interval_seconds == 30.0
    assert cfg.watcher.max_workers == 1
    assert cfg.names == []
    assert cfg.logging_config() is None


def test_parse_config_non_mapping_raises() -> None:
    """Brief: A list root is rejected with ConfigError."""

    with pytest.raises(ConfigError, match="must be a mapping"):
        parse_config([1, 2, 3])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "doc",
    [
        {"watcher": {"polling_interval_seconds": 0}},
        {"watcher": {"max_workers": 0}},
        {"resolver": {"retention_seconds": -1}},
        {"resolver": {"timeout_seconds": 0}},
        {"resolver": {"max_retained_names": 0}},
        {"resolver": {"unknown": True}},
        {"surprise": 1},
    ],
)
def test_parse_config_rejects_invalid_values(doc) -> None:
    """Brief: Constraint violations and unknown keys raise ValidationError.

    Inputs:
      - doc: invalid configuration mapping.

    Outputs:
      - None; asserts pydantic.ValidationError.
    """

    with pytest.raises(ValidationError):
        parse_config(doc)


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    """Brief: load_config parses a YAML file into SrvWatchConfig.

    Inputs:
      - tmp_path: pytest temporary directory.

    Outputs:
      - None; asserts parsed values.
    """

    path = tmp_path / "srvwatch.yaml"
    path.write_text(
        "logging:\n"
        "  level: debug\n"
        "resolver:\n"
        "  retain_data: true\n"
        "  retention_seconds: 600\n"
        "  nameservers: [192.0.2.53]\n"
        "watcher:\n"
        "  polling_interval_seconds: 15\n"
        "names:\n"
        "  - _http._tcp.example.com\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))
    assert cfg.logging_config() == {"level": "debug"}
    assert cfg.resolver.retain_data is True
    assert cfg.resolver.retention_seconds == 600.0
    assert cfg.resolver.nameservers == ["192.0.2.53"]
    assert cfg.watcher.polling_interval_seconds == 15.0
    assert cfg.names == ["_http._tcp.example.com"]


def test_load_config_empty_file_gives_defaults(tmp_path: Path) -> None:
    """Brief: An empty YAML file is treated as all defaults."""

    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path).watcher.polling_interval_seconds == 30.0


def test_load_config_invalid_yaml_raises(tmp_path: Path) -> None:
    """Brief: Malformed YAML is reported as ConfigError."""

    path = tmp_path / "bad.yaml"
    path.write_text("watcher: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(path)


def test_load_config_missing_file_raises(tmp_path: Path) -> None:
    """Brief: A missing file propagates OSError."""

    with pytest.raises(OSError):
        load_config(tmp_path / "nope.yaml")
