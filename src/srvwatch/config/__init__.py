"""Configuration models, loading and logging setup."""

from .config_parser import load_config, parse_config
from .config_schema import ResolverConfig, SrvWatchConfig, WatcherConfig
from .logging_config import init_logging

__all__ = [
    "ResolverConfig",
    "SrvWatchConfig",
    "WatcherConfig",
    "init_logging",
    "load_config",
    "parse_config",
]
