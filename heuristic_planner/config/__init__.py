"""Configuration management."""

from .config import (
    Config,
    OptimizerConfig,
    LoggingConfig,
    QuerySpec,
    load_config,
    load_query,
    parse_query,
)

__all__ = [
    "Config",
    "OptimizerConfig",
    "LoggingConfig",
    "QuerySpec",
    "load_config",
    "load_query",
    "parse_query",
]
