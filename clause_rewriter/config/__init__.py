"""Configuration management."""

from .config import (
    Config,
    ContextConfig,
    DataSourceConfig,
    LoggingConfig,
    LogsConfig,
    load_config,
)

__all__ = [
    "Config",
    "ContextConfig",
    "DataSourceConfig",
    "LoggingConfig",
    "LogsConfig",
    "load_config",
]
