"""Configuration management for the clause rewriter."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


@dataclass
class LogsConfig:
    """Automatic LIMIT / ORDER BY for log browsing."""

    default_limit: int = 1000
    time_column: str = "timestamp"
    sort_order: str = "descending"  # "ascending" or "descending"
    auto_order_by: bool = True


@dataclass
class ContextConfig:
    """Log context ("show surrounding rows") paging."""

    limit: int = 100
    filter_columns: List[str] = field(default_factory=list)


@dataclass
class DataSourceConfig:
    """Database the CLI shell runs queries against."""

    type: str = "duckdb"
    config: Dict[str, Any] = field(
        default_factory=lambda: {"path": ":memory:", "read_only": False}
    )


@dataclass
class LoggingConfig:
    level: str = "INFO"
    structured: bool = False
    log_file: Optional[str] = None


@dataclass
class Config:
    """Main configuration class."""

    logs: LogsConfig = field(default_factory=LogsConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    datasource: DataSourceConfig = field(default_factory=DataSourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: str) -> Config:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Parsed configuration, defaults filled in for missing sections

    Example YAML format:
        logs:
          default_limit: 1000
          time_column: timestamp
          sort_order: descending
          auto_order_by: true

        context:
          limit: 100
          filter_columns: [service, pod]

        datasource:
          type: duckdb
          path: /data/logs.duckdb
          read_only: true

        logging:
          level: DEBUG
          structured: true
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    logs = LogsConfig(**data.get("logs", {}))
    context = ContextConfig(**data.get("context", {}))
    logging_config = LoggingConfig(**data.get("logging", {}))

    datasource = DataSourceConfig()
    if "datasource" in data:
        ds_config = dict(data["datasource"])
        ds_type = ds_config.pop("type", "duckdb")
        datasource = DataSourceConfig(type=ds_type, config=ds_config)

    return Config(
        logs=logs, context=context, datasource=datasource, logging=logging_config
    )
