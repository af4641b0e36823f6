"""Data source connectors."""

from .base import DataSource, DataSourceError
from .duckdb import DuckDBDataSource

__all__ = [
    "DataSource",
    "DataSourceError",
    "DuckDBDataSource",
]
