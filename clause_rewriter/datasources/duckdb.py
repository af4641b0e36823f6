"""DuckDB data source implementation."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

import duckdb
import pyarrow as pa

from .base import DataSource, DataSourceError

logger = logging.getLogger(__name__)


class DuckDBDataSource(DataSource):
    """DuckDB data source connector."""

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize DuckDB data source.

        Config may include:
            - path: Path to DuckDB database file (default :memory:)
            - read_only: Open the file read-only (default: False)
            - init_sql: Statements run right after connecting, e.g. to
              attach a parquet log export as a view
        """
        super().__init__(name, config)
        self.db_path = config.get("path", ":memory:")
        self.read_only = config.get("read_only", False)
        self.init_sql: List[str] = list(config.get("init_sql", []))

    def connect(self) -> None:
        """Establish connection to DuckDB."""
        logger.info(f"Connecting to DuckDB at '{self.db_path}'")
        try:
            self.connection = duckdb.connect(self.db_path, read_only=self.read_only)
            for statement in self.init_sql:
                self.connection.execute(statement)
        except duckdb.Error as exc:
            raise DataSourceError(f"{self.name}: {exc}") from exc
        self._connected = True
        logger.info(f"Successfully connected to DuckDB: {self.name}")

    def disconnect(self) -> None:
        """Close DuckDB connection."""
        if self.connection:
            self.connection.close()
            logger.info(f"Disconnected from DuckDB: {self.name}")
            self.connection = None
        self._connected = False

    def execute_query(self, query: str) -> pa.Table:
        """Execute query and return an Arrow table."""
        self.ensure_connected()
        logger.debug(f"Executing query on {self.name}: {query}")
        try:
            result = self.connection.execute(query)
            return result.fetch_arrow_table()
        except duckdb.Error as exc:
            raise DataSourceError(f"{self.name}: {exc}") from exc

    def format_timestamp(self, value: datetime) -> str:
        """Format as a DuckDB TIMESTAMP literal (UTC for aware values)."""
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return f"TIMESTAMP '{value.isoformat(sep=' ')}'"
