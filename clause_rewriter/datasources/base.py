"""Base data source interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict

import pyarrow as pa


class DataSourceError(RuntimeError):
    """Raised when a data source fails to run a query."""


class DataSource(ABC):
    """Abstract base class for the databases rewritten queries run on."""

    def __init__(self, name: str, config: Dict[str, Any]):
        """Initialize data source.

        Args:
            name: Unique name for this data source
            config: Configuration dictionary
        """
        self.name = name
        self.config = config
        self.connection = None
        self._connected = False

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the data source."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close connection to the data source."""
        pass

    @abstractmethod
    def execute_query(self, query: str) -> pa.Table:
        """Execute a SQL query and return the materialized result.

        Args:
            query: SQL query string

        Returns:
            Arrow table with all result rows

        Raises:
            DataSourceError: If the database rejects the query
        """
        pass

    @abstractmethod
    def format_timestamp(self, value: datetime) -> str:
        """Render ``value`` as a timestamp expression in this database's SQL."""
        pass

    def is_connected(self) -> bool:
        return self._connected

    def ensure_connected(self) -> None:
        if not self.is_connected():
            self.connect()

    def __enter__(self):
        self.ensure_connected()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name})"
