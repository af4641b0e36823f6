"""Fetches log rows around a reference row for infinite scrolling."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pyarrow as pa

from ..datasources import DataSource
from ..rewriter import ContextFilter, LogsQueryDirection
from .logs_processors import ContextQueryProcessor
from .query_executor import QueryExecutor


class LogsContextBrowser:
    """Runs context queries for a log view on one data source."""

    def __init__(
        self,
        datasource: DataSource,
        time_column: str,
        limit: int = 100,
        filter_columns: Optional[Sequence[str]] = None,
    ):
        self.datasource = datasource
        self.time_column = time_column
        self.limit = limit
        self.filter_columns: List[str] = list(filter_columns or [])

    def build_filters(self, row: Optional[Mapping[str, Any]]) -> List[ContextFilter]:
        """Equality filters from the reference row's configured columns.

        Columns missing from the row or holding NULL are skipped.
        """
        filters: List[ContextFilter] = []
        if not row:
            return filters
        for column in self.filter_columns:
            value = row.get(column)
            if value is None:
                continue
            filters.append(ContextFilter(column=column, value=str(value)))
        return filters

    def fetch(
        self,
        sql: str,
        timestamp: datetime,
        direction: Union[str, LogsQueryDirection],
        row: Optional[Dict[str, Any]] = None,
    ) -> pa.Table:
        """Fetch one context page next to ``timestamp``.

        Args:
            sql: The query the log view is showing
            timestamp: Timestamp of the reference row
            direction: "forward" (newer rows) or "backward" (older rows)
            row: Reference row, used for the configured filter columns

        Returns:
            Up to ``limit`` rows in ascending time order
        """
        processor = ContextQueryProcessor(
            time_column=self.time_column,
            time_expression=self.datasource.format_timestamp(timestamp),
            direction=direction,
            limit=self.limit,
            filters=self.build_filters(row),
        )
        executor = QueryExecutor(self.datasource, [processor])
        return executor.execute(sql)
