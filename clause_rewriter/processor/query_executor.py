"""QueryExecutor runs rewrite processors around a data source call."""

from __future__ import annotations

import itertools
from typing import List, Optional, Protocol

import pyarrow as pa

from ..datasources import DataSource
from ..utils.logging import get_contextual_logger
from .query_context import QueryContext

_query_ids = itertools.count(1)


class QueryProcessor(Protocol):
    """Processor interface for both pre and post execution phases."""

    def before_execution(self, executor: "QueryExecutor") -> None:
        """Rewrite ``executor.query_context.rewritten_sql``."""
        ...

    def after_execution(self, executor: "QueryExecutor", result: pa.Table) -> pa.Table:
        """Transform the result table."""
        ...


class QueryExecutor:
    """Coordinates processors with the data source."""

    def __init__(
        self,
        datasource: DataSource,
        processors: Optional[List[QueryProcessor]] = None,
    ):
        self.datasource = datasource
        if processors is None:
            processors = []
        self.processors = processors
        self.query_context = QueryContext("")

    def rewrite(self, sql: str) -> str:
        """Run only the before-execution hooks and return the final SQL."""
        self.query_context = QueryContext(sql)
        return self._run_before_processors()

    def execute(self, sql: str) -> pa.Table:
        """Rewrite, execute and post-process a query."""
        logger = get_contextual_logger(__name__, {"query_id": next(_query_ids)})
        rewritten_sql = self.rewrite(sql)
        if self.query_context.was_rewritten:
            logger.info("Rewrote query: %s", rewritten_sql)
        result = self.datasource.execute_query(rewritten_sql)
        logger.debug("Query returned %d row(s)", result.num_rows)
        return self._run_after_processors(result)

    def _run_before_processors(self) -> str:
        for processor in self.processors:
            processor.before_execution(self)
        return self.query_context.rewritten_sql

    def _run_after_processors(self, result: pa.Table) -> pa.Table:
        for processor in reversed(self.processors):
            result = processor.after_execution(self, result)
        return result
