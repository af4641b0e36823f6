"""Processors applying the clause rewriter to queries before they run."""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

import pyarrow as pa

from ..rewriter import (
    ContextFilter,
    LogsQueryDirection,
    OrderDirection,
    build_context_query_sql,
    inject_limit,
    inject_order_by,
    parse_logs_direction,
)
from .query_executor import QueryExecutor, QueryProcessor


class AutoLimitProcessor(QueryProcessor):
    """Injects a LIMIT so browsing never scans the full table."""

    def __init__(self, limit: int):
        self.limit = limit

    def before_execution(self, executor: QueryExecutor) -> None:
        context = executor.query_context
        rewritten = inject_limit(context.rewritten_sql, self.limit)
        if rewritten != context.rewritten_sql:
            context.set_metadata("injected_limit", self.limit)
        context.rewritten_sql = rewritten

    def after_execution(self, executor: QueryExecutor, result: pa.Table) -> pa.Table:
        return result


class AutoOrderByProcessor(QueryProcessor):
    """Injects ORDER BY on the time column unless the user ordered rows."""

    def __init__(self, column: str, direction: Union[str, OrderDirection]):
        self.column = column
        self.direction = direction

    def before_execution(self, executor: QueryExecutor) -> None:
        context = executor.query_context
        rewritten = inject_order_by(context.rewritten_sql, self.column, self.direction)
        if rewritten != context.rewritten_sql:
            context.set_metadata("injected_order_by", self.column)
        context.rewritten_sql = rewritten

    def after_execution(self, executor: QueryExecutor, result: pa.Table) -> pa.Table:
        return result


class ContextQueryProcessor(QueryProcessor):
    """Turns the query into a context page around a reference timestamp.

    Backward pages come back newest-first from the database; they are
    reversed so every page reads in ascending time order.
    """

    def __init__(
        self,
        time_column: str,
        time_expression: str,
        direction: Union[str, LogsQueryDirection],
        limit: int,
        filters: Optional[Sequence[ContextFilter]] = None,
    ):
        self.time_column = time_column
        self.time_expression = time_expression
        self.direction = parse_logs_direction(direction)
        self.limit = limit
        self.filters: List[ContextFilter] = list(filters or [])

    def before_execution(self, executor: QueryExecutor) -> None:
        context = executor.query_context
        context.rewritten_sql = build_context_query_sql(
            context.rewritten_sql,
            self.time_column,
            self.time_expression,
            self.direction,
            self.limit,
            self.filters,
        )
        context.set_metadata("context_direction", self.direction)

    def after_execution(self, executor: QueryExecutor, result: pa.Table) -> pa.Table:
        if self.direction is not LogsQueryDirection.BACKWARD:
            return result
        indices = pa.array(range(result.num_rows - 1, -1, -1), type=pa.int64())
        return result.take(indices)
