"""Context query construction for infinite-scroll log viewing."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..utils.logging import get_logger
from .clauses import quote_identifier, quote_string
from .directions import LogsQueryDirection, parse_logs_direction
from .modifier import add_where_condition, set_limit, set_order_by

logger = get_logger(__name__)


@dataclass
class ContextFilter:
    """Equality filter carried from the reference row into the context query."""

    column: str
    value: str

    def to_condition(self) -> str:
        return f"{quote_identifier(self.column)} = {quote_string(self.value)}"


def time_bound_condition(
    time_column: str, time_expression: str, direction: LogsQueryDirection
) -> str:
    """Build the predicate that bounds rows on one side of a timestamp."""
    operator = direction.comparison_operator
    return f"{quote_identifier(time_column)} {operator} {time_expression}"


def build_context_query_sql(
    original_sql: str,
    time_column: str,
    time_expression: str,
    direction: Union[str, LogsQueryDirection],
    limit: int,
    context_filters: Optional[Sequence[ContextFilter]] = None,
) -> str:
    """Rewrite a query to fetch the rows next to a reference timestamp.

    Args:
        original_sql: The user's query
        time_column: Column holding the row timestamp
        time_expression: Timestamp as a SQL expression, inserted verbatim
        direction: "forward" for rows at or after the timestamp, "backward"
            for rows at or before it
        limit: Number of rows to fetch
        context_filters: Equality filters applied in order

    Returns:
        Query with the time bound and filters ANDed into WHERE, ORDER BY on
        the time column and the requested LIMIT. Any ORDER BY or LIMIT the
        user wrote is replaced.

    Raises:
        InvalidDirectionError: If direction is not forward/backward
    """
    if not original_sql or not time_column:
        return original_sql

    logs_direction = parse_logs_direction(direction)
    sql = add_where_condition(
        original_sql,
        time_bound_condition(time_column, time_expression, logs_direction),
    )

    filters: List[ContextFilter] = list(context_filters or [])
    for context_filter in filters:
        if not context_filter.column:
            continue
        sql = add_where_condition(sql, context_filter.to_condition())

    sql = set_order_by(sql, time_column, logs_direction.order_direction)
    sql = set_limit(sql, limit)
    logger.debug(
        "Built %s context query with %d filter(s): %s",
        logs_direction.value,
        len(filters),
        sql,
    )
    return sql
