"""Conditional LIMIT / ORDER BY injection for log browsing.

Injectors only add a clause the user left out; an explicit clause is always
preserved. Running an injector on its own output is a no-op.
"""

import re
from typing import Union

from ..utils.logging import get_logger
from .aggregates import is_aggregate_query_without_group_by
from .clauses import find_main_clause_position, following_clauses, trim_trailing_semicolon
from .directions import OrderDirection
from .modifier import insert_clause_before, order_by_clause

logger = get_logger(__name__)

_SELECT_STATEMENT = re.compile(r"\s*SELECT(?![A-Za-z0-9_])", re.IGNORECASE)


def has_limit(sql: str) -> bool:
    """Check if the main query has a LIMIT (subqueries are ignored)."""
    if not sql:
        return False
    return find_main_clause_position(sql, "LIMIT") is not None


def has_order_by(sql: str) -> bool:
    """Check if the main query has an ORDER BY (subqueries are ignored)."""
    if not sql:
        return False
    return find_main_clause_position(sql, "ORDER BY") is not None


def is_select_statement(sql: str) -> bool:
    return _SELECT_STATEMENT.match(sql) is not None


def inject_limit(sql: str, limit: int) -> str:
    """Add a LIMIT clause when the query has none.

    Args:
        sql: Query text
        limit: Row limit to inject

    Returns:
        Query with LIMIT before SETTINGS/FORMAT (or at the end), or the
        original text when injection does not apply
    """
    if not sql or limit <= 0:
        return sql
    if has_limit(sql):
        logger.debug("Skipping LIMIT injection: query already has LIMIT")
        return sql
    if not is_select_statement(sql):
        logger.debug("Skipping LIMIT injection: not a SELECT statement")
        return sql

    trimmed = trim_trailing_semicolon(sql)
    return insert_clause_before(trimmed, f"LIMIT {limit}", following_clauses("LIMIT"))


def inject_order_by(
    sql: str, column: str, direction: Union[str, OrderDirection]
) -> str:
    """Add ORDER BY on ``column`` when the query has none.

    Ungrouped aggregate queries are left alone since they return a single
    row and the database rejects ordering them by a non-aggregated column.
    """
    if not sql or not column:
        return sql
    if has_order_by(sql):
        logger.debug("Skipping ORDER BY injection: query already has ORDER BY")
        return sql
    if is_aggregate_query_without_group_by(sql):
        logger.debug("Skipping ORDER BY injection: ungrouped aggregate query")
        return sql

    trimmed = trim_trailing_semicolon(sql)
    return insert_clause_before(
        trimmed, order_by_clause(column, direction), following_clauses("ORDER BY")
    )
