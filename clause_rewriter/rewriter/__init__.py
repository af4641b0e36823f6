"""Clause-aware SQL rewriting without a parser."""

from .aggregates import (
    AGGREGATE_FUNCTIONS,
    extract_projection,
    is_aggregate_query_without_group_by,
)
from .clauses import (
    CLAUSE_ORDER,
    find_first_clause_position,
    find_limit_by_position,
    find_main_clause_position,
    following_clauses,
    quote_identifier,
    quote_string,
    trim_trailing_semicolon,
)
from .context import ContextFilter, build_context_query_sql
from .directions import (
    InvalidDirectionError,
    LogsQueryDirection,
    OrderDirection,
    direction_from_sort_order,
    parse_logs_direction,
)
from .injectors import has_limit, has_order_by, inject_limit, inject_order_by
from .modifier import (
    add_where_condition,
    remove_limit,
    remove_order_by,
    set_limit,
    set_order_by,
)
from .validation import check_syntax, is_valid_sql

__all__ = [
    "AGGREGATE_FUNCTIONS",
    "CLAUSE_ORDER",
    "ContextFilter",
    "InvalidDirectionError",
    "LogsQueryDirection",
    "OrderDirection",
    "add_where_condition",
    "build_context_query_sql",
    "check_syntax",
    "direction_from_sort_order",
    "extract_projection",
    "find_first_clause_position",
    "find_limit_by_position",
    "find_main_clause_position",
    "following_clauses",
    "has_limit",
    "has_order_by",
    "inject_limit",
    "inject_order_by",
    "is_aggregate_query_without_group_by",
    "is_valid_sql",
    "parse_logs_direction",
    "quote_identifier",
    "quote_string",
    "remove_limit",
    "remove_order_by",
    "set_limit",
    "set_order_by",
    "trim_trailing_semicolon",
]
