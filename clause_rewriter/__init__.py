"""Clause-aware SQL rewriting for log and metrics exploration."""

from .rewriter import (
    ContextFilter,
    LogsQueryDirection,
    OrderDirection,
    add_where_condition,
    build_context_query_sql,
    find_main_clause_position,
    has_limit,
    has_order_by,
    inject_limit,
    inject_order_by,
    is_aggregate_query_without_group_by,
    remove_limit,
    remove_order_by,
    set_limit,
    set_order_by,
    trim_trailing_semicolon,
)

__version__ = "0.1.0"

__all__ = [
    "ContextFilter",
    "LogsQueryDirection",
    "OrderDirection",
    "add_where_condition",
    "build_context_query_sql",
    "find_main_clause_position",
    "has_limit",
    "has_order_by",
    "inject_limit",
    "inject_order_by",
    "is_aggregate_query_without_group_by",
    "remove_limit",
    "remove_order_by",
    "set_limit",
    "set_order_by",
    "trim_trailing_semicolon",
]
