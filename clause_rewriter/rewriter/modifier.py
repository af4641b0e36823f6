"""Clause setters and removers for log context queries.

Each function takes query text and returns new query text. Offsets always
come from the clause locator, so a clause nested in a subquery is never
touched and the relative order of the remaining clauses is preserved.
"""

import re
from typing import Iterable, Union

from .clauses import (
    clause_length,
    find_first_clause_position,
    find_main_clause_position,
    following_clauses,
    quote_identifier,
    trim_trailing_semicolon,
)
from .directions import OrderDirection, direction_text

_LIMIT_ARGUMENTS = re.compile(
    r"LIMIT\s+\d+(?:\s*,\s*\d+)?(?:\s+OFFSET\s+\d+)?",
    re.IGNORECASE,
)


def insert_clause_before(sql: str, clause_text: str, clauses: Iterable[str]) -> str:
    """Insert ``clause_text`` before the earliest of ``clauses``, or append it."""
    position = find_first_clause_position(sql, clauses)
    if position is None:
        return f"{sql} {clause_text}"
    return sql[:position] + clause_text + " " + sql[position:]


def _clause_end(sql: str, start: int, clauses: Iterable[str]) -> int:
    offset = find_first_clause_position(sql[start:], clauses)
    if offset is None:
        return len(sql)
    return start + offset


def add_where_condition(sql: str, condition: str) -> str:
    """Add a condition to the main query's WHERE clause.

    With an existing WHERE the new condition goes first and is joined with
    AND; a predicate containing a top-level OR is parenthesised so the AND
    applies to all of it. Without a WHERE, a new one is inserted before
    GROUP BY/ORDER BY/LIMIT/SETTINGS/FORMAT or appended at the end.
    """
    if not sql or not condition:
        return sql

    trimmed = trim_trailing_semicolon(sql)
    where_pos = find_main_clause_position(trimmed, "WHERE")
    if where_pos is None:
        return insert_clause_before(
            trimmed, f"WHERE {condition}", following_clauses("WHERE")
        )

    body_start = where_pos + clause_length(trimmed, where_pos, "WHERE")
    body_end = _clause_end(trimmed, body_start, following_clauses("WHERE"))
    predicate = trimmed[body_start:body_end]
    if find_main_clause_position(predicate, "OR") is None:
        return trimmed[:body_start] + f" {condition} AND" + trimmed[body_start:]

    head = trimmed[:body_start] + f" {condition} AND ({predicate.strip()})"
    tail = trimmed[body_end:]
    if tail:
        return f"{head} {tail}"
    return head


def remove_order_by(sql: str) -> str:
    """Remove the main query's ORDER BY, keeping LIMIT/SETTINGS/FORMAT."""
    order_by_pos = find_main_clause_position(sql, "ORDER BY")
    if order_by_pos is None:
        return sql

    trimmed = trim_trailing_semicolon(sql)
    rest = trimmed[order_by_pos:]
    next_pos = find_first_clause_position(rest, following_clauses("ORDER BY"))
    if next_pos is not None:
        return trimmed[:order_by_pos] + rest[next_pos:]
    return trimmed[:order_by_pos].rstrip()


def remove_limit(sql: str) -> str:
    """Remove the main query's LIMIT, keeping SETTINGS/FORMAT."""
    limit_pos = find_main_clause_position(sql, "LIMIT")
    if limit_pos is None:
        return sql

    trimmed = trim_trailing_semicolon(sql)
    rest = trimmed[limit_pos:]
    next_pos = find_first_clause_position(rest, following_clauses("LIMIT"))
    if next_pos is not None:
        return trimmed[:limit_pos] + rest[next_pos:]

    head = trimmed[:limit_pos].rstrip()
    match = _LIMIT_ARGUMENTS.match(rest)
    if match is None:
        return head
    remaining = rest[match.end() :].strip()
    if remaining:
        return f"{head} {remaining}"
    return head


def order_by_clause(column: str, direction: Union[str, OrderDirection]) -> str:
    return f"ORDER BY {quote_identifier(column)} {direction_text(direction)}"


def set_order_by(sql: str, column: str, direction: Union[str, OrderDirection]) -> str:
    """Set the main query's ORDER BY, replacing any existing one."""
    if not sql or not column:
        return sql

    base = remove_order_by(trim_trailing_semicolon(sql))
    return insert_clause_before(
        base, order_by_clause(column, direction), following_clauses("ORDER BY")
    )


def set_limit(sql: str, limit: int) -> str:
    """Set the main query's LIMIT, replacing any existing one."""
    if not sql or limit <= 0:
        return sql

    base = remove_limit(trim_trailing_semicolon(sql))
    return insert_clause_before(base, f"LIMIT {limit}", following_clauses("LIMIT"))
