"""Detection of single-row aggregate queries."""

import re
from typing import Optional, Tuple

from .clauses import clause_length, find_main_clause_position

# Aggregate functions that collapse an ungrouped result to one row.
AGGREGATE_FUNCTIONS: Tuple[str, ...] = (
    "count",
    "sum",
    "avg",
    "min",
    "max",
    "any",
    "anyLast",
    "argMin",
    "argMax",
    "uniq",
    "uniqExact",
    "uniqHLL12",
    "uniqCombined",
    "uniqCombined64",
    "groupArray",
    "groupUniqArray",
    "quantile",
    "quantiles",
    "median",
)

_AGGREGATE_CALL = re.compile(
    r"\b(?:" + "|".join(AGGREGATE_FUNCTIONS) + r")\s*\(",
    re.IGNORECASE,
)


def extract_projection(sql: str) -> Optional[str]:
    """Return the text between the main SELECT and its FROM.

    None when the main query has no SELECT ... FROM shape.
    """
    select_pos = find_main_clause_position(sql, "SELECT")
    if select_pos is None:
        return None
    start = select_pos + clause_length(sql, select_pos, "SELECT")
    from_offset = find_main_clause_position(sql[start:], "FROM")
    if from_offset is None:
        return None
    return sql[start : start + from_offset]


def is_aggregate_query_without_group_by(sql: str) -> bool:
    """Check whether the query is an ungrouped aggregate.

    Such queries return a single row, and the database rejects an ORDER BY
    on a column that is not part of the aggregate result.

    Args:
        sql: Query text

    Returns:
        True if the projection calls an aggregate function and the main
        query has no GROUP BY
    """
    if not sql:
        return False
    if find_main_clause_position(sql, "GROUP BY") is not None:
        return False
    projection = extract_projection(sql)
    if projection is None:
        return False
    return _AGGREGATE_CALL.search(projection) is not None
