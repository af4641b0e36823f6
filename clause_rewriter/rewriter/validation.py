"""Syntax check for rewritten queries, backed by sqlglot."""

from typing import Any, Dict, List

import sqlglot
from sqlglot.errors import ParseError, TokenError

DEFAULT_DIALECT = "clickhouse"


def _describe_error(error: Dict[str, Any]) -> str:
    description = error.get("description") or "syntax error"
    line = error.get("line")
    column = error.get("col")
    if line is None:
        return description
    return f"{description} (line {line}, col {column})"


def check_syntax(sql: str, dialect: str = DEFAULT_DIALECT) -> List[str]:
    """Parse ``sql`` and return the problems found.

    Args:
        sql: Query text
        dialect: sqlglot dialect name

    Returns:
        Human-readable problem descriptions, empty when the query parses
    """
    if not sql or not sql.strip():
        return ["query is empty"]
    try:
        sqlglot.parse(sql, read=dialect)
    except ParseError as exc:
        problems: List[str] = []
        for error in exc.errors:
            problems.append(_describe_error(error))
        if not problems:
            problems.append(str(exc))
        return problems
    except TokenError as exc:
        return [str(exc)]
    return []


def is_valid_sql(sql: str, dialect: str = DEFAULT_DIALECT) -> bool:
    return not check_syntax(sql, dialect)
