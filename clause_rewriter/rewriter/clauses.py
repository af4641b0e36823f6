"""Top-level clause location for raw SQL text.

The rewriter never parses SQL. Every rewrite is computed from the offsets
reported here: a keyword counts only when it sits on a word boundary, at
parenthesis depth 0 of the scanned string, and outside any quoted literal or
quoted identifier.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Tuple

# Top-level clauses in the order the database expects them.
CLAUSE_ORDER: Tuple[str, ...] = (
    "WHERE",
    "GROUP BY",
    "ORDER BY",
    "LIMIT",
    "SETTINGS",
    "FORMAT",
)

_QUOTE_CHARS = ("'", '"', "`")
_IDENTIFIER_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
)
# Keywords that are also function names, e.g. format('{}', x).
_CALLABLE_KEYWORDS = frozenset({"FORMAT", "SETTINGS"})
# Arguments of ClickHouse's "LIMIT n BY expr" (also "LIMIT m, n BY" and
# "LIMIT n OFFSET m BY"); that form is not the row LIMIT.
_LIMIT_BY_SUFFIX = r"\s+\d+(?:\s*,\s*\d+)?(?:\s+OFFSET\s+\d+)?\s+BY(?![A-Za-z0-9_])"

def following_clauses(clause: str) -> Tuple[str, ...]:
    """Return the clauses that must come after ``clause``.

    Args:
        clause: A keyword from CLAUSE_ORDER

    Returns:
        Tuple of clause keywords, nearest first

    Raises:
        ValueError: If the clause is not part of the vocabulary
    """
    index = CLAUSE_ORDER.index(clause.upper())
    return CLAUSE_ORDER[index + 1 :]

@lru_cache(maxsize=64)
def _keyword_pattern(keyword: str) -> Pattern[str]:
    words = keyword.split()
    escaped = []
    for word in words:
        escaped.append(re.escape(word))
    body = r"\s+".join(escaped) + r"(?![A-Za-z0-9_.])"
    normalized = " ".join(words).upper()
    if normalized in _CALLABLE_KEYWORDS:
        body += r"(?!\s*\()"
    if normalized == "LIMIT":
        body += f"(?!{_LIMIT_BY_SUFFIX})"
    return re.compile(body, re.IGNORECASE)

_LIMIT_BY_PATTERN = re.compile(r"LIMIT(?=" + _LIMIT_BY_SUFFIX + ")", re.IGNORECASE)

def _skip_quoted(sql: str, start: int) -> int:
    """Return the offset just past the quoted section opened at ``start``.

    Doubled quote characters and backslash escapes stay inside the section.
    An unterminated section runs to the end of the string.
    """
    quote = sql[start]
    length = len(sql)
    index = start + 1
    while index < length:
        char = sql[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            if index + 1 < length and sql[index + 1] == quote:
                index += 2
                continue
            return index + 1
        index += 1
    return length

def _starts_word(sql: str, index: int) -> bool:
    if index == 0:
        return True
    previous = sql[index - 1]
    return previous not in _IDENTIFIER_CHARS and previous != "."

def _find_top_level(sql: str, pattern: Pattern[str]) -> Optional[int]:
    depth = 0
    index = 0
    length = len(sql)
    while index < length:
        char = sql[index]
        if char in _QUOTE_CHARS:
            index = _skip_quoted(sql, index)
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0 and _starts_word(sql, index):
            if pattern.match(sql, index):
                return index
        index += 1
    return None

def find_main_clause_position(sql: str, clause: str) -> Optional[int]:
    """Find a clause keyword in the main query, skipping subqueries.

    Qualified names such as ``t.limit`` and calls such as ``format(...)``
    are not clauses. ``LIMIT n BY expr`` is not reported as LIMIT.

    Args:
        sql: Query text
        clause: Keyword to look for, e.g. "LIMIT" or "GROUP BY"

    Returns:
        Offset of the first top-level match, or None when there is none
    """
    if not sql or not clause or not clause.strip():
        return None
    return _find_top_level(sql, _keyword_pattern(clause.strip()))

def find_limit_by_position(sql: str) -> Optional[int]:
    """Offset of a top-level ``LIMIT n BY`` clause, or None."""
    if not sql:
        return None
    return _find_top_level(sql, _LIMIT_BY_PATTERN)

def find_first_clause_position(sql: str, clauses: Iterable[str]) -> Optional[int]:
    """Return the smallest top-level offset among ``clauses``, or None.

    When LIMIT is among them, a ``LIMIT n BY`` clause counts as well.
    """
    candidates = []
    for clause in clauses:
        candidates.append(find_main_clause_position(sql, clause))
        if clause.strip().upper() == "LIMIT":
            candidates.append(find_limit_by_position(sql))
    first: Optional[int] = None
    for position in candidates:
        if position is None:
            continue
        if first is None or position < first:
            first = position
    return first

def clause_length(sql: str, position: int, clause: str) -> int:
    """Length of the keyword text matched at ``position`` (whitespace included)."""
    match = _keyword_pattern(clause.strip()).match(sql, position)
    if match is None:
        return 0
    return match.end() - position

def trim_trailing_semicolon(sql: str) -> str:
    """Drop one trailing ';' and the whitespace around it.

    Input without a terminator is returned unchanged.
    """
    if not sql:
        return sql
    stripped = sql.rstrip()
    if not stripped.endswith(";"):
        return sql
    return stripped[:-1].rstrip()

def quote_identifier(name: str) -> str:
    """Quote a column name with double quotes."""
    escaped = name.replace('"', '""')
    return f'"{escaped}"'

def quote_string(value: str) -> str:
    """Quote a string literal, doubling embedded single quotes."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"
