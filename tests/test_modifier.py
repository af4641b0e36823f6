"""Tests for WHERE / ORDER BY / LIMIT setters and removers."""

from clause_rewriter.rewriter import (
    OrderDirection,
    add_where_condition,
    find_main_clause_position,
    remove_limit,
    remove_order_by,
    set_limit,
    set_order_by,
)


def _clause_offsets(sql, clauses):
    offsets = []
    for clause in clauses:
        offsets.append(find_main_clause_position(sql, clause))
    return offsets


def test_add_where_when_none_exists():
    sql = "SELECT * FROM table"
    assert add_where_condition(sql, "x = 1") == "SELECT * FROM table WHERE x = 1"


def test_add_where_prepends_to_existing_where():
    sql = "SELECT * FROM table WHERE y = 2"
    assert add_where_condition(sql, "x = 1") == "SELECT * FROM table WHERE x = 1 AND y = 2"


def test_add_where_before_group_by_order_by_and_limit():
    assert (
        add_where_condition("SELECT count(*) FROM table GROUP BY status", "x = 1")
        == "SELECT count(*) FROM table WHERE x = 1 GROUP BY status"
    )
    assert (
        add_where_condition("SELECT * FROM table ORDER BY ts", "x = 1")
        == "SELECT * FROM table WHERE x = 1 ORDER BY ts"
    )
    assert (
        add_where_condition("SELECT * FROM table LIMIT 100", "x = 1")
        == "SELECT * FROM table WHERE x = 1 LIMIT 100"
    )


def test_add_where_before_settings_and_format():
    assert (
        add_where_condition("SELECT * FROM t SETTINGS max_threads=1", "x = 1")
        == "SELECT * FROM t WHERE x = 1 SETTINGS max_threads=1"
    )
    assert (
        add_where_condition("SELECT * FROM t FORMAT JSON", "x = 1")
        == "SELECT * FROM t WHERE x = 1 FORMAT JSON"
    )


def test_add_where_removes_trailing_semicolon():
    assert add_where_condition("SELECT * FROM table;", "x = 1") == "SELECT * FROM table WHERE x = 1"


def test_add_where_noop_for_empty_arguments():
    sql = "SELECT * FROM table"
    assert add_where_condition(sql, "") == sql
    assert add_where_condition("", "x = 1") == ""


def test_add_where_ignores_subquery_where():
    sql = "SELECT * FROM (SELECT * FROM t WHERE a = 1) LIMIT 5"
    assert (
        add_where_condition(sql, "x = 1")
        == "SELECT * FROM (SELECT * FROM t WHERE a = 1) WHERE x = 1 LIMIT 5"
    )


def test_add_where_wraps_top_level_or():
    """The new condition must apply to every branch of an OR predicate."""
    assert (
        add_where_condition("SELECT * FROM t WHERE a = 1 OR b = 2", "x = 1")
        == "SELECT * FROM t WHERE x = 1 AND (a = 1 OR b = 2)"
    )
    assert (
        add_where_condition("SELECT * FROM t WHERE a = 1 or b = 2 ORDER BY ts", "x = 1")
        == "SELECT * FROM t WHERE x = 1 AND (a = 1 or b = 2) ORDER BY ts"
    )


def test_add_where_does_not_wrap_nested_or():
    sql = "SELECT * FROM t WHERE (a = 1 OR b = 2) AND c = 3"
    assert (
        add_where_condition(sql, "x = 1")
        == "SELECT * FROM t WHERE x = 1 AND (a = 1 OR b = 2) AND c = 3"
    )


def test_add_where_keeps_clause_order():
    sql = "SELECT a FROM t GROUP BY a ORDER BY a LIMIT 5 SETTINGS s=1 FORMAT JSON"
    result = add_where_condition(sql, "x = 1")
    assert result == (
        "SELECT a FROM t WHERE x = 1 GROUP BY a ORDER BY a LIMIT 5 SETTINGS s=1 FORMAT JSON"
    )
    offsets = _clause_offsets(result, ["WHERE", "GROUP BY", "ORDER BY", "LIMIT", "SETTINGS", "FORMAT"])
    assert offsets == sorted(offsets)


def test_remove_order_by_at_end():
    assert remove_order_by("SELECT * FROM table ORDER BY ts") == "SELECT * FROM table"


def test_remove_order_by_keeps_following_clauses():
    assert remove_order_by("SELECT * FROM table ORDER BY ts LIMIT 100") == "SELECT * FROM table LIMIT 100"
    assert (
        remove_order_by("SELECT * FROM t ORDER BY ts DESC LIMIT 5 SETTINGS a=1 FORMAT JSON")
        == "SELECT * FROM t LIMIT 5 SETTINGS a=1 FORMAT JSON"
    )


def test_remove_order_by_without_order_by():
    sql = "SELECT * FROM table"
    assert remove_order_by(sql) == sql
    sql = "SELECT * FROM (SELECT * FROM t ORDER BY x)"
    assert remove_order_by(sql) == sql


def test_remove_limit_at_end():
    assert remove_limit("SELECT * FROM table LIMIT 100") == "SELECT * FROM table"
    assert remove_limit("SELECT * FROM table LIMIT 100;") == "SELECT * FROM table"


def test_remove_limit_before_settings_and_format():
    assert remove_limit("SELECT * FROM table LIMIT 100 SETTINGS x=1") == "SELECT * FROM table SETTINGS x=1"
    assert remove_limit("SELECT * FROM t LIMIT 10 FORMAT JSON") == "SELECT * FROM t FORMAT JSON"


def test_remove_limit_offset_forms():
    assert remove_limit("SELECT * FROM t LIMIT 10, 20") == "SELECT * FROM t"
    assert remove_limit("SELECT * FROM t LIMIT 10 OFFSET 5") == "SELECT * FROM t"


def test_remove_limit_without_limit():
    sql = "SELECT * FROM table"
    assert remove_limit(sql) == sql
    sql = "SELECT * FROM (SELECT * FROM t LIMIT 10)"
    assert remove_limit(sql) == sql


def test_set_order_by_adds_and_replaces():
    assert set_order_by("SELECT * FROM table", "ts", "DESC") == 'SELECT * FROM table ORDER BY "ts" DESC'
    assert (
        set_order_by("SELECT * FROM table ORDER BY old_col ASC", "ts", "DESC")
        == 'SELECT * FROM table ORDER BY "ts" DESC'
    )


def test_set_order_by_before_limit_settings_format():
    assert (
        set_order_by("SELECT * FROM table LIMIT 100", "ts", "DESC")
        == 'SELECT * FROM table ORDER BY "ts" DESC LIMIT 100'
    )
    assert (
        set_order_by("SELECT * FROM table ORDER BY old ASC LIMIT 100", "ts", "DESC")
        == 'SELECT * FROM table ORDER BY "ts" DESC LIMIT 100'
    )
    assert (
        set_order_by("SELECT * FROM table SETTINGS max_execution_time=60", "ts", "DESC")
        == 'SELECT * FROM table ORDER BY "ts" DESC SETTINGS max_execution_time=60'
    )
    assert (
        set_order_by("SELECT * FROM t LIMIT 5 FORMAT JSON", "ts", OrderDirection.ASC)
        == 'SELECT * FROM t ORDER BY "ts" ASC LIMIT 5 FORMAT JSON'
    )


def test_set_order_by_leaves_subquery_order_alone():
    sql = "SELECT * FROM (SELECT * FROM t ORDER BY x)"
    assert (
        set_order_by(sql, "ts", "DESC")
        == 'SELECT * FROM (SELECT * FROM t ORDER BY x) ORDER BY "ts" DESC'
    )


def test_set_order_by_noop_for_empty_arguments():
    assert set_order_by("", "ts", "DESC") == ""
    assert set_order_by("SELECT 1 FROM t", "", "DESC") == "SELECT 1 FROM t"


def test_set_limit_adds_and_replaces():
    assert set_limit("SELECT * FROM table", 100) == "SELECT * FROM table LIMIT 100"
    assert set_limit("SELECT * FROM table LIMIT 50", 100) == "SELECT * FROM table LIMIT 100"
    assert (
        set_limit("SELECT * FROM table ORDER BY ts DESC LIMIT 50", 100)
        == "SELECT * FROM table ORDER BY ts DESC LIMIT 100"
    )


def test_set_limit_before_settings_and_format():
    assert set_limit("SELECT * FROM table SETTINGS x=1", 100) == "SELECT * FROM table LIMIT 100 SETTINGS x=1"
    assert set_limit("SELECT * FROM t LIMIT 10, 20 FORMAT JSON", 5) == "SELECT * FROM t LIMIT 5 FORMAT JSON"


def test_set_limit_noop_for_non_positive_limit():
    sql = "SELECT * FROM table"
    assert set_limit(sql, 0) == sql
    assert set_limit(sql, -5) == sql
    assert set_limit("", 10) == ""


def test_set_limit_keeps_limit_by():
    sql = "SELECT * FROM logs ORDER BY ts LIMIT 2 BY service LIMIT 100"
    assert set_limit(sql, 10) == "SELECT * FROM logs ORDER BY ts LIMIT 2 BY service LIMIT 10"
    assert remove_limit(sql) == "SELECT * FROM logs ORDER BY ts LIMIT 2 BY service"


def test_set_order_by_inserts_before_limit_by():
    sql = "SELECT * FROM logs ORDER BY level LIMIT 2 BY service"
    assert set_order_by(sql, "ts", "DESC") == 'SELECT * FROM logs ORDER BY "ts" DESC LIMIT 2 BY service'
