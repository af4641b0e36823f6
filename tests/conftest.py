"""Shared fixtures: an in-memory DuckDB with a small logs table."""

import logging

import pytest

from clause_rewriter.datasources import DuckDBDataSource

LOGS_TABLE_SQL = """
    CREATE TABLE logs AS
    SELECT
        TIMESTAMP '2024-01-01 00:00:00' + to_seconds(i) AS ts,
        CASE WHEN i % 2 = 0 THEN 'api' ELSE 'worker' END AS service,
        CASE WHEN i % 5 = 0 THEN 'ERROR' ELSE 'INFO' END AS level,
        'message ' || CAST(i AS VARCHAR) AS message
    FROM range(10) t(i)
"""


@pytest.fixture
def logs_datasource():
    """DuckDB data source with ten log rows, one per second."""
    datasource = DuckDBDataSource(
        "logs_mem",
        {"path": ":memory:", "init_sql": [LOGS_TABLE_SQL]},
    )
    datasource.connect()
    yield datasource
    datasource.disconnect()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo setup_logging() calls made by the CLI group between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
