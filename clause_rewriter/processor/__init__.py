"""Query processing utilities (rewrite processors + executor)."""

from .context_browser import LogsContextBrowser
from .logs_processors import (
    AutoLimitProcessor,
    AutoOrderByProcessor,
    ContextQueryProcessor,
)
from .query_context import QueryContext
from .query_executor import QueryExecutor, QueryProcessor

__all__ = [
    "AutoLimitProcessor",
    "AutoOrderByProcessor",
    "ContextQueryProcessor",
    "LogsContextBrowser",
    "QueryContext",
    "QueryExecutor",
    "QueryProcessor",
]
