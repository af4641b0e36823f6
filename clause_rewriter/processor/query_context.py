"""Query context shared between processors and the executor."""

from typing import Any, Dict


class QueryContext:
    """Tracks the query as processors rewrite it."""

    def __init__(self, original_sql: str):
        """Initialize context with the original user SQL."""
        self.original_sql = original_sql
        self.rewritten_sql = original_sql
        self.metadata: Dict[str, Any] = {}

    @property
    def was_rewritten(self) -> bool:
        return self.rewritten_sql != self.original_sql

    def set_metadata(self, key: str, value: Any) -> None:
        """Store arbitrary processor metadata."""
        self.metadata[key] = value

    def get_metadata(self, key: str) -> Any:
        """Read metadata produced by earlier processors."""
        return self.metadata.get(key)
