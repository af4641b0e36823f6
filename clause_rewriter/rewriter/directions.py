"""Ordering and paging directions."""

from enum import Enum
from typing import Optional, Union


class InvalidDirectionError(ValueError):
    """Raised when a logs query direction is not forward or backward."""


class OrderDirection(str, Enum):
    """Direction of an ORDER BY clause."""

    ASC = "ASC"
    DESC = "DESC"


class LogsQueryDirection(str, Enum):
    """Which way a context page walks from the reference timestamp."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def order_direction(self) -> OrderDirection:
        if self is LogsQueryDirection.FORWARD:
            return OrderDirection.ASC
        return OrderDirection.DESC

    @property
    def comparison_operator(self) -> str:
        if self is LogsQueryDirection.FORWARD:
            return ">="
        return "<="


def direction_text(direction: Union[str, Enum]) -> str:
    """Render a direction as the bare SQL text the caller supplied."""
    if isinstance(direction, Enum):
        return str(direction.value)
    return str(direction)


def parse_logs_direction(
    direction: Union[str, LogsQueryDirection]
) -> LogsQueryDirection:
    """Coerce ``direction`` into a LogsQueryDirection.

    Raises:
        InvalidDirectionError: If the value is not forward/backward
    """
    if isinstance(direction, LogsQueryDirection):
        return direction
    text = str(direction).strip().lower()
    try:
        return LogsQueryDirection(text)
    except ValueError as exc:
        raise InvalidDirectionError(
            f"Unknown logs query direction: {direction!r} "
            "(expected 'forward' or 'backward')"
        ) from exc


def direction_from_sort_order(sort_order: Optional[str]) -> LogsQueryDirection:
    """Map a log panel sort order to a query direction.

    Ascending panels page forward; anything else (including no stored
    order) pages backward so the newest rows come first.
    """
    if sort_order and sort_order.strip().lower() in ("ascending", "asc"):
        return LogsQueryDirection.FORWARD
    return LogsQueryDirection.BACKWARD
