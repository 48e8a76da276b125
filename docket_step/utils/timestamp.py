"""Timestamp helpers shared by the log sinks."""

from datetime import datetime


def now() -> str:
    """Compact timestamp for directory names, e.g. 20261019_143501."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """ISO 8601 timestamp with microseconds, used in JSON Lines events."""
    return datetime.now().isoformat()
