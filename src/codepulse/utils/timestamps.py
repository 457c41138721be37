"""UTC timestamp formatting for wire payloads."""

from datetime import datetime, timezone


def format_utc(timestamp: float) -> str:
    """Format a Unix timestamp as ISO-8601 UTC, e.g. 2026-02-13T10:00:00Z."""
    dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
