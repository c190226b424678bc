"""Time utilities for block-derived timestamps."""

from datetime import UTC, datetime


def from_block_timestamp(timestamp_ms: int) -> datetime:
    """Return the timezone-aware datetime of a block timestamp in milliseconds."""
    return datetime.fromtimestamp(timestamp_ms / 1000, UTC)
