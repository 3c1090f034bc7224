"""Correlation id generation."""

import uuid


def generate_correlation_id(prefix: str | None = None) -> str:
    """Return a fresh correlation id for grouping log records.

    >>> generate_correlation_id("TX")
    'TX-3f2b9c0e8d4a4b6f9e1c2d3a4b5c6d7e'
    """
    correlation_id = uuid.uuid4().hex
    return f"{prefix}-{correlation_id}" if prefix else correlation_id
