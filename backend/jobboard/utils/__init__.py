"""Utility functions."""

from .generators import generate_correlation_id

__all__ = [
    "generate_correlation_id",
]
