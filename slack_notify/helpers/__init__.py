"""Helpers - Pure utility functions with no side effects."""

from .timespan import time_span_string

__all__ = [
    'time_span_string',
]
