"""Resilience helpers for backend calls."""

from paperless_mcp.resilience.retry import (
    RetryExhaustedError,
    exponential_backoff,
    retry_async,
)

__all__ = [
    "RetryExhaustedError",
    "exponential_backoff",
    "retry_async",
]
