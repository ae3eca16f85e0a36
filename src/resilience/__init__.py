"""Resilience patterns for external API calls

Retry with exponential backoff for the hosted language model.
"""

from src.resilience.retry import retry_with_backoff, is_retryable_error

__all__ = [
    "retry_with_backoff",
    "is_retryable_error",
]
