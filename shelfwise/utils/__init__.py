"""Utility modules for the Shelfwise application."""

from shelfwise.utils.logging import LogContext, get_logger, setup_logging
from shelfwise.utils.retry import RetryConfig, retry_async

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Retry
    "retry_async",
    "RetryConfig",
]
