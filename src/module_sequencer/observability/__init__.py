"""Observability - Structured logging."""

from .logger import (
    LogContext,
    add_context,
    clear_all_context,
    configure_logging,
    get_log_level,
)

__all__ = [
    "configure_logging",
    "get_log_level",
    "add_context",
    "clear_all_context",
    "LogContext",
]
