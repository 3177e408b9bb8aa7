"""Utility functions for the JSON Form Builder."""

from .error_handler import ErrorHandler, handle_error, default_error_handler
from .logging_config import (
    setup_logging, get_logger, DebugInfoLogger, JSONFormatter, log_performance_metrics, log_error_with_context
)

__all__ = [
    "ErrorHandler",
    "handle_error",
    "default_error_handler",
    "setup_logging",
    "get_logger",
    "DebugInfoLogger",
    "JSONFormatter",
    "log_performance_metrics",
    "log_error_with_context",
]
