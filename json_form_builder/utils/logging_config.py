"""Logging configuration for request tracing and debugging."""

import logging
import logging.handlers
import sys
import json
import traceback
from datetime import datetime
from typing import Any, Dict, Optional
from pathlib import Path

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime',
}


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""

        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        # Fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class DebugInfoLogger:
    """Logger for detailed request and session debugging information."""

    def __init__(self, logger_name: str = "json_form_builder.debug"):
        self.logger = logging.getLogger(logger_name)

    def log_request_details(self, method: str, url: str, body: Optional[str],
                            session_id: Optional[str] = None):
        """Log an outbound request before it is dispatched."""

        debug_info = {
            "method": method,
            "url": url,
            "session_id": session_id,
            "has_body": body is not None,
            "body_size": len(body) if body is not None else 0,
        }

        self.logger.debug("Outbound request", extra=debug_info)

    def log_session_operation(self, operation: str, session_id: Optional[str],
                              success: bool, details: Optional[Dict[str, Any]] = None):
        """Log session transition details."""

        session_info = {
            "session_operation": operation,
            "session_id": session_id,
            "success": success
        }

        if details:
            session_info.update(details)

        level = logging.DEBUG if success else logging.WARNING
        self.logger.log(level, "Session operation", extra=session_info)


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_json_logging: bool = False,
) -> Dict[str, Any]:
    """Set up the root logger with console and optional file output."""

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    if enable_json_logging:
        console_formatter = JSONFormatter()
    else:
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5  # 10MB files, keep 5 backups
        )
        file_handler.setLevel(numeric_level)

        if enable_json_logging:
            file_formatter = JSONFormatter()
        else:
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
            )

        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger("json_form_builder").setLevel(numeric_level)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return {
        "log_level": log_level,
        "handlers_count": len(root_logger.handlers)
    }


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def log_performance_metrics(logger: logging.Logger, operation: str,
                            duration: float, **metrics):
    """Log performance metrics for operations."""

    perf_info = {
        "operation": operation,
        "duration_seconds": duration,
        **metrics
    }

    logger.info("Performance metrics", extra=perf_info)


def log_error_with_context(logger: logging.Logger, error: Exception,
                           context: Dict[str, Any], operation: str):
    """Log error with context information."""

    error_info = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
        **context
    }

    logger.error(f"Error in {operation}: {str(error)}", extra=error_info)
