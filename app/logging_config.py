"""
Blog API Logging Configuration
Structured logging with context for the API, the file store and requests
"""
import logging
import sys
import json
import traceback
from datetime import datetime, timezone
from typing import Dict, Optional
from functools import wraps
import time
import os

LOG_LEVEL = os.environ.get("BLOG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("BLOG_LOG_FORMAT", "json")  # json or text

# Store scans slower than this are reported at warning level
SLOW_SCAN_MS = float(os.environ.get("BLOG_SLOW_SCAN_MS", "500"))

SERVICE_NAME = "blog-api"


class StructuredLogger:
    """Logger that attaches keyword context to every record"""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

        self.logger.handlers = []
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter() if LOG_FORMAT == "json" else TextFormatter())
        self.logger.addHandler(handler)

    def _log(self, level: int, message: str, context: dict):
        self.logger.log(level, message, extra={"context": context, "logger_name": self.name})

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, context)

    def error(self, message: str, error: Optional[Exception] = None, **context):
        if error:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
            if error.__traceback__ is not None:
                context["traceback"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self._log(logging.ERROR, message, context)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": getattr(record, "logger_name", record.name),
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "context", {}))
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Plain single-line output for local runs; tracebacks follow on their own lines"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S")
        context = dict(getattr(record, "context", {}))
        tb = context.pop("traceback", None)

        line = f"[{timestamp}] [{record.levelname}] {getattr(record, 'logger_name', record.name)}: {record.getMessage()}"
        if context:
            line += " (" + " ".join(f"{k}={v}" for k, v in context.items()) + ")"
        if tb:
            line += "\n" + tb.rstrip()
        return line


def timed(logger: StructuredLogger, slow_ms: Optional[float] = None):
    """
    Log execution time of the wrapped function.

    Calls slower than slow_ms are logged as warnings, others at debug.
    Failures are logged with their duration and re-raised.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"{func.__name__} failed",
                    error=e,
                    function=func.__name__,
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise
            duration = round((time.perf_counter() - start) * 1000, 2)
            if slow_ms is not None and duration > slow_ms:
                logger.warning(
                    f"{func.__name__} slow",
                    function=func.__name__,
                    duration_ms=duration,
                    threshold_ms=slow_ms,
                )
            else:
                logger.debug(
                    f"{func.__name__} completed",
                    function=func.__name__,
                    duration_ms=duration,
                )
            return result

        return wrapper

    return decorator


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Shared logger under the blog namespace, e.g. get_logger("storage") -> blog.storage"""
    full_name = f"blog.{name}"
    if full_name not in _loggers:
        _loggers[full_name] = StructuredLogger(full_name)
    return _loggers[full_name]


api_logger = get_logger("api")
storage_logger = get_logger("storage")
