"""
GalleryHQ Logging Configuration
Structured stdout logging for the API, the messaging core and the sweeper
"""
import json
import logging
import os
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

LOG_LEVEL = os.environ.get("GALLERYHQ_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("GALLERYHQ_LOG_FORMAT", "json")  # json or text


class StructuredLogger:
    """Logger whose keyword arguments become fields of the log record"""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
        self.logger.propagate = False

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JsonFormatter() if LOG_FORMAT == "json" else TextFormatter())
            self.logger.addHandler(handler)

    def _log(self, level: int, message: str, context: dict):
        self.logger.log(level, message, extra={"context": context})

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
            context["traceback"] = traceback.format_exc()
        self._log(logging.ERROR, message, context)


class JsonFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "context", {}))
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        line = f"[{datetime.now(timezone.utc):%H:%M:%S}] [{record.levelname}] {record.name}: {record.getMessage()}"
        context = getattr(record, "context", {})
        fields = " ".join(f"{k}={v}" for k, v in context.items() if k != "traceback")
        return f"{line} ({fields})" if fields else line


def timed(logger: StructuredLogger):
    """Log how long each call of the decorated function takes"""
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
                    duration_ms=round((time.perf_counter() - start) * 1000, 2),
                )
                raise
            logger.debug(
                f"{func.__name__} completed",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            return result
        return wrapper
    return decorator


api_logger = StructuredLogger("galleryhq.api")
messaging_logger = StructuredLogger("galleryhq.messaging")
worker_logger = StructuredLogger("galleryhq.worker")
db_logger = StructuredLogger("galleryhq.db")


def get_logger(name: str) -> StructuredLogger:
    """Get or create a logger under the galleryhq namespace"""
    return StructuredLogger(f"galleryhq.{name}")
