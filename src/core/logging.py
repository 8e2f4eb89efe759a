"""
Logging setup.

Everything goes through stdlib ``logging`` configured with ``dictConfig``:
a console handler always, rotating files when ``LOG_FILE_ENABLED`` is set,
and ``python-json-logger`` records when ``LOG_FORMAT=json``. Every record
carries the request id of the request that produced it as
``correlation_id``.
"""

import logging
import logging.config
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from src.core.config import settings

# Set by RequestIDMiddleware for the duration of a request
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

NO_REQUEST = "no-request-id"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] - %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(correlation_id)s %(module)s %(lineno)d %(message)s"

# Third-party loggers pinned to WARNING regardless of LOG_LEVEL
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "aiosqlite")


class CorrelationIdFilter(logging.Filter):
    """Stamp ``correlation_id`` on records from the request-id context."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = request_id_ctx.get() or NO_REQUEST
        return True


def _rotating_file(filename: str, level: str, formatter: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": filename,
        "maxBytes": settings.log_file_max_bytes,
        "backupCount": settings.log_file_backup_count,
        "encoding": "utf-8",
        "filters": ["correlation_id"],
    }


def get_logging_config() -> dict[str, Any]:
    """Build the ``dictConfig`` mapping for the current settings."""
    formatter = "json" if settings.log_format == "json" else "console"

    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.log_level,
            "formatter": formatter,
            "stream": sys.stdout,
            "filters": ["correlation_id"],
        },
    }
    if settings.log_file_enabled:
        log_file = Path(settings.log_file_path)
        handlers["file"] = _rotating_file(str(log_file), settings.log_level, formatter)
        handlers["error_file"] = _rotating_file(
            str(log_file.with_name("error.log")), "ERROR", formatter
        )

    handler_names = list(handlers)

    loggers: dict[str, Any] = {
        "src": {"level": settings.log_level, "handlers": handler_names, "propagate": False},
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
    }
    for name in NOISY_LOGGERS:
        loggers[name] = {"level": "WARNING", "handlers": ["console"], "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": CONSOLE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": JSON_FIELDS,
            },
        },
        "filters": {"correlation_id": {"()": CorrelationIdFilter}},
        "handlers": handlers,
        "root": {"level": settings.log_level, "handlers": handler_names},
        "loggers": loggers,
    }


def setup_logging() -> None:
    """Apply the logging configuration; call once, before the app logs anything."""
    if settings.log_file_enabled:
        Path(settings.log_file_path).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(get_logging_config())
    logging.getLogger(__name__).info(
        f"Logging configured: level={settings.log_level} format={settings.log_format} "
        f"files={settings.log_file_enabled}"
    )
