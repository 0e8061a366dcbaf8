"""Structured JSON logging configuration.

Every line is one JSON object with ``timestamp``, ``level``, ``logger``,
``env`` and ``event`` plus whatever the caller passed in ``extra=``.
Payment credentials and bearer tokens never reach the log stream: fields
named in ``REDACTED_FIELDS`` are masked.
"""

import logging
import sys
from typing import Any

from pythonjsonlogger import jsonlogger

from testhub.core.config import settings

REDACTED_FIELDS = frozenset({"authorization", "secret_key", "signature", "token", "password"})
REDACTED = "[REDACTED]"

# Libraries that log every HTTP exchange or SQL statement at INFO
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn": logging.INFO,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with the fields every log line carries."""

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["env"] = settings.ENV
        log_record["event"] = log_record.pop("message", record.getMessage())
        log_record.pop("asctime", None)

        for key in REDACTED_FIELDS.intersection(log_record):
            log_record[key] = REDACTED


def setup_logging() -> None:
    """Send JSON lines to stdout at ``LOG_LEVEL``."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        CustomJsonFormatter(
            "%(timestamp)s %(level)s %(logger)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root_logger.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
