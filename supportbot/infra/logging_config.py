"""
Logging setup shared by the API process and tests.

Development and test get a readable single-line format; production emits one
JSON object per line so log shippers can index the fields.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from supportbot.config import Settings, get_settings

DEFAULT_LOGGER_NAME = "supportbot"
PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
CONTEXT_FIELDS = ("update_id", "chat_id", "conversation_id")


class StructuredFormatter(logging.Formatter):
    """JSON formatter for production logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        # Set through `extra=` by the webhook command and the router
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class LoggingConfig:
    """Configure the root logger once per process from settings."""

    _configured = False

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        if not LoggingConfig._configured:
            self.configure()

    def configure(self) -> None:
        handler = logging.StreamHandler(sys.stdout)
        if self.settings.is_production:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

        root_logger = logging.getLogger()
        root_logger.setLevel(
            getattr(logging, self.settings.log_level.upper(), logging.INFO)
        )
        root_logger.addHandler(handler)

        # httpx logs every Bot API request (including the token in the URL)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the application namespace."""
    if not name:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
