"""Logging setup for action servers built on actionkit.

Records of the ``actionkit`` logger go to the console and, optionally, to a
rotating file of JSON lines that log shippers can ingest as is.
"""

import logging
import logging.config
from typing import Any

LOGGER_NAME = "actionkit"
CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s"
JSON_FILE_MAX_BYTES = 10 * 1024 * 1024
JSON_FILE_BACKUPS = 5


def _json_file_handler(path: str, level: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": path,
        "maxBytes": JSON_FILE_MAX_BYTES,
        "backupCount": JSON_FILE_BACKUPS,
        "encoding": "utf-8",
        "formatter": "json",
        "level": level,
    }


def build_logging_config(level: str = "INFO", json_file: str | None = None) -> dict[str, Any]:
    """Return the ``dictConfig`` schema used by ``setup_logging``."""
    level = level.upper()
    handlers: dict[str, Any] = {
        "console": {"class": "logging.StreamHandler", "formatter": "console", "level": level},
    }
    formatters: dict[str, Any] = {
        "console": {"format": CONSOLE_FORMAT, "datefmt": "%H:%M:%S"},
    }
    if json_file:
        formatters["json"] = {"()": "pythonjsonlogger.json.JsonFormatter", "format": JSON_FIELDS}
        handlers["json_file"] = _json_file_handler(json_file, level)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            LOGGER_NAME: {"handlers": list(handlers), "level": level, "propagate": False},
        },
        # Third party libraries only surface problems
        "root": {"handlers": ["console"], "level": "WARNING"},
    }


def setup_logging(level: str = "INFO", json_file: str | None = None) -> None:
    """
    Configure logging for the action server.

    Args:
        level: Log level of the actionkit logger, case insensitive
        json_file: Optional path of a rotating file receiving JSON records
    """
    logging.config.dictConfig(build_logging_config(level, json_file))


class ContextLogger:
    """Named logger handing out adapters bound to a request."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def with_context(self, **context: Any) -> logging.LoggerAdapter:
        """
        Bind context to the logger.

        Every record logged through the adapter carries the context
        key-value pairs as extra attributes.
        """
        return logging.LoggerAdapter(self.logger, context)
