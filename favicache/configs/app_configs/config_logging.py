"""Logging configuration"""

import logging
import sys
from logging.config import dictConfig
from typing import Any

from dockerflow import logging as dockerflow_logging

from favicache.configs import settings

# Log format -> handler writing to the console in that format.
FORMAT_HANDLERS: dict[str, str] = {
    "mozlog": "console-mozlog",
    "pretty": "console-pretty",
}

# Loggers of the service itself, all sharing the configured handler and level.
APP_LOGGERS: tuple[str, ...] = ("favicache", "request.summary", "web.icons.request")

# httpx and httpcore log every outbound request, i.e. every page and icon fetch.
# Those are only worth seeing when something goes wrong.
THIRD_PARTY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def configure_logging() -> None:
    """Configure logging with MozLog."""
    log_format: str = settings.logging.format
    handler = FORMAT_HANDLERS.get(log_format)
    if handler is None:
        raise ValueError(
            f"Invalid log format: {log_format}. Should either be 'mozlog' or 'pretty'."
        )

    if settings.current_env.lower() == "production" and log_format != "mozlog":
        raise ValueError("Log format must be 'mozlog' in production")

    loggers: dict[str, Any] = {
        name: {
            "handlers": [handler],
            "level": settings.logging.level,
            "propagate": settings.logging.can_propagate,
        }
        for name in APP_LOGGERS
    }
    loggers.update(
        {
            name: {"handlers": [handler], "level": "WARNING", "propagate": False}
            for name in THIRD_PARTY_LOGGERS
        }
    )
    loggers["uvicorn.error"] = {
        "handlers": ["uvicorn-error-handler"],
        "level": "ERROR",
        "propagate": False,
    }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": "%(message)s"},
                "json": {
                    "()": GCPCompatibleJSONFormatter,
                    "logger_name": "favicache",
                },
            },
            "handlers": {
                "console-mozlog": {
                    "level": settings.logging.level,
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": sys.stdout,
                },
                "console-pretty": {
                    "level": settings.logging.level,
                    "class": "rich.logging.RichHandler",
                    "formatter": "text",
                },
                "uvicorn-error-handler": {
                    "level": "ERROR",
                    "class": "logging.StreamHandler",
                    "formatter": "text",
                    "stream": sys.stderr,
                },
            },
            "loggers": loggers,
        }
    )


class GCPCompatibleJSONFormatter(dockerflow_logging.JsonLogFormatter):
    """Dockerflow JSON log formatter that also writes the numeric `severity` read by GCP."""

    SEVERITY_LEVELS: dict[int, int] = {
        logging.CRITICAL: 600,
        logging.ERROR: 500,
        logging.WARNING: 400,
        logging.INFO: 200,
        logging.DEBUG: 100,
    }

    def convert_record(self, record):
        """Add `severity` to the converted record."""
        out = super().convert_record(record)
        out["severity"] = self.SEVERITY_LEVELS.get(record.levelno, 0)
        return out
