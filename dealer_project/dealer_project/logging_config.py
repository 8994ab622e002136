"""
Logging configuration for the dealership back office.

LOG_FORMAT selects "console" (human readable) or "json" (one JSON object per
line); LOG_LEVEL sets the threshold. Debug runs default to console output.
"""
import json
import logging
import os
from datetime import datetime, timezone

# LogRecord attributes that are not user supplied `extra=` fields
STANDARD_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "taskName",
}


def get_logging_config(debug: bool = False) -> dict:
    """Build the Django LOGGING dict."""
    log_level = os.environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO")
    log_format = os.environ.get("LOG_FORMAT", "console" if debug else "json")

    if log_format == "json":
        formatters = {"default": {"()": "dealer_project.logging_config.JsonFormatter"}}
    else:
        formatters = {
            "default": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": log_level},
            "django": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "django.request": {
                "handlers": ["console"],
                "level": log_level if debug else "ERROR",
                "propagate": False,
            },
            "ledger_core": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
            "celery": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
        },
    }


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON line, keeping any `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in STANDARD_ATTRS
        }
        if extras:
            log_entry["extra"] = extras
        return json.dumps(log_entry, default=str)
