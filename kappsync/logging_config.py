"""
Logging configuration and labeled loggers.

Lifecycle events get an explicit logger handle carrying a label path
(resource identity, then operation) instead of mutating global state.
"""

import logging
import logging.config
from typing import Any, Dict, Optional, Sequence, Tuple

DIFF_LOGGER_NAME = "kappsync.diff"

# Per-resource handles; debug output is gated by each spec, not by LOG_LEVEL
RESOURCE_LOGGER_NAME = "kappsync.resources"


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out health check requests from uvicorn access logs."""
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "/health" in message and "GET" in message:
                return False
        return True


class LabeledLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with a label path."""

    def __init__(self, logger: logging.Logger, labels: Sequence[str] = ()):
        super().__init__(logger, {})
        self.labels: Tuple[str, ...] = tuple(labels)

    def with_label(self, label: str) -> "LabeledLogger":
        """Return a new logger with `label` appended to the label path."""
        return type(self)(self.logger, self.labels + (label,))

    def process(self, msg, kwargs):
        prefix = "".join(f"[{label}] " for label in self.labels)
        return f"{prefix}{msg}", kwargs


class NoopLogger(LabeledLogger):
    """Labeled logger that drops every record."""

    def __init__(self, logger: Optional[logging.Logger] = None, labels: Sequence[str] = ()):
        super().__init__(logger or logging.getLogger("kappsync.noop"), labels)

    def isEnabledFor(self, level: int) -> bool:
        return False


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with health check suppression."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "health_check_filter": {
                "()": HealthCheckFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "access": {
                "format": "%(message)s"
            },
            "diff": {
                "format": "%(asctime)s - diff - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"]
            },
            "diff": {
                "class": "logging.StreamHandler",
                "formatter": "diff",
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "uvicorn": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False
            },
            "uvicorn.access": {
                "handlers": ["access"],
                "level": "INFO",
                "propagate": False
            },
            "kappsync": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            RESOURCE_LOGGER_NAME: {
                "handlers": ["default"],
                "level": "DEBUG",
                "propagate": False
            },
            DIFF_LOGGER_NAME: {
                "handlers": ["diff"],
                "level": "INFO",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
