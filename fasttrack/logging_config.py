from logging.config import dictConfig
import logging

from fasttrack.config import settings


class SafeRequestIDFormatter(logging.Formatter):
    """Formatter that tolerates records logged outside a request."""

    def format(self, record):
        if not hasattr(record, 'request_id'):
            record.request_id = 'no-request-id'
        return super().format(record)


LOG_LEVEL = "DEBUG" if settings.DEBUG else "INFO"

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": SafeRequestIDFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
        "simple": {
            "()": SafeRequestIDFormatter,
            "format": "%(asctime)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "fasttrack": {
            "level": LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "sqlalchemy.engine": {
            "level": "INFO" if settings.DEBUG else "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)
