"""Console logging for the service.

Wired into Django through ``LOGGING`` in config/settings.py.
"""

import logging
import sys

LOG_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colours the level name when writing to a terminal."""

    _COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    _RESET = "\033[0m"
    _BOLD = "\033[1m"

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, "") if sys.stdout.isatty() else ""
        if not color:
            return super().format(record)
        original = record.levelname
        record.levelname = f"{color}{self._BOLD}{original}{self._RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def build_logging(level: str = "INFO") -> dict:
    """Return a dictConfig for stdout logging at ``level``."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "()": ColoredFormatter,
                "fmt": LOG_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "console",
                "level": level,
            },
        },
        "root": {"handlers": ["console"], "level": level},
        "loggers": {
            "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
            "rsvp": {"handlers": ["console"], "level": level, "propagate": False},
        },
    }
