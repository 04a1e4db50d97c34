"""Startgate - Logging Configuration.

Structured logging on top of the standard library: a console handler set up
through ``dictConfig`` and a logger adapter that carries fixed key/value
context (``component``, ``dependency``...) into every record it emits.
"""

from __future__ import annotations

import logging
import logging.config
from collections.abc import Mapping, MutableMapping
import sys
from typing import Any

SIMPLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s | %(name)s | %(levelname)s | "
    "%(filename)s:%(lineno)d | %(funcName)s | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextFormatter(logging.Formatter):
    """Formatter that appends the record's structured context as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = getattr(record, "context", None)
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} | {pairs}"


class StructuredLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Logger adapter with fixed context and child-context support.

    Per-call fields passed as ``extra`` are merged over the fixed context and
    attached to the record as ``record.context``.
    """

    def __init__(
        self, logger: logging.Logger, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(logger, dict(context or {}))

    @property
    def context(self) -> dict[str, Any]:
        """Fixed context attached to every record."""
        return dict(self.extra or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        merged = {**(self.extra or {}), **(kwargs.pop("extra", None) or {})}
        kwargs["extra"] = {"context": merged}
        return msg, kwargs

    def child(self, **context: Any) -> StructuredLogger:
        """Return a logger carrying this logger's context plus ``context``."""
        return StructuredLogger(self.logger, {**(self.extra or {}), **context})

    def fatal(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        """Log at CRITICAL; a fatal line precedes an aborted startup."""
        self.critical(msg, *args, **kwargs)


def get_logger(name: str = "startgate", **context: Any) -> StructuredLogger:
    """Build a structured logger for ``name`` with optional fixed context."""
    return StructuredLogger(logging.getLogger(name), context)


def setup_logging(level: str = "INFO", *, detailed: bool = False) -> None:
    """Configure console logging for the startgate process."""
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "()": ContextFormatter,
                "format": SIMPLE_FORMAT,
                "datefmt": DATE_FORMAT,
            },
            "detailed": {
                "()": ContextFormatter,
                "format": DETAILED_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if detailed else "simple",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "startgate": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug("Logging configured with level %s", level)
