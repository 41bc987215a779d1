"""
Structured logging.

JSON log records with the current job ID injected from a context variable.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional, Union
from uuid import UUID

LOGGER_NAMESPACE = "productvideo"

_job_id: ContextVar[Optional[str]] = ContextVar("job_id", default=None)

# Attributes present on every LogRecord; anything else came in through extra=
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "job_id"}


def set_job_id(job_id: Optional[Union[UUID, str]]) -> None:
    """
    Set the job ID attached to log records emitted from the current context.

    Args:
        job_id: Job ID (or None to clear)
    """
    _job_id.set(str(job_id) if job_id is not None else None)


def get_job_id() -> Optional[str]:
    """Return the job ID bound to the current context, if any."""
    return _job_id.get()


class JobContextFilter(logging.Filter):
    """Attach the context job ID to each record unless one was passed explicitly."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "job_id", None):
            record.job_id = _job_id.get()
        return True


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        job_id = getattr(record, "job_id", None)
        if job_id:
            payload["job_id"] = job_id

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure the package logger hierarchy.

    Args:
        level: Log level name
        fmt: "json" for structured output, "text" for human-readable lines
    """
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(job_id)s] %(message)s"
        ))
    handler.addFilter(JobContextFilter())
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger inside the package namespace.

    Args:
        name: Module or component name

    Returns:
        Logger instance
    """
    if not name.startswith(LOGGER_NAMESPACE):
        name = f"{LOGGER_NAMESPACE}.{name}"
    logger = logging.getLogger(name)
    if not any(isinstance(f, JobContextFilter) for f in logger.filters):
        logger.addFilter(JobContextFilter())
    return logger


__all__ = [
    "configure_logging",
    "get_logger",
    "get_job_id",
    "set_job_id",
    "JSONFormatter",
    "JobContextFilter",
]
