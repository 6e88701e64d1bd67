"""Structured logging configuration.

Uses standard library logging with a JSON formatter. Batch runs log from worker
threads, so each record carries the thread name.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from datetime import UTC, datetime
from typing import IO, Any

from github_label_sync.sync.models import SyncEvent

_RESERVED_LOG_RECORD_ATTRS: set[str] = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}

_QUIET_LOGGERS = ("github", "urllib3")


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for logging records."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str, *, stream: IO[str] | None = None) -> None:
    """Configure root logging with structured JSON output.

    Logs go to stderr by default so stdout stays free for reports.
    """

    root = logging.getLogger()

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))


def logging_observer(
    repository: str, *, logger: logging.Logger | None = None
) -> Callable[[SyncEvent], None]:
    """Build an engine observer that logs each label event for `repository`."""

    log = logger or logging.getLogger("github_label_sync.sync.events")

    def observe(event: SyncEvent) -> None:
        extra = {
            "repo": repository,
            "label": event.name,
            "action": event.action,
            "dry_run": event.dry_run,
        }
        if event.ok:
            log.info("Label %s", event.action, extra=extra)
        else:
            log.error("Label %s failed: %s", event.action, event.error, extra=extra)

    return observe
