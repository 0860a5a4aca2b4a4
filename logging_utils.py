# logging_utils.py
"""Logging configuration helpers for the Jira relay."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, ClassVar

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Socket Mode and HTTP internals log every frame and request at INFO/DEBUG.
NOISY_LOGGERS = ("slack_bolt", "slack_sdk", "urllib3")


class JsonFormatter(logging.Formatter):
    """JSON formatter that lifts ``extra=`` fields into top-level keys."""

    RESERVED_KEYS: ClassVar[frozenset[str]] = frozenset(
        logging.LogRecord("", 0, "", 0, "", None, None).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            data["stack"] = record.stack_info

        for key, value in record.__dict__.items():
            if key not in self.RESERVED_KEYS and not key.startswith("_"):
                data[key] = value

        return json.dumps(data, default=str)


class ExtraFieldsFormatter(logging.Formatter):
    """Plain-text formatter that appends ``extra=`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in JsonFormatter.RESERVED_KEYS and not key.startswith("_")
        ]
        if extras:
            line = f"{line} {' '.join(extras)}"
        return line


def resolve_log_level(level_name: str) -> int:
    if not level_name:
        return logging.INFO
    numeric = logging.getLevelName(level_name.upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def configure_logging(level_name: str, json_enabled: bool) -> None:
    """Install a single stdout handler on the root logger."""

    level = resolve_log_level(level_name)
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    formatter = JsonFormatter() if json_enabled else ExtraFieldsFormatter(_DEFAULT_FORMAT)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
