"""JSON log records for emitter activity."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging import Logger
from typing import Dict

_ROOT = "event_mixin"
_RECORD_FIELDS = ("event", "payload", "event_name", "listeners")


class _EventRecordFormatter(logging.Formatter):
    """Render one JSON object per line, carrying any emitter extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _RECORD_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, ensure_ascii=False, default=repr)


def get_logger(name: str | None = None) -> Logger:
    """Return ``event_mixin.<name>`` with a JSON stream handler and ``LOG_LEVEL``."""

    logger = logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(_EventRecordFormatter())
    logger.addHandler(handler)
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger


def log_event(
    logger: Logger,
    event: str,
    payload: Dict[str, object] | None = None,
    level: int = logging.INFO,
) -> None:
    """Write ``event`` and its payload as a single structured record."""

    logger.log(level, f"event={event}", extra={"event": event, "payload": payload or {}})
