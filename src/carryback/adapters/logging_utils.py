"""
One JSON object per line on stderr for the library side of the app. Entry
points log through loguru; services and adapters log through here so the
API and CLI output stays machine-readable.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .config import config

_CORE_KEYS = ("ts", "level", "logger", "event")


class DealLogFormatter(logging.Formatter):
    """
    ``{"ts", "level", "logger", "event", ...context}``. Context keys never
    overwrite the core keys; colliding ones are prefixed with ``ctx_``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
        }
        fields = getattr(record, "context", None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                payload[f"ctx_{key}" if key in _CORE_KEYS else key] = value
        if record.levelno >= logging.WARNING:
            payload["where"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=False)


def get_logger(name: str) -> logging.Logger:
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(DealLogFormatter())
        log.addHandler(handler)
        log.setLevel(config.LOG_LEVEL)
        log.propagate = False
    return log


def ctx(**fields: Any) -> dict[str, dict[str, Any]]:
    """``logger.info("event", extra=ctx(k=v))``"""
    return {"context": fields}
