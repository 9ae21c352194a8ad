"""Structured JSON logging.

One JSON object per line. Anything passed through `extra={...}` becomes a
top-level key; credential-bearing keys are masked.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any

REDACTED = "[REDACTED]"
REDACTED_KEYS = frozenset({
    'password', 'password_hash', 'passwordhash',
    'oldpassword', 'newpassword', 'token', 'authtoken',
})

# Attributes every LogRecord carries; everything else came from `extra`
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {'message', 'asctime'}


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(self._extra_fields(record))
        return json.dumps(payload, default=str)

    @staticmethod
    def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
        fields = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or callable(value):
                continue
            fields[key] = REDACTED if key.lower() in REDACTED_KEYS else value
        return fields


def _json_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    return handler


def setup_structured_logging(level: str | None = None):
    """Route the root logger through JSONFormatter.

    Level comes from the argument, then LOG_LEVEL, then INFO. uvicorn's
    access logger is held at WARNING since the request middleware logs
    every request already.
    """
    handler = _json_handler()

    root = logging.getLogger()
    root.setLevel((level or os.getenv("LOG_LEVEL", "INFO")).upper())
    root.handlers = [handler]

    access = logging.getLogger("uvicorn.access")
    access.handlers = [handler]
    access.setLevel(logging.WARNING)
