from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


_CONFIGURED = False

# Structured extras the sampler attaches to its log calls.
_EXTRA_KEYS = ("instrument", "tracker", "trackers", "path", "policy", "code")


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            payload["service"] = self.service
        # Attach structured extras if present
        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)


def configure_logging(
    *, level: str | None = None, service: str | None = None, stream: Any = None
) -> None:
    """Idempotent logging setup.

    - JSON logs to stderr, so stdout stays free for metric output.
    - Respects LOG_LEVEL env var (default WARNING; pull failures log at debug).
    - Every line carries *service* when given.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = (level or os.getenv("LOG_LEVEL") or "WARNING").upper()
    root = logging.getLogger()
    root.setLevel(log_level)

    # Replace handlers to avoid duplicate logs when embedded in a host service.
    root.handlers.clear()

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(JsonFormatter(service))
    root.addHandler(handler)

    _CONFIGURED = True
