from __future__ import annotations

import json
import logging
import sys
import time
from typing import IO, Any, Dict, Optional

SERVICE_NAME = "checkhim"


class JsonFormatter(logging.Formatter):
    """One JSON object per line; structured fields travel in ``extra={"extra": {...}}``."""

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service,
            "time_unix": time.time(),
        }
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # verification errors, deadlines and pydantic values are not all JSON-native
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", stream: Optional[IO[str]] = None, service: str = SERVICE_NAME) -> None:
    # stdout is reserved for command output, so logs default to stderr
    root = logging.getLogger()
    root.setLevel(level.upper())
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter(service=service))

    # httpx logs every request line at INFO; keep transport chatter out of client logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    root.handlers[:] = [handler]
