"""JSON-lines logging for the service.

Records are stamped with the current request id and principal by
``RequestContextFilter`` and rendered one object per line by
``JsonLogFormatter``. Structured fields go in ``extra={"extra_data": {...}}``.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Mapping

from ..middlewares import principal_ctx_var, request_id_ctx_var
from .config import settings

# Uvicorn's access log duplicates ``request.completed`` from the middleware.
QUIET_LOGGERS = ("uvicorn.access",)


class RequestContextFilter(logging.Filter):
    """Copy the request-scoped context variables onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_ctx_var.get()
        if not hasattr(record, "principal"):
            record.principal = principal_ctx_var.get()
        return True


class JsonLogFormatter(logging.Formatter):
    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)) + f".{int(record.msecs):03d}Z"

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname.lower(),
            "service": self.service,
            "logger": record.name,
            "event": record.getMessage(),
        }
        for key in ("request_id", "principal"):
            value = getattr(record, key, None)
            if value:
                payload[key] = value
        if record.levelno >= logging.WARNING:
            payload["where"] = f"{record.module}:{record.lineno}"
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            for key, value in extra.items():
                payload.setdefault(key, value)
        if record.exc_info and record.exc_info[0] is not None:
            payload["error"] = record.exc_info[0].__name__
            payload["traceback"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(level: str | None = None) -> None:
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(JsonLogFormatter(settings.APP_NAME))
    logging.root.handlers = [handler]
    logging.root.setLevel(level or settings.LOG_LEVEL)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
