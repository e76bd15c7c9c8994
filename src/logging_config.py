"""Logging setup for the API process.

Text lines for local runs; with LOG_FORMAT=json, one JSON object per line.
Every record carries the X-Request-ID of the request that produced it, so a
failed plan generation can be followed from the HTTP access line through the
completion call to the parser warning that logged the raw model output.
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from config.settings import settings
from src.middleware.request_id import request_id_var

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(request_id)s] %(name)s: %(message)s"

# Third-party loggers that are chatty at INFO
_QUIET = ("uvicorn.access", "sqlalchemy.engine", "httpx", "anthropic")


class RequestIDFilter(logging.Filter):
    """Stamp every record with the current request's X-Request-ID ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exc_type"] = record.exc_info[0].__name__
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """Install a single stdout handler on the root logger."""
    log_format = (log_format or settings.LOG_FORMAT).lower()
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDFilter())
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
