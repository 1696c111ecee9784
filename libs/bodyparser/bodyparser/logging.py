"""
Structured JSON logging configuration.

Call ``setup_logging()`` once at service startup.  The library itself only
creates module loggers under ``bodyparser.*``; decoders log the kind and
status of a rejection, never body content.
"""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger import jsonlogger

from bodyparser.config import LOG_FORMAT, LOG_LEVEL

NOISY_LOGGERS = ("uvicorn.access", "python_multipart", "httpx")


class _ServiceFilter(logging.Filter):
    """Stamp every record with the owning service name."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name  # type: ignore[attr-defined]
        return True


def setup_logging(service_name: str = "service", level: str | None = None, fmt: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel((level or LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)

    if (fmt or LOG_FORMAT) == "json":
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(service)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
    else:
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(service)s %(name)s %(message)s")

    handler.setFormatter(formatter)
    handler.addFilter(_ServiceFilter(service_name))

    root.handlers.clear()
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(service_name).info("Logging initialised")
