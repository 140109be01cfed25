"""JSON logging for the server process."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

# uvicorn installs its own handlers; route its records through ours instead
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        record.service = self.service_name
        return True


class _JsonHandler(logging.StreamHandler):
    """Marker type so repeated setup calls can find the installed handler."""


def setup_logging(service_name: Optional[str] = None, level: Optional[str] = None) -> None:
    """Send every record to stdout as one JSON object per line.

    Safe to call more than once; later calls only adjust the level.
    """

    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    service = service_name or os.getenv("SERVICE_NAME", "logpeek")

    root = logging.getLogger()
    root.setLevel(log_level)
    if any(isinstance(h, _JsonHandler) for h in root.handlers):
        return

    handler = _JsonHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s",
            rename_fields={"asctime": "time", "levelname": "level"},
        )
    )
    handler.addFilter(_ServiceNameFilter(service))

    root.handlers.clear()
    root.addHandler(handler)
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
    # Per-request access lines only at DEBUG
    if log_level != "DEBUG":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.captureWarnings(True)


__all__ = ["setup_logging"]
