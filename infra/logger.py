"""
Logging setup shared by the launcher, the web shell and the synchronizer.

Modules grab a logger at import time with ``get_logger(__name__)``; the
launcher calls ``configure_logging`` once at startup (console + file).
"""

from __future__ import annotations

import json as _json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .paths import LOG_DIR, STORAGE_DIR

__all__ = ["STORAGE_DIR", "LOG_DIR", "JsonFormatter", "configure_logging", "get_logger"]

ROOT_LOGGER_NAME = "hexboard"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(entry)


def configure_logging(
    level: str = "INFO",
    json: bool = False,
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure root logging handlers.

    Args:
        level: Log level name applied to the root logger
        json: Emit JSON lines instead of plain text
        log_file: File to log into (default: storage/logs/hexboard.log);
            rotated at 1 MB
        console: Also log to stderr
    """
    formatter: logging.Formatter = JsonFormatter() if json else logging.Formatter(TEXT_FORMAT)

    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)

    path = log_file or LOG_DIR / f"{ROOT_LOGGER_NAME}.log"
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    # httpx logs every request at INFO; one line per second of polling is noise
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
