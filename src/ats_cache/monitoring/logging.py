"""Plain and structured JSON logging setup."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ats_cache.config import MonitoringConfig

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        extra_data = getattr(record, "extra_data", None)
        if extra_data is not None:
            log_entry["data"] = extra_data
        return json.dumps(log_entry, default=str)


def setup_structured_logging(
    *,
    log_file: Path | None = None,
    level: int = logging.INFO,
) -> None:
    """Configure the root logger with JSON output on stderr and optionally a file.

    Existing root handlers are replaced.
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    formatter = JSONFormatter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file))
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def configure_logging(monitoring: MonitoringConfig) -> None:
    """Apply the monitoring section of the config to the root logger."""
    level = logging.getLevelName(monitoring.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    if monitoring.structured_logging:
        log_file = Path(monitoring.log_file) if monitoring.log_file else None
        setup_structured_logging(log_file=log_file, level=level)
    else:
        logging.basicConfig(level=level, format=PLAIN_FORMAT)
