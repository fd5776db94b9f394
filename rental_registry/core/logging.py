"""Console logging configuration for the rental registry."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from rental_registry.core.config import Settings, settings


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    config: Optional[Settings] = None,
) -> None:
    """Configure the root logger with a single console handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Defaults to ``log_level`` from settings.
        format_type: "standard" for human-readable lines, "json" for one
            JSON object per record. Defaults to ``log_format`` from settings.
        config: Settings to read the defaults from; the module-level
            settings when omitted.
    """
    config = config if config is not None else settings
    level = level if level is not None else config.log_level
    format_type = format_type if format_type is not None else config.log_format

    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger("rental_registry").setLevel(log_level)
    # SQL echo is controlled by settings.sql_echo, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        event = getattr(record, "event", None)
        if event is not None:
            log_data["event"] = event

        return json.dumps(log_data)
