"""
Logging setup for the records tools.

Modules log through ``logging.getLogger(__name__)``; entry points call
``configure_logging`` once to install a single stream handler on the root
logger, either as plain text or as newline-delimited JSON.

Usage::

    from records.logging import configure_logging

    configure_logging("json", "DEBUG")
"""

from __future__ import annotations

import json
import logging

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Extra attributes copied into JSON output when present on a record
EXTRA_FIELDS = ("record_id", "nip", "count", "path", "filters")


class JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(log_format: str = "text", level: str | int = "INFO") -> logging.Handler:
    """Install one stream handler on the root logger and return it.

    Args:
        log_format: "text" or "json"
        level: Level name or number for the root logger

    Raises:
        ValueError: for an unknown format or level name
    """
    if log_format not in ("text", "json"):
        raise ValueError(f"Unknown log format: {log_format!r}")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logging.basicConfig(handlers=[handler], level=level, force=True)
    return handler
