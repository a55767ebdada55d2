"""
Logging for Project Registry services.

Every logger writes to stdout, either as one JSON object per line
(LOG_FORMAT=json, for log aggregation) or as plain text (the default).
Registry context travels as extra={"payload": {...}} and is flattened into
top-level JSON fields; build it with log_fields().
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOG_FORMAT_TEXT = "%(asctime)s - %(service)s - %(levelname)s - %(message)s"

# LogRecord attributes that are never copied into JSON output
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "service", "payload"}


def _log_format() -> str:
    return os.getenv("LOG_FORMAT", "text").lower()


def _log_level(default: int) -> int:
    name = os.getenv("LOG_LEVEL")
    if not name:
        return default
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else default


def log_fields(**fields: Any) -> Dict[str, Dict[str, Any]]:
    """Build the ``extra`` mapping for a log call, dropping unset fields.

    Example:
        logger.info("Member added", extra=log_fields(operation="add_member", owner=owner))
    """
    return {"payload": {k: v for k, v in fields.items() if v is not None}}


class ServiceFilter(logging.Filter):
    """Stamps records with the name of the service that emitted them."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record; payload and context keys become top-level fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "service": getattr(record, "service", "unknown"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        payload = getattr(record, "payload", None)
        if isinstance(payload, dict):
            entry.update(payload)

        for key, value in vars(record).items():
            if key in _RECORD_ATTRS or key.startswith("_") or key in entry or value is None:
                continue
            entry[key] = value

        return json.dumps(entry, ensure_ascii=False, default=str)


def get_logger(service_name: str, name: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Return a stdout logger tagged with ``service_name``.

    LOG_FORMAT selects "json" or "text" output; LOG_LEVEL, when set to a
    standard level name, overrides ``level``. Calling again for the same
    name replaces the previous handler instead of stacking a second one.

    Args:
        service_name: Logical service identifier ("registry", "registry-api", "registry-client").
        name: Logger name; defaults to service_name. Modules pass __name__.
        level: Level used when LOG_LEVEL is unset.
    """
    logger = logging.getLogger(name or service_name)
    logger.setLevel(_log_level(level))
    logger.propagate = False

    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    if _log_format() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT_TEXT))
    handler.addFilter(ServiceFilter(service_name))
    logger.addHandler(handler)

    return logger
