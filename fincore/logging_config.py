"""
Structured Logging Configuration Module

Ledger events carry a small set of structured fields (the identity the event
concerns, the action, the resource touched and free-form details) next to
the message. Both output formats render those fields: JSON lines for
machine consumption, key=value suffixes for a terminal.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

STRUCTURED_FIELDS = ("user_id", "action", "resource", "details")


class StructuredFormatter(logging.Formatter):
    """Base formatter that knows which record attributes are structured fields"""

    @staticmethod
    def fields(record: logging.LogRecord) -> Dict[str, Any]:
        return {
            name: getattr(record, name)
            for name in STRUCTURED_FIELDS
            if getattr(record, name, None) is not None
        }


class JSONFormatter(StructuredFormatter):
    """One JSON object per line"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(self.fields(record))

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(StructuredFormatter):
    """Plain line with structured fields appended as key=value"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record):
        line = super().format(record)
        fields = self.fields(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


FORMATTERS = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def setup_logging(level: str = "INFO", logger_name: str = "fincore",
                  log_format: str = "json") -> logging.Logger:
    """
    Attach a single stream handler to the application logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the application logger
        log_format: "json" or "text"

    Returns:
        Configured logger instance
    """
    formatter_type = FORMATTERS.get(log_format.lower())
    if formatter_type is None:
        raise ValueError(f"Unknown log format: {log_format}")

    logger = logging.getLogger(logger_name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter_type())
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "fincore") -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, details: Optional[dict] = None):
    """Log a ledger event; fields left as None are omitted from the output"""
    fields = {
        'user_id': user_id,
        'action': action,
        'resource': resource,
        'details': details,
    }
    logger.log(
        getattr(logging, level.upper()),
        message,
        extra={key: value for key, value in fields.items() if value is not None},
        stacklevel=2
    )
