"""Logging setup for the planner's loggers."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

PACKAGE_LOGGER = "heuristic_planner"

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, plus any adapter context fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry.update(getattr(record, "extra_fields", {}))
        return json.dumps(entry, default=str)


class StandardFormatter(logging.Formatter):
    """Plain text: time, logger, level, message."""

    def __init__(self):
        super().__init__(fmt=_TEXT_FORMAT, datefmt=_DATE_FORMAT)


def setup_logging(
    level: str = "INFO",
    structured: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Route the package logger to stderr and, optionally, a file.

    Handlers from an earlier call are replaced. Records do not propagate to
    the root logger, so applications embedding the planner keep their own
    configuration.

    Args:
        level: Level name; unknown names fall back to INFO
        structured: Emit JSON lines instead of plain text
        log_file: Optional path of an extra file handler
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = StructuredFormatter() if structured else StandardFormatter()

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in list(package_logger.handlers):
        package_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False


def setup_logging_from_config(config) -> None:
    """Apply a LoggingConfig."""
    setup_logging(config.level, config.structured, config.log_file)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """Attaches a fixed context dict to every record as ``extra_fields``."""

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs.setdefault("extra", {})["extra_fields"] = self.extra
        return msg, kwargs


def get_contextual_logger(name: str, context: Dict[str, Any]) -> ContextLoggerAdapter:
    """Return a logger whose records carry ``context``, e.g. an optimize call id."""
    return ContextLoggerAdapter(logging.getLogger(name), context)
