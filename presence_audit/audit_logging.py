"""
Structured logging for the scoring engine.

JSON logs with timestamp, level, logger name and event_type. Every module
gets its logger from get_logger() and logs an event name plus key/value pairs:

    logger = get_logger(__name__)
    logger.warning("invalid_number", topic="social_media", field="followers", value="n/a")
"""
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List

import structlog

from .config import get_settings


def _add_timestamp(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Ensure an ISO 8601 timestamp is always present."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Rename structlog's 'event' key to event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def configure_logging(level: str = None, log_format: str = None) -> None:
    """Configure structlog processors and level from settings (or explicit args)."""
    settings = get_settings()
    level = (level or settings.log_level).upper()
    log_format = (log_format or settings.log_format).lower()
    level_value = getattr(logging, level, logging.INFO)

    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> Any:
    """Return a structured logger bound to the given module name."""
    return structlog.get_logger(name).bind(logger=name)
