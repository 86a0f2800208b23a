"""Structured logging configuration using structlog."""
import logging
import sys
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import structlog
from pythonjsonlogger import jsonlogger

from tour_pricing.config.settings import settings


def add_computation_id_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Prefix the event with [computation_id] when one is bound.

    Every pricing step logs with the id of its computation, so prefixed
    lines of concurrent computations can be told apart in console output.
    """
    computation_id = event_dict.get("computation_id")
    if computation_id:
        event_dict["event"] = f"[{computation_id}] {event_dict.get('event', '')}"
    return event_dict


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def render_pricing_values(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Render Decimal amounts and dates as strings, e.g. failure lookup keys."""
    return {key: _plain(value) for key, value in event_dict.items()}


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure stdlib logging and structlog for a host application.

    The engine never configures logging on import; services embedding it
    call this once at startup.

    Args:
        level: Log level name, defaults to LOG_LEVEL
        fmt: "json" or "console", defaults to LOG_FORMAT
    """
    level = level or settings.logging.level
    fmt = fmt or settings.logging.format
    log_level = getattr(logging, level)

    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            render_pricing_values,
            add_computation_id_prefix,
            structlog.processors.JSONRenderer()
            if fmt == "json"
            else structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger, typically with __name__."""
    return structlog.get_logger(name)
