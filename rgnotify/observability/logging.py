"""Structured logging setup for rgnotify.

Builds on structlog to add:
- Component name binding for log filtering
- JSON output for log aggregation, console output for development
- Level filtering driven by LoggingSettings

Usage:
    from rgnotify.observability.logging import get_logger, configure_logging

    # Configure at application startup
    configure_logging(level="INFO")

    # Get logger with component context
    logger = get_logger("notifier")
    logger.info("notification_sent", notification="alerts")
"""

import logging
import sys
from typing import Any, Callable, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from rgnotify.models.config import LoggingSettings


def add_service_context_processor(
    component: str,
) -> Callable[[WrappedLogger, str, EventDict], EventDict]:
    """Create a processor that stamps a component name on log entries.

    Existing ``component`` values (bound through get_logger) win.

    Args:
        component: The component/service name

    Returns:
        A structlog processor function
    """

    def processor(
        logger: WrappedLogger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict.setdefault("component", component)
        return event_dict

    return processor


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    add_timestamp: bool = True,
    service: str = "rgnotify",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON. If False, use console format.
        add_timestamp: If True, add ISO timestamp to each log entry.
        service: Default component name for entries without one.

    Example:
        # Production (JSON for log aggregation)
        configure_logging(level="INFO", json_output=True)

        # Development (readable console output)
        configure_logging(level="DEBUG", json_output=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_service_context_processor(service),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: LoggingSettings) -> None:
    """Configure logging from a validated LoggingSettings block."""
    configure_logging(level=settings.level, json_output=settings.json_output)


def get_logger(
    component: Optional[str] = None,
    **initial_context: Any,
) -> Any:
    """Get a structured logger with optional component context.

    Args:
        component: Optional component name to include in logs
        **initial_context: Additional context to bind to all log entries

    Returns:
        A bound structlog logger

    Example:
        logger = get_logger("history_store", path="rgnotify.notify.json")
        logger.info("history_loaded")  # Includes path
    """
    logger = structlog.get_logger()

    if component:
        logger = logger.bind(component=component)

    if initial_context:
        logger = logger.bind(**initial_context)

    return logger
