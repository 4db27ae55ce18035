"""Observability for rgnotify.

Provides:
- Structured logging configuration (structlog)
- Prometheus metrics for notification outcomes and history persistence

Usage:
    from rgnotify.observability import configure_logging, NOTIFICATIONS_TOTAL

    configure_logging(level="INFO", json_output=False)
    NOTIFICATIONS_TOTAL.labels(outcome="sent").inc()
"""

from rgnotify.observability.logging import (
    get_logger,
    configure_logging,
    configure_from_settings,
    add_service_context_processor,
)
from rgnotify.observability.metrics import (
    NOTIFICATIONS_TOTAL,
    HISTORY_SAVES,
    HISTORY_CORRUPT_LOADS,
    HISTORY_RECORDS,
    get_metrics_text,
    get_metrics_content_type,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "configure_from_settings",
    "add_service_context_processor",
    # Metrics
    "NOTIFICATIONS_TOTAL",
    "HISTORY_SAVES",
    "HISTORY_CORRUPT_LOADS",
    "HISTORY_RECORDS",
    "get_metrics_text",
    "get_metrics_content_type",
]
