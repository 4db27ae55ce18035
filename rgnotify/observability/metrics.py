"""Prometheus metrics for the notifier.

Defines counters and gauges for monitoring:
- Notification outcomes (sent, suppressed, unknown, failed)
- History persistence (saves, records kept, corrupt loads)

Usage:
    from rgnotify.observability.metrics import NOTIFICATIONS_TOTAL

    NOTIFICATIONS_TOTAL.labels(outcome="sent").inc()
"""

from prometheus_client import (
    Counter,
    Gauge,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# Custom registry to avoid conflicts with the default registry
REGISTRY = CollectorRegistry(auto_describe=True)

# =============================================================================
# COUNTERS
# =============================================================================

NOTIFICATIONS_TOTAL = Counter(
    name="rgnotify_notifications_total",
    documentation="Notification requests by outcome",
    labelnames=["outcome"],  # sent, suppressed, unknown, failed
    registry=REGISTRY,
)

HISTORY_SAVES = Counter(
    name="rgnotify_history_saves_total",
    documentation="History file save attempts",
    labelnames=["status"],  # success, failed
    registry=REGISTRY,
)

HISTORY_CORRUPT_LOADS = Counter(
    name="rgnotify_history_corrupt_loads_total",
    documentation="History files that could not be parsed",
    registry=REGISTRY,
)

# =============================================================================
# GAUGES
# =============================================================================

HISTORY_RECORDS = Gauge(
    name="rgnotify_history_records",
    documentation="Records written at the last history save",
    registry=REGISTRY,
)


def get_metrics_text() -> bytes:
    """Generate Prometheus metrics in text format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for a Prometheus metrics response."""
    return CONTENT_TYPE_LATEST
