"""Notification deduplication and history services.

Provides:
- NotificationRegistry: configured notification types
- HistoryStore: load/save of the pruned sent-notification history
- DeduplicationEngine: SEND/SUPPRESS verdicts within a time window

Usage:
    from rgnotify.services.notification import (
        DeduplicationEngine,
        HistoryStore,
        NotificationRegistry,
    )
"""

from rgnotify.services.notification.deduplicator import DeduplicationEngine
from rgnotify.services.notification.history_store import HistoryState, HistoryStore
from rgnotify.services.notification.registry import NotificationRegistry

__all__ = [
    "DeduplicationEngine",
    "HistoryState",
    "HistoryStore",
    "NotificationRegistry",
]
