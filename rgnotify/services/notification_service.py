"""Notifier: email alerts with duplicate suppression.

Sends notifications through an injected mail transport while
suppressing identical notifications repeated within ``days_to_wait``
days. Sent-notification history survives process restarts through a
HistoryStore that is written once, when the notifier closes.

Usage:
    from rgnotify.services.notification_service import Notifier
    from rgnotify.models.config import NotifierSettings

    with Notifier(transport, NotifierSettings(days_to_wait=7, sender="a@b.c")) as n:
        n.add_notification("alerts", "Disk Full:", ["ops@example.com"])
        n.send_notification("alerts", "disk at 95%", "host1")
"""

from datetime import datetime
from typing import Callable, Iterable, List, Optional, Union
import structlog

from rgnotify.models.config import NotifierSettings
from rgnotify.models.notification import (
    Notification,
    NotificationMessage,
    NotificationResult,
    NotificationStatus,
    OutgoingMessage,
    utc_now,
)
from rgnotify.observability.metrics import NOTIFICATIONS_TOTAL
from rgnotify.services.notification import (
    DeduplicationEngine,
    HistoryState,
    HistoryStore,
    NotificationRegistry,
)
from rgnotify.services.transport import MailTransport

logger = structlog.get_logger()


class EmailMessageBuilder:
    """Builds outgoing mail for a notification."""

    def __init__(self, settings: NotifierSettings) -> None:
        self.settings = settings

    def build(
        self,
        notification: Notification,
        message: NotificationMessage,
    ) -> OutgoingMessage:
        """Build the mail for one notification message.

        The subject is the prefix and suffix joined by a space, trimmed.
        """
        subject = f"{notification.subject_prefix} {message.subject_suffix}".strip()

        return OutgoingMessage(
            sender=self.settings.sender,
            reply_to=self.settings.effective_reply_to,
            recipients=sorted(notification.recipients),
            subject=subject,
            body=message.content,
            is_html=notification.body_is_html,
        )


class Notifier:
    """Sends notifications, suppressing repeats within a time window.

    Unknown notification names are ignored (logged, never raised) so a
    typo in a rarely used alert path cannot crash the calling
    application. Transport errors propagate to the caller and the failed
    message is not recorded, so a retry is treated as new.

    Attributes:
        settings: Notifier configuration.
        registry: Registered notification types.
        history_store: Persistence for sent notifications.
        engine: Duplicate detection.
    """

    def __init__(
        self,
        transport: MailTransport,
        settings: Optional[NotifierSettings] = None,
        history_store: Optional[HistoryStore] = None,
        registry: Optional[NotificationRegistry] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the notifier.

        Args:
            transport: Mail transport used for delivery.
            settings: Notifier settings. Defaults never suppress.
            history_store: History persistence. Built from settings if None.
            registry: Notification registry. Populated from
                settings.notifications if None.
            clock: Returns the current time. Defaults to UTC now.
        """
        self.settings = settings or NotifierSettings()
        self.transport = transport
        self.history_store = history_store or HistoryStore(
            path=self.settings.history.path,
            fail_on_corrupt=self.settings.history.fail_on_corrupt,
        )
        self.engine = DeduplicationEngine(days_to_wait=self.settings.days_to_wait)
        self._clock = clock or utc_now
        self._message_builder = EmailMessageBuilder(self.settings)
        self._closed = False

        if registry is None:
            registry = NotificationRegistry()
            for definition in self.settings.notifications:
                registry.add(definition)
        self.registry = registry

        logger.info(
            "notifier_initialized",
            days_to_wait=self.settings.days_to_wait,
            history=str(self.history_store.path),
            notifications=len(self.registry),
        )

    @property
    def history(self) -> List[NotificationMessage]:
        """In-memory history, loaded from disk on first access."""
        return self.history_store.load()

    @property
    def closed(self) -> bool:
        return self._closed

    def add_notification(
        self,
        name: Union[str, Notification],
        subject_prefix: str = "",
        recipients: Union[str, Iterable[str]] = (),
        body_is_html: bool = False,
    ) -> Notification:
        """Register a notification type.

        Accepts either a prebuilt Notification or its fields.

        Raises:
            DuplicateNotificationError: If the name is already registered.
        """
        if isinstance(name, Notification):
            return self.registry.add(name)
        return self.registry.register(name, subject_prefix, recipients, body_is_html)

    def send_notification(
        self,
        name: str,
        content: str,
        subject_suffix: str = "",
    ) -> NotificationResult:
        """Send a notification unless it repeats a recent one.

        Args:
            name: Registered notification name.
            content: Message body.
            subject_suffix: Text appended to the notification's subject prefix.

        Returns:
            NotificationResult describing what happened.

        Raises:
            RuntimeError: If the notifier is closed.
            Exception: Whatever the transport raises on delivery failure.
        """
        if self._closed:
            raise RuntimeError("Notifier is closed")

        notification = self.registry.resolve(name)
        if notification is None:
            NOTIFICATIONS_TOTAL.labels(outcome="unknown").inc()
            logger.warning("notification_unknown", notification=name)
            return NotificationResult(
                status=NotificationStatus.UNKNOWN,
                notification_name=name,
            )

        candidate = NotificationMessage(
            notification_name=name,
            subject_suffix=subject_suffix,
            content=content,
            date_sent=self._clock(),
        )

        decision = self.engine.evaluate(self.history, candidate)

        if not decision.should_send:
            NOTIFICATIONS_TOTAL.labels(outcome="suppressed").inc()
            logger.info(
                "notification_suppressed",
                notification=name,
                subject_suffix=subject_suffix,
                elapsed_days=round(decision.elapsed_days or 0.0, 3),
            )
            return NotificationResult(
                status=NotificationStatus.SUPPRESSED,
                notification_name=name,
            )

        message = self._message_builder.build(notification, candidate)

        try:
            self.transport.send(message)
        except Exception as e:
            NOTIFICATIONS_TOTAL.labels(outcome="failed").inc()
            logger.error(
                "notification_send_failed",
                notification=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        self.engine.record_sent(self.history, decision)
        NOTIFICATIONS_TOTAL.labels(outcome="sent").inc()
        logger.info(
            "notification_sent",
            notification=name,
            subject=message.subject,
            recipients=len(message.recipients),
            reason=decision.reason,
        )
        return NotificationResult(
            status=NotificationStatus.SENT,
            notification_name=name,
            subject=message.subject,
            recipients=message.recipients,
        )

    def close(self) -> None:
        """Persist active history and release the transport.

        A notifier that never touched its history leaves the file as is.
        The transport is closed even if saving fails. Safe to call twice.
        """
        if self._closed:
            return
        self._closed = True

        try:
            if self.history_store.state == HistoryState.LOADED:
                active = [record for record in self.history if record.active]
                self.history_store.save(active)
                logger.info(
                    "notifier_history_persisted",
                    kept=len(active),
                    pruned=len(self.history) - len(active),
                )
        finally:
            self.transport.close()
            logger.debug("notifier_closed")

    def __enter__(self) -> "Notifier":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
