"""Registry of configured notification types.

Usage:
    from rgnotify.services.notification import NotificationRegistry

    registry = NotificationRegistry()
    registry.register("alerts", "Disk Full:", ["ops@example.com"])
    notification = registry.resolve("alerts")
"""

from typing import Dict, Iterable, List, Optional, Union
import structlog

from rgnotify.models.notification import Notification
from rgnotify.utils.exceptions import DuplicateNotificationError

logger = structlog.get_logger()


class NotificationRegistry:
    """In-memory lookup table of notification types keyed by name.

    Registering a name twice fails fast with DuplicateNotificationError.
    Resolving an unknown name returns None; callers treat that as
    "nothing to send".
    """

    def __init__(self) -> None:
        self._notifications: Dict[str, Notification] = {}

    def add(self, notification: Notification) -> Notification:
        """Register a prebuilt Notification.

        Raises:
            DuplicateNotificationError: If the name is already registered.
        """
        if notification.name in self._notifications:
            logger.error("notification_duplicate_registration", name=notification.name)
            raise DuplicateNotificationError(notification.name)

        self._notifications[notification.name] = notification
        logger.debug(
            "notification_registered",
            name=notification.name,
            recipients=len(notification.recipients),
            html=notification.body_is_html,
        )
        return notification

    def register(
        self,
        name: str,
        subject_prefix: str = "",
        recipients: Union[str, Iterable[str]] = (),
        body_is_html: bool = False,
    ) -> Notification:
        """Build and register a Notification.

        Args:
            name: Unique notification name.
            subject_prefix: Text placed before the subject suffix.
            recipients: One address or an iterable of addresses.
            body_is_html: Whether the body is HTML.

        Returns:
            The registered Notification.

        Raises:
            DuplicateNotificationError: If the name is already registered.
        """
        return self.add(
            Notification(
                name=name,
                subject_prefix=subject_prefix,
                recipients=recipients,
                body_is_html=body_is_html,
            )
        )

    def resolve(self, name: str) -> Optional[Notification]:
        """Look up a notification type, or None if not registered."""
        return self._notifications.get(name)

    def names(self) -> List[str]:
        """Registered notification names in registration order."""
        return list(self._notifications)

    def __contains__(self, name: object) -> bool:
        return name in self._notifications

    def __len__(self) -> int:
        return len(self._notifications)
