"""Custom exceptions for the notification engine.

This module defines the exception hierarchy for rgnotify:
- Base exception for all notifier errors
- Configuration errors (duplicate registration, invalid config files)
- Persistence errors (corrupt or unloaded history)
- Transport errors (mail delivery failures)

All exceptions inherit from NotifierError to allow catching every
notifier-related error in a single except block when needed.
"""


class NotifierError(Exception):
    """Base exception for all notifier errors

    Use this to catch any error raised by rgnotify:
    ```python
    try:
        notifier.send_notification("alerts", "disk at 95%", "host1")
    except NotifierError as e:
        logger.error("notification_failed", error=str(e))
    ```
    """

    pass


class DuplicateNotificationError(NotifierError):
    """A notification type with the same name is already registered

    Raised when:
    - NotificationRegistry.register() is called twice with one name
    - Notifier.add_notification() repeats an existing name
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Notification already registered: {name!r}")
        self.name = name


class ConfigValidationError(NotifierError):
    """Configuration validation failed"""

    pass


class HistoryError(NotifierError):
    """Base for notification history persistence errors."""

    pass


class HistoryCorruptError(HistoryError):
    """History file exists but cannot be parsed

    Raised only when the history store is configured with
    fail_on_corrupt=True. Otherwise corrupt files are backed up and the
    history starts empty.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Notification history is corrupt ({path}): {reason}")
        self.path = path
        self.reason = reason


class HistoryNotLoadedError(HistoryError):
    """save() was called before the history was loaded."""

    pass


class TransportError(NotifierError):
    """Mail transport failed to deliver a message

    Raised by MailTransport implementations when:
    - The connection to the mail server fails
    - The server rejects the message
    - The send times out

    Never retried by the notifier; it propagates to the caller.
    """

    pass
