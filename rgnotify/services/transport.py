from abc import ABC, abstractmethod

from rgnotify.models.notification import OutgoingMessage


class MailTransport(ABC):
    """Abstract base class for mail delivery

    The notifier and the email loggers hand fully built messages to a
    transport. Connection setup, authentication, retries and timeouts are
    the transport's concern.
    """

    @abstractmethod
    def send(self, message: OutgoingMessage) -> None:
        """Deliver one message

        Args:
            message: Message with sender, reply-to, recipients, subject,
                body and HTML flag

        Raises:
            TransportError: If delivery fails
        """
        pass

    def close(self) -> None:
        """Release any connection held by the transport"""
        pass
