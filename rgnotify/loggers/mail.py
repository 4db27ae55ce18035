"""Email log sinks.

EmailLogger sends one mail per log entry; CumulativeEmailLogger collects
entries and sends them as a single mail.
"""

import sys
from pathlib import Path
from typing import Iterable, List, Optional, Union
import structlog

from rgnotify.loggers.base import BaseLogger, LogLevel
from rgnotify.models.notification import OutgoingMessage
from rgnotify.services.transport import MailTransport

logger = structlog.get_logger()


def default_subject() -> str:
    """Subject naming the running program."""
    program = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "python"
    return f"Log message from {program}"


class EmailLogger(BaseLogger):
    """Sends an email for each log entry through a MailTransport.

    Attributes:
        transport: Mail transport used for delivery.
        sender: From address.
        recipients: To addresses.
        subject: Subject line for every mail.
        is_html: Send bodies as HTML.
    """

    def __init__(
        self,
        transport: MailTransport,
        level: LogLevel = LogLevel.DEBUG,
        sender: Optional[str] = None,
        reply_to: Optional[str] = None,
        recipients: Union[str, Iterable[str], None] = None,
        subject: Optional[str] = None,
        is_html: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(level=level, **kwargs)
        self.transport = transport
        self.sender = sender
        self._reply_to = reply_to
        self.recipients: List[str] = []
        self.subject = subject or default_subject()
        self.is_html = is_html
        if recipients:
            self.add_recipient(recipients)

    @property
    def reply_to(self) -> Optional[str]:
        """Reply-To address, defaulting to the sender."""
        return self._reply_to or self.sender

    @reply_to.setter
    def reply_to(self, value: Optional[str]) -> None:
        self._reply_to = value

    def add_recipient(self, recipients: Union[str, Iterable[str]]) -> None:
        """Add one address or several."""
        if isinstance(recipients, str):
            recipients = [recipients]
        for address in recipients:
            if address not in self.recipients:
                self.recipients.append(address)

    def build_message(self, body: str) -> OutgoingMessage:
        return OutgoingMessage(
            sender=self.sender,
            reply_to=self.reply_to,
            recipients=list(self.recipients),
            subject=self.subject,
            body=body,
            is_html=self.is_html,
        )

    def deliver(self, body: str) -> None:
        """Send body as one mail."""
        self.transport.send(self.build_message(body))
        logger.debug(
            "email_logger_sent",
            subject=self.subject,
            recipients=len(self.recipients),
        )

    def write_to_log(self, message: str) -> None:
        self.deliver(message)

    def close(self) -> None:
        self.transport.close()


class CumulativeEmailLogger(EmailLogger):
    """Collects log entries and sends them together in one email.

    Attributes:
        send_email_on_close: Send the collected entries on close().
        send_empty_emails: Send a mail even when nothing was collected.
    """

    def __init__(
        self,
        transport: MailTransport,
        level: LogLevel = LogLevel.DEBUG,
        send_email_on_close: bool = True,
        send_empty_emails: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(transport, level=level, **kwargs)
        self.send_email_on_close = send_email_on_close
        self.send_empty_emails = send_empty_emails
        self._entries: List[str] = []

    @property
    def pending(self) -> int:
        """Number of collected entries not yet sent."""
        return len(self._entries)

    def send_email(self) -> bool:
        """Send collected entries and start a new body.

        Returns:
            True if a mail was sent.
        """
        if not self._entries and not self.send_empty_emails:
            return False

        body = "".join(entry + self.line_ending for entry in self._entries)
        self.deliver(body)
        self._entries.clear()
        return True

    def write_to_log(self, message: str) -> None:
        self._entries.append(message)

    def close(self) -> None:
        try:
            if self.send_email_on_close:
                self.send_email()
        finally:
            super().close()
