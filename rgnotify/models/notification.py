"""Notification data models.

Provides Pydantic models for:
- Notification: a configured notification type (subject prefix + recipients)
- NotificationMessage: one concrete notification sent (or attempted)
- OutgoingMessage: the mail handed to the transport
- DedupDecision: verdict of the deduplication engine for one candidate
- NotificationResult: what send_notification reports back to the caller

Usage:
    from rgnotify.models.notification import Notification, NotificationMessage

    alerts = Notification(
        name="alerts",
        subject_prefix="Disk Full:",
        recipients=["ops@example.com"],
    )
"""

from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

DedupKey = Tuple[str, str, str]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    """A named, configured class of alert.

    Immutable once registered; looked up by name on every send.

    Attributes:
        name: Unique notification type name.
        subject_prefix: Text placed before the subject suffix.
        recipients: Recipient addresses (order irrelevant).
        body_is_html: Whether the message body is HTML.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique notification name")
    subject_prefix: str = Field(default="", description="Subject line prefix")
    recipients: FrozenSet[str] = Field(
        default_factory=frozenset, description="Recipient email addresses"
    )
    body_is_html: bool = Field(default=False, description="Send body as HTML")

    @field_validator("recipients", mode="before")
    @classmethod
    def coerce_recipients(
        cls, v: Union[str, Iterable[str], None]
    ) -> FrozenSet[str]:
        """Accept a single address or any iterable of addresses."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(address.strip() for address in v if address.strip())


class NotificationMessage(BaseModel):
    """One concrete notification under a Notification type.

    Two messages are the same logical notification when their
    notification_name, subject_suffix and content are all equal. The
    timestamp is not part of the key.

    Attributes:
        notification_name: Name of the Notification this message belongs to.
        subject_suffix: Text appended to the subject prefix.
        content: Message body.
        date_sent: When the message was sent (UTC).
        active: Whether the record should be kept at the next save. Never
            serialized.
    """

    notification_name: str = Field(..., min_length=1)
    subject_suffix: str = Field(default="")
    content: str = Field(default="")
    date_sent: datetime = Field(default_factory=utc_now)
    active: bool = Field(default=False, exclude=True)

    @field_validator("date_sent")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def dedup_key(self) -> DedupKey:
        """The (name, suffix, content) triple used to detect repeats."""
        return (self.notification_name, self.subject_suffix, self.content)

    def matches(self, other: "NotificationMessage") -> bool:
        """Check whether other is the same logical notification."""
        return self.dedup_key == other.dedup_key


class OutgoingMessage(BaseModel):
    """A fully built mail handed to the transport.

    Attributes:
        sender: From address.
        reply_to: Reply-To address.
        recipients: To addresses, sorted for stable output.
        subject: Subject line.
        body: Message body.
        is_html: Whether body is HTML.
    """

    sender: Optional[str] = None
    reply_to: Optional[str] = None
    recipients: List[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""
    is_html: bool = False


class DedupVerdict(str, Enum):
    """Outcome of evaluating a candidate notification."""

    SEND = "send"
    SUPPRESS = "suppress"


class DedupDecision(BaseModel):
    """Result of one deduplication evaluation.

    Attributes:
        verdict: SEND or SUPPRESS.
        candidate: The message that was evaluated.
        previous: Latest matching history record, if any.
        elapsed_days: Days between previous and candidate, if matched.
        reason: Short machine-readable reason for logging.
    """

    verdict: DedupVerdict
    candidate: NotificationMessage
    previous: Optional[NotificationMessage] = None
    elapsed_days: Optional[float] = None
    reason: str = ""

    @property
    def should_send(self) -> bool:
        """Whether the candidate should be dispatched."""
        return self.verdict == DedupVerdict.SEND


class NotificationStatus(str, Enum):
    """What happened to a send_notification call."""

    SENT = "sent"
    SUPPRESSED = "suppressed"
    UNKNOWN = "unknown"  # notification name not registered


class NotificationResult(BaseModel):
    """Result of a send_notification call.

    Attributes:
        status: sent, suppressed or unknown.
        notification_name: Requested notification name.
        subject: Subject line of the dispatched message (sent only).
        recipients: Recipients of the dispatched message (sent only).
    """

    status: NotificationStatus
    notification_name: str
    subject: Optional[str] = None
    recipients: List[str] = Field(default_factory=list)

    @property
    def sent(self) -> bool:
        """Whether a message was dispatched."""
        return self.status == NotificationStatus.SENT
