"""Configuration models for the notifier.

A configuration file looks like:

    notifier:
      days_to_wait: 7
      sender: monitor@example.com
      reply_to: ops@example.com
      history:
        path: data/rgnotify.notify.json
        fail_on_corrupt: false
      notifications:
        - name: alerts
          subject_prefix: "Disk Full:"
          recipients: [ops@example.com]
    logging:
      level: INFO
      json_output: true
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from rgnotify.models.notification import Notification

DEFAULT_HISTORY_FILE = Path("rgnotify.notify.json")


class NotificationDefinition(Notification):
    """A notification type as declared in a configuration file."""

    pass


class HistorySettings(BaseModel):
    """Where and how notification history is persisted.

    Attributes:
        path: History file location.
        fail_on_corrupt: Raise HistoryCorruptError on an unreadable file
            instead of starting with an empty history.
    """

    path: Path = Field(default=DEFAULT_HISTORY_FILE)
    fail_on_corrupt: bool = Field(default=False)


class NotifierSettings(BaseModel):
    """Settings consumed by the Notifier.

    Attributes:
        days_to_wait: Suppression window in days. Zero or negative disables
            suppression entirely.
        sender: From address for outgoing notifications.
        reply_to: Reply-To address, defaults to sender.
        history: History persistence settings.
        notifications: Notification types to register at startup.
    """

    days_to_wait: int = Field(default=0, description="Suppression window (days)")
    sender: Optional[str] = Field(default=None, description="From address")
    reply_to: Optional[str] = Field(default=None, description="Reply-To address")
    history: HistorySettings = Field(default_factory=HistorySettings)
    notifications: List[NotificationDefinition] = Field(default_factory=list)

    @field_validator("sender", "reply_to", mode="before")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Unset env placeholders and empty strings mean 'not configured'."""
        if v is None:
            return None
        v = str(v).strip()
        if v == "" or v.startswith("${"):
            return None
        return v

    @model_validator(mode="after")
    def check_unique_names(self) -> "NotifierSettings":
        """Reject duplicate notification names."""
        seen = set()
        for definition in self.notifications:
            if definition.name in seen:
                raise ValueError(f"Duplicate notification name: {definition.name}")
            seen.add(definition.name)
        return self

    @property
    def effective_reply_to(self) -> Optional[str]:
        """Reply-To address, falling back to the sender."""
        return self.reply_to or self.sender

    @property
    def suppression_enabled(self) -> bool:
        """Whether repeated notifications are ever suppressed."""
        return self.days_to_wait > 0


class LoggingSettings(BaseModel):
    """structlog output settings."""

    level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_output: bool = Field(default=True)

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return str(v).upper()


class AppConfig(BaseModel):
    """Top-level configuration file model."""

    notifier: NotifierSettings = Field(default_factory=NotifierSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
