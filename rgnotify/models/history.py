"""On-disk representation of the notification history.

The history file is a JSON document:

    {
        "version": "1.0",
        "saved_at": "2026-01-05T10:00:00Z",
        "messages": [
            {
                "notification_name": "alerts",
                "subject_suffix": "host1",
                "content": "disk at 95%",
                "date_sent": "2026-01-01T09:30:00Z"
            }
        ]
    }

The transient ``active`` flag of NotificationMessage is never written.
"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

from rgnotify.models.notification import NotificationMessage, utc_now

HISTORY_FORMAT_VERSION = "1.0"


class HistoryDocument(BaseModel):
    """Envelope for persisted notification records."""

    version: str = Field(default=HISTORY_FORMAT_VERSION)
    saved_at: datetime = Field(default_factory=utc_now)
    messages: List[NotificationMessage] = Field(default_factory=list)

    def get_message_count(self) -> int:
        """Number of records in the document."""
        return len(self.messages)
