"""Persistent history of sent notifications.

Loads the history file on first use and writes back only the records
still marked active, so the file acts as a continuously pruned log.
Saves are atomic (temporary file + replace).

The store assumes exclusive ownership of its file between load() and
save(); sharing one history file between live processes is unsupported.
"""

import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence
import structlog
from pydantic import ValidationError

from rgnotify.models.config import DEFAULT_HISTORY_FILE
from rgnotify.models.history import HistoryDocument
from rgnotify.models.notification import NotificationMessage, utc_now
from rgnotify.observability.metrics import (
    HISTORY_CORRUPT_LOADS,
    HISTORY_RECORDS,
    HISTORY_SAVES,
)
from rgnotify.utils.exceptions import HistoryCorruptError, HistoryNotLoadedError

logger = structlog.get_logger()


class HistoryState(str, Enum):
    """Lifecycle of a HistoryStore."""

    UNLOADED = "unloaded"
    LOADED = "loaded"


class HistoryStore:
    """Loads and saves the notification history file.

    Attributes:
        path: Location of the history file.
        fail_on_corrupt: Raise HistoryCorruptError for unreadable files
            instead of backing them up and starting empty.
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        fail_on_corrupt: bool = False,
    ) -> None:
        self.path = Path(path) if path is not None else DEFAULT_HISTORY_FILE
        self.fail_on_corrupt = fail_on_corrupt
        self._records: Optional[List[NotificationMessage]] = None

    @property
    def state(self) -> HistoryState:
        """Current lifecycle state."""
        if self._records is None:
            return HistoryState.UNLOADED
        return HistoryState.LOADED

    @property
    def backup_path(self) -> Path:
        """Where a corrupt history file is moved aside."""
        return self.path.with_name(self.path.name + ".corrupt")

    def load(self) -> List[NotificationMessage]:
        """Load history from disk.

        The first call reads the file; later calls return the same list.
        A missing file yields an empty history. Loaded records start
        inactive.

        Returns:
            The in-memory history list (mutable, owned by the caller's
            Notifier for the rest of its lifetime).

        Raises:
            HistoryCorruptError: If the file cannot be parsed and
                fail_on_corrupt is set.
        """
        if self._records is not None:
            return self._records

        if not self.path.exists():
            logger.info("history_not_found", path=str(self.path))
            self._records = []
            return self._records

        try:
            raw = self.path.read_text(encoding="utf-8")
            document = HistoryDocument.model_validate_json(raw)
        except (ValidationError, UnicodeDecodeError) as e:
            self._records = self._handle_corrupt(e)
            return self._records

        self._records = list(document.messages)
        for record in self._records:
            record.active = False

        logger.info(
            "history_loaded",
            path=str(self.path),
            records=len(self._records),
            version=document.version,
        )
        return self._records

    def _handle_corrupt(self, error: Exception) -> List[NotificationMessage]:
        """Apply the corruption policy for an unreadable history file."""
        HISTORY_CORRUPT_LOADS.inc()
        logger.error(
            "history_corrupt",
            path=str(self.path),
            error=str(error)[:200],
            fail_on_corrupt=self.fail_on_corrupt,
        )

        if self.fail_on_corrupt:
            raise HistoryCorruptError(str(self.path), str(error)[:200]) from error

        # Keep the bad file for inspection and start fresh
        os.replace(self.path, self.backup_path)
        logger.warning("history_backed_up", backup=str(self.backup_path))
        return []

    def save(self, records: Sequence[NotificationMessage]) -> bool:
        """Persist exactly the given records, replacing the file.

        Args:
            records: Records to write.

        Returns:
            True if the save succeeded, False on an I/O error.

        Raises:
            HistoryNotLoadedError: If load() has not been called.
        """
        if self._records is None:
            raise HistoryNotLoadedError(
                f"History must be loaded before it is saved: {self.path}"
            )

        document = HistoryDocument(saved_at=utc_now(), messages=list(records))

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}_",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document.model_dump_json(indent=2))
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_path, self.path)

        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            HISTORY_SAVES.labels(status="failed").inc()
            logger.error("history_save_error", path=str(self.path), error=str(e))
            return False

        HISTORY_SAVES.labels(status="success").inc()
        HISTORY_RECORDS.set(document.get_message_count())
        logger.debug(
            "history_saved",
            path=str(self.path),
            records=document.get_message_count(),
        )
        return True
