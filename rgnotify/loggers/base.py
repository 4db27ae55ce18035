"""Common formatting and filtering for log sinks.

Every sink derives from BaseLogger, which handles:
- Level filtering (LogLevel)
- Line-ending normalization
- Timestamp and level prefix

Subclasses implement write_to_log() to deliver the formatted line.
"""

import os
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import IntEnum
from typing import Optional

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Longest separators first so "\r\n" is not split into two line breaks
_LINE_ENDINGS = re.compile(r"\n\r|\r\n|\n|\r")


class LogLevel(IntEnum):
    """Logging detail levels.

    NONE matches nothing and ALL matches everything; the remaining levels
    increase in verbosity.
    """

    NONE = 0
    ALL = 1
    FATAL = 2
    WARN = 3
    INFO = 4
    DEBUG = 5


class BaseLogger(ABC):
    """Base class for log sinks with consistent formatting and filtering.

    Attributes:
        level: Most verbose level written by this sink.
        timestamp_format: strftime format; empty disables the timestamp.
        timestamp_in_utc: Use UTC instead of local time.
        keep_line_endings: Leave line endings in messages untouched.
        line_ending: Line ending used when normalizing.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.DEBUG,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        timestamp_in_utc: bool = False,
        keep_line_endings: bool = False,
        line_ending: str = os.linesep,
    ) -> None:
        self.level = level
        self.timestamp_format = timestamp_format
        self.timestamp_in_utc = timestamp_in_utc
        self.keep_line_endings = keep_line_endings
        self.line_ending = line_ending

    def write(self, message: str, level: Optional[LogLevel] = None) -> None:
        """Write a message if its level passes the sink's level.

        Args:
            message: Message text.
            level: Message level. Defaults to the sink's own level.
        """
        message_level = self.level if level is None else level
        if not self.accepts(message_level):
            return

        if not self.keep_line_endings:
            message = self.fix_line_endings(message)

        prefix = self.message_prefix(message_level)
        self.write_to_log(f"{prefix} {message}" if prefix else message)

    def accepts(self, message_level: LogLevel) -> bool:
        """Check whether a message level passes this sink's level."""
        if self.level == LogLevel.NONE or message_level == LogLevel.NONE:
            return False
        return self.level == LogLevel.ALL or message_level <= self.level

    def message_prefix(self, message_level: LogLevel) -> str:
        """Timestamp and level tag; ALL messages carry no tag."""
        tag = "" if message_level == LogLevel.ALL else f"[{message_level.name}]"
        return " ".join(part for part in (self.current_timestamp(), tag) if part)

    def current_timestamp(self) -> str:
        if not self.timestamp_format:
            return ""
        now = datetime.now(timezone.utc) if self.timestamp_in_utc else datetime.now()
        return now.strftime(self.timestamp_format)

    def fix_line_endings(self, text: str) -> str:
        """Replace every line ending in text with line_ending."""
        return _LINE_ENDINGS.sub(lambda _: self.line_ending, text)

    @abstractmethod
    def write_to_log(self, message: str) -> None:
        """Deliver a fully formatted log line."""
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "BaseLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
