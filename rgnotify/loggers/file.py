"""Text file log sink."""

from pathlib import Path
from typing import Optional, TextIO, Union
import structlog

from rgnotify.loggers.base import BaseLogger, LogLevel

logger = structlog.get_logger()


class FileLogger(BaseLogger):
    """Appends log lines to a text file.

    Attributes:
        path: Log file location.
        overwrite: Truncate the file on open instead of appending.
    """

    def __init__(
        self,
        path: Union[str, Path],
        level: LogLevel = LogLevel.DEBUG,
        overwrite: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(level=level, **kwargs)
        self.path = Path(path)
        self.overwrite = overwrite
        self._stream: Optional[TextIO] = None
        self.open()

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        """Open the log file if it is not already open."""
        if self._stream is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        mode = "w" if self.overwrite else "a"
        self._stream = open(self.path, mode, encoding="utf-8", newline="")
        logger.debug("file_logger_opened", path=str(self.path), mode=mode)

    def close(self) -> None:
        """Flush and close the log file."""
        if self._stream is None:
            return
        self._stream.flush()
        self._stream.close()
        self._stream = None

    def write_to_log(self, message: str) -> None:
        # Lines written after close() are dropped
        if self._stream is None:
            return
        self._stream.write(message + self.line_ending)
        self._stream.flush()
