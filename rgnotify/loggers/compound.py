"""Fan-out log sink."""

from typing import Iterable, Iterator, List, Optional

from rgnotify.loggers.base import BaseLogger, LogLevel


class CompoundLogger(BaseLogger):
    """Forwards every entry to several sinks.

    Each child applies its own level filter and formatting.
    """

    def __init__(self, loggers: Optional[Iterable[BaseLogger]] = None) -> None:
        super().__init__(level=LogLevel.ALL)
        self._loggers: List[BaseLogger] = list(loggers or [])

    def add(self, sink: BaseLogger) -> None:
        self._loggers.append(sink)

    def remove(self, sink: BaseLogger) -> None:
        self._loggers.remove(sink)

    def write(self, message: str, level: Optional[LogLevel] = None) -> None:
        for sink in self._loggers:
            sink.write(message, level)

    def write_to_log(self, message: str) -> None:
        for sink in self._loggers:
            sink.write_to_log(message)

    def close(self) -> None:
        for sink in self._loggers:
            sink.close()

    def __iter__(self) -> Iterator[BaseLogger]:
        return iter(self._loggers)

    def __len__(self) -> int:
        return len(self._loggers)
