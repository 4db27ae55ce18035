"""Console log sink."""

import sys
from enum import Flag, auto

from rgnotify.loggers.base import BaseLogger, LogLevel


class ConsoleOutput(Flag):
    """Console streams a ConsoleLogger writes to."""

    STDOUT = auto()
    STDERR = auto()


class ConsoleLogger(BaseLogger):
    """Writes log lines to standard output and/or standard error."""

    def __init__(
        self,
        level: LogLevel = LogLevel.DEBUG,
        output: ConsoleOutput = ConsoleOutput.STDOUT,
        **kwargs,
    ) -> None:
        kwargs.setdefault("line_ending", "\n")
        super().__init__(level=level, **kwargs)
        self.output = output

    def write_to_log(self, message: str) -> None:
        # Streams are looked up per call so redirected sys.stdout is honoured
        if ConsoleOutput.STDOUT in self.output:
            sys.stdout.write(message + "\n")
        if ConsoleOutput.STDERR in self.output:
            sys.stderr.write(message + "\n")
