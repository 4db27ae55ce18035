"""Log sinks sharing one formatting base.

Provides:
- ConsoleLogger: stdout/stderr
- FileLogger: text file
- EmailLogger / CumulativeEmailLogger: mail via a MailTransport
- CompoundLogger: fan-out to several sinks

Usage:
    from rgnotify.loggers import ConsoleLogger, LogLevel

    log = ConsoleLogger(level=LogLevel.INFO)
    log.write("service started", LogLevel.INFO)
"""

from rgnotify.loggers.base import BaseLogger, LogLevel
from rgnotify.loggers.compound import CompoundLogger
from rgnotify.loggers.console import ConsoleLogger, ConsoleOutput
from rgnotify.loggers.mail import CumulativeEmailLogger, EmailLogger
from rgnotify.loggers.file import FileLogger

__all__ = [
    "BaseLogger",
    "LogLevel",
    "CompoundLogger",
    "ConsoleLogger",
    "ConsoleOutput",
    "CumulativeEmailLogger",
    "EmailLogger",
    "FileLogger",
]
