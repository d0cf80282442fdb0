"""
The report log: plain timestamped text lines written to a file and the console.

Every component that reports on message processing receives a LineSink
explicitly instead of reaching for a global logger. The production sink,
DualSinkLog, is opened once at startup and closed on shutdown.
"""

import logging
import sys
from typing import Optional, Protocol, TextIO

from .config import SERVICE_NAME

LINE_FORMAT = "%(asctime)s %(message)s"
DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


class LineSink(Protocol):
    """Accepts one formatted report line at a time."""

    def log_line(self, text: str) -> None: ...


class DualSinkLog:
    """
    Writes identical timestamped lines to an append-only file and a console stream.

    There is no rotation and no structured output. Opening the file happens in
    the constructor, so an unwritable path fails at startup.

    Args:
        path: The log file to append to. Created if it does not exist.
        stream: The console stream. Defaults to stdout.
    """

    def __init__(self, path: str, stream: Optional[TextIO] = None) -> None:
        formatter = logging.Formatter(LINE_FORMAT, datefmt=DATE_FORMAT)
        self._file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        self._console_handler = logging.StreamHandler(stream or sys.stdout)
        # A standalone logger: not registered with the logging manager, no propagation.
        self._logger = logging.Logger(f"{SERVICE_NAME}.report", level=logging.INFO)
        for handler in (self._file_handler, self._console_handler):
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def log_line(self, text: str) -> None:
        self._logger.info(text)

    def close(self) -> None:
        for handler in (self._file_handler, self._console_handler):
            self._logger.removeHandler(handler)
            handler.flush()
        self._file_handler.close()

    def __enter__(self) -> "DualSinkLog":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
