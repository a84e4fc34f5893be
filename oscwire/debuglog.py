"""Small leveled logger that writes delimited values to a text stream."""

from __future__ import annotations

import inspect
import os
import sys
from enum import IntEnum
from functools import lru_cache
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Verbosity levels; a message is shown when its level is at or below the manager's."""

    NONE = 0
    ERRORS = 1
    WARNINGS = 2
    VERBOSE = 3


DEFAULT_LEVEL = LogLevel.VERBOSE

_LABELS = {
    LogLevel.ERRORS: "[ERROR] ",
    LogLevel.WARNINGS: "[WARNING] ",
    LogLevel.VERBOSE: "[VERBOSE] ",
}


class LogManager:
    """Writes values and leveled log lines to a stream (standard output by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream
        self.level = DEFAULT_LEVEL
        self.enabled = True
        self._delim = " "
        self._show_file = True
        self._show_line = True
        self._show_func = True

    @property
    def _out(self) -> TextIO:
        return self.stream if self.stream is not None else sys.stdout

    def print(self, *args: Any) -> None:
        """Write the values separated by the delimiter, without a line end."""
        if args:
            self._out.write(self._delim.join(str(a) for a in args))

    def println(self, *args: Any) -> None:
        """Write the values separated by the delimiter, then a line end."""
        self.print(*args)
        self._out.write("\n")

    def log(self, level: LogLevel, file: str, line: int, func: str, *args: Any) -> None:
        """Write one log line with a header naming its level and origin."""
        level = LogLevel(level)
        if self.level == LogLevel.NONE or level == LogLevel.NONE:
            return
        if level > self.level:
            return
        header = _LABELS.get(level, "")
        if self._show_file:
            header += f"{file} "
        if self._show_line:
            header += f"L.{line} "
        if self._show_func:
            header += f"{func} "
        header += ": "
        self.print(header)
        self.println(*args)

    def _log_from_caller(self, level: LogLevel, args: tuple[Any, ...]) -> None:
        if not self.enabled:
            return
        frame = inspect.currentframe()
        caller = frame.f_back.f_back if frame and frame.f_back else None
        if caller is None:
            file, line, func = "?", 0, "?"
        else:
            file = os.path.basename(caller.f_code.co_filename)
            line = caller.f_lineno
            func = caller.f_code.co_name
        del frame, caller
        self.log(level, file, line, func, *args)

    def error(self, *args: Any) -> None:
        """Log at error level, naming the calling file, line and function."""
        self._log_from_caller(LogLevel.ERRORS, args)

    def warning(self, *args: Any) -> None:
        """Log at warning level, naming the calling file, line and function."""
        self._log_from_caller(LogLevel.WARNINGS, args)

    def verbose(self, *args: Any) -> None:
        """Log at verbose level, naming the calling file, line and function."""
        self._log_from_caller(LogLevel.VERBOSE, args)

    def option(self, en_file: bool, en_line: bool, en_func: bool) -> None:
        """Choose which origin fields appear in the log header."""
        self._show_file = bool(en_file)
        self._show_line = bool(en_line)
        self._show_func = bool(en_func)

    def delimiter(self, delim: str) -> None:
        """Set the text written between values."""
        self._delim = delim


@lru_cache(maxsize=None)
def get_manager() -> LogManager:
    """Return the shared process-wide log manager."""
    return LogManager()