"""A switchable text logger that writes to any stream."""

from __future__ import annotations

import sys
from typing import Any, TextIO


class Logger:
    """Writes text to a printer stream unless logging is disabled."""

    def __init__(self, printer: TextIO | None = None) -> None:
        self._logging_enabled = True
        self._printer = printer

    @property
    def enabled(self) -> bool:
        return self._logging_enabled

    @property
    def printer(self) -> TextIO:
        return self._printer if self._printer is not None else sys.stdout

    def set_logging(self, enable: bool) -> None:
        self._logging_enabled = enable

    def set_printer(self, printer: TextIO) -> None:
        self._printer = printer

    def write(self, data: str) -> int:
        """Write ``data`` and return the number of characters written."""
        if not self._logging_enabled:
            return 0
        written = self.printer.write(data)
        return len(data) if written is None else written

    def line(self, *args: Any) -> int:
        """Write each argument as text, then a newline."""
        return self.write("".join(str(arg) for arg in args) + "\n")