"""Counting errors and panics in node and client logs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, TextIO

from . import display

_ERROR_MARKER = " ERROR"
_PANIC_MARKER = "panic"


@dataclass(eq=True)
class LogsAnalyzer:
    """Summary of errors found in log files.

    An analyzer compares as greater than another when it saw a panic or
    more errors; otherwise it compares as less (never as equal).
    """

    node_errors: int = 0
    node_panic: bool = False
    client_errors: int = 0
    client_panic: bool = False

    def _is_greater(self, other: "LogsAnalyzer") -> bool:
        return (
            self.node_panic
            or self.client_panic
            or self.client_errors > other.client_errors
            or self.node_errors > other.node_errors
        )

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogsAnalyzer):
            return NotImplemented
        return self._is_greater(other)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogsAnalyzer):
            return NotImplemented
        return not self._is_greater(other)

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogsAnalyzer):
            return NotImplemented
        return self._is_greater(other)

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogsAnalyzer):
            return NotImplemented
        return not self._is_greater(other)

    def set_node_errors(self, log: str) -> None:
        """Deduce the node error count and panic flag from a node log."""
        self.node_errors = log.count(_ERROR_MARKER)
        self.node_panic = _PANIC_MARKER in log

    def set_client_errors(self, log: str) -> None:
        """Deduce client errors from a client log, keeping the highest count seen."""
        self.client_errors = max(self.client_errors, log.count(_ERROR_MARKER))
        self.client_panic = _PANIC_MARKER in log

    def print_summary(self, stream: Optional[TextIO] = None) -> None:
        """Print a summary of the errors, if any."""
        if self.node_panic:
            display.error("Node(s) panicked!", stream=stream)
        elif self.client_panic:
            display.error("Client(s) panicked!", stream=stream)
        elif self.node_errors != 0 or self.client_errors != 0:
            display.newline(stream=stream)
            display.warn(
                f"Logs contain errors (node: {self.node_errors}, "
                f"client: {self.client_errors})",
                stream=stream,
            )