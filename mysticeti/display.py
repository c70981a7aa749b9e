"""Styled progress output for the terminal."""

from __future__ import annotations

import sys
from typing import Any, Optional, TextIO

_BOLD = "\x1b[1m"
_GREEN = "\x1b[32m"
_RED = "\x1b[31m"
_RESET = "\x1b[0m"
_SAVE_POSITION = "\x1b7"
_RESTORE_POSITION = "\x1b8"
_CLEAR_UNTIL_NEWLINE = "\x1b[K"


def _emit(stream: Optional[TextIO], *parts: str) -> None:
    out = stream if stream is not None else sys.stdout
    out.write("".join(parts))
    out.flush()


def _styled(text: str, *codes: str) -> str:
    return "".join(codes) + text + _RESET


def header(message: Any, stream: Optional[TextIO] = None) -> None:
    """Print a green, bold section header."""
    _emit(stream, _styled(f"\n{message}\n", _GREEN, _BOLD))


def error(message: Any, stream: Optional[TextIO] = None) -> None:
    """Print a red, bold error message."""
    _emit(stream, _styled(f"\n{message}\n", _RED, _BOLD))


def warn(message: Any, stream: Optional[TextIO] = None) -> None:
    """Print a bold warning."""
    _emit(stream, _styled(f"\n{message}\n", _BOLD))


def config(name: Any, value: Any, stream: Optional[TextIO] = None) -> None:
    """Print a configuration entry as 'name: value'."""
    _emit(stream, _styled(f"{name}: ", _BOLD), f"{value}\n")


def action(message: Any, stream: Optional[TextIO] = None) -> None:
    """Announce an action whose status follows on the same line."""
    _emit(stream, f"{message} ... ", _SAVE_POSITION)


def status(text: Any, stream: Optional[TextIO] = None) -> None:
    """Replace the status of the current action."""
    _emit(
        stream,
        _RESTORE_POSITION,
        _SAVE_POSITION,
        _CLEAR_UNTIL_NEWLINE,
        f"[{text}]",
    )


def done(stream: Optional[TextIO] = None) -> None:
    """Mark the current action as successful."""
    _emit(
        stream,
        _RESTORE_POSITION,
        _CLEAR_UNTIL_NEWLINE,
        f"[{_styled('Ok', _GREEN)}]\n",
    )


def newline(stream: Optional[TextIO] = None) -> None:
    _emit(stream, "\n")