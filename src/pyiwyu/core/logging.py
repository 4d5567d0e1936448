# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

from rich.console import Console
from rich.status import Status
from rich.text import Text

from ..constants import OUTPUT_CHANNEL_NAME
from ..runtime.console import detect_tty, get_console_manager


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(
    msg: str,
    *,
    style: str | None,
    use_emoji: bool,
    use_color: bool | None = None,
) -> None:
    """Render ``msg`` to the console using shared styling helpers.

    Args:
        msg: Message text to print to the console.
        style: Rich style name to apply when colour output is active.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="bold red", use_emoji=use_emoji, use_color=use_color)


class OutputLog:
    """Append-only output channel with a shared "analysis running" indicator.

    The spinner is reference counted: overlapping runs keep a single status
    line alive until the last of them finishes.
    """

    def __init__(self, console: Console | None = None, *, name: str = OUTPUT_CHANNEL_NAME) -> None:
        self.name = name
        self.visible = False
        self._console = console if console is not None else get_console_manager().get(color=True, emoji=True)
        self._lock = Lock()
        self._spin_count = 0
        self._status: Status | None = None

    @property
    def console(self) -> Console:
        return self._console

    @property
    def busy(self) -> bool:
        """Return ``True`` while at least one spinner scope is active."""
        with self._lock:
            return self._spin_count > 0

    def show(self) -> None:
        self.visible = True

    def append(self, lines: str) -> None:
        self._console.print(lines, end="", markup=False, highlight=False)

    def append_line(self, line: str) -> None:
        self._console.print(line, markup=False, highlight=False)

    def show_and_append_line(self, line: str) -> None:
        self.show()
        self.append_line(line)

    def error(self, error: BaseException) -> None:
        """Record ``error`` with its traceback."""
        trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.append(f"ERROR: {error}\n\n{trace}\n")

    @contextmanager
    def spinner(self) -> Iterator[None]:
        """Show the status indicator for the duration of the ``with`` block."""
        with self._lock:
            self._spin_count += 1
            if self._status is None:
                self._status = self._console.status(f"{self.name} analysis running")
                self._status.start()
        try:
            yield
        finally:
            with self._lock:
                self._spin_count -= 1
                if not self._spin_count and self._status is not None:
                    self._status.stop()
                    self._status = None


__all__ = [
    "OutputLog",
    "emoji",
    "fail",
    "info",
    "ok",
    "warn",
]
