# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared rich consoles for status lines and the analysis output channel."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from functools import lru_cache

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class ConsoleSettings:
    """Presentation flags a console is built for."""

    color: bool
    emoji: bool
    tty: bool

    @property
    def ansi(self) -> bool:
        return self.color and self.tty


class RichConsoleManager:
    """Hand out one :class:`Console` per combination of presentation flags.

    Consoles never wrap long lines: diagnostics are ``file:line:col`` records
    that editors and terminals match by pattern.
    """

    def __init__(self) -> None:
        self._consoles: dict[ConsoleSettings, Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        settings = ConsoleSettings(color=color, emoji=emoji, tty=detect_tty())
        console = self._consoles.get(settings)
        if console is None:
            console = Console(
                color_system="auto" if settings.ansi else None,
                force_terminal=settings.tty,
                no_color=not settings.ansi,
                emoji=settings.emoji,
                soft_wrap=True,
            )
            self._consoles[settings] = console
        return console

    def clear(self) -> None:
        """Forget every console so the next request re-detects the terminal."""

        self._consoles.clear()


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = ["ConsoleSettings", "RichConsoleManager", "detect_tty", "get_console_manager"]
