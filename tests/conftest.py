# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from pyiwyu.core.logging import OutputLog

SAMPLE_REPORT = """\
src/main.cpp:6:3: warning: std::string is defined in <string>, which isn't directly #included.
src/main.cpp:9:11: warning: printf is defined in <cstdio>, which isn't directly #included.

src/main.cpp should add these lines:
#include <cstdio>  // for printf
#include <string>  // for string

src/main.cpp should remove these lines:
- #include <vector>  // lines 2-2
- #include "util.h"  // lines 3-4

The full include-list for src/main.cpp:
#include <cstdio>  // for printf
#include <string>  // for string
---
(src/util.h has correct #includes/fwd-decls)
"""

SAMPLE_SOURCE = """\
// main translation unit
#include <vector>
#include "util.h"

void run() {
  std::string name;
  (void)name;

  int x = printf("hi");
}
"""


class FakeRunner:
    """Command runner returning a canned report and recording invocations."""

    def __init__(self, report: str = "", *, error: Exception | None = None) -> None:
        self.report = report
        self.error = error
        self.calls: list[tuple[str, Path]] = []

    def __call__(self, command_line: str, working_directory: Path) -> str:
        self.calls.append((command_line, working_directory))
        if self.error is not None:
            raise self.error
        return self.report


class ManualTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.callback()


class ManualTimerFactory:
    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            timer.fire()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Return a workspace root holding ``src/main.cpp`` and ``src/util.h``."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "src" / "main.cpp").write_text(SAMPLE_SOURCE, encoding="utf-8")
    (root / "src" / "util.h").write_text("#pragma once\nint util();\n", encoding="utf-8")
    (root / "compile_commands.json").write_text("[]", encoding="utf-8")
    return root


@pytest.fixture
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture
def output_log() -> OutputLog:
    return OutputLog(Console(file=io.StringIO(), force_terminal=False, width=200))
