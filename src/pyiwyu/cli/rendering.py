# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render diagnostics for terminal output."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from rich.console import Console
from rich.text import Text

from ..core.models import Diagnostic
from ..core.severity import severity_style


def display_path(path: Path, root: Path) -> str:
    """Return ``path`` relative to ``root`` when it lies inside it."""

    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def format_diagnostic(path: Path, root: Path, diagnostic: Diagnostic) -> Text:
    """Return one ``file:line:col: severity: message [source/code]`` line."""

    start = diagnostic.range.start
    location = f"{display_path(path, root)}:{start.line + 1}:{start.character + 1}"
    code = diagnostic.code.value if diagnostic.code is not None else "-"
    text = Text(f"{location}: ")
    text.append(diagnostic.severity.value, style=severity_style(diagnostic.severity))
    text.append(f": {diagnostic.message} ")
    text.append(f"[{diagnostic.source}/{code}]", style="dim")
    return text


def render_diagnostics(
    console: Console,
    root: Path,
    diagnostics_by_file: Mapping[Path, Sequence[Diagnostic]],
) -> int:
    """Print every diagnostic and return how many were printed."""

    count = 0
    for path, diagnostics in diagnostics_by_file.items():
        for diagnostic in diagnostics:
            console.print(format_diagnostic(path, root, diagnostic))
            count += 1
    return count


__all__ = ["display_path", "format_diagnostic", "render_diagnostics"]
