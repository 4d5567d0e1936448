# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels understood by editor diagnostic surfaces."""

    ERROR = "error"
    WARNING = "warning"
    INFORMATION = "information"
    HINT = "hint"


_SEVERITY_TO_RICH_STYLE: Final[dict[Severity, str]] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
    Severity.HINT: "dim",
}


def severity_style(severity: Severity) -> str:
    """Map :class:`Severity` to the rich style used when rendering diagnostics.

    Args:
        severity: Severity value to translate.

    Returns:
        str: Rich style name; unknown values fall back to the warning style.
    """
    return _SEVERITY_TO_RICH_STYLE.get(severity, "yellow")


__all__ = ["Severity", "severity_style"]
