# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for include analysis reports and C-family source tokens."""

from __future__ import annotations

from .iwyu import ParseResult, ReportParser, ReportState, parse_report
from .tokens import TOKEN_GRAMMARS, match_token

__all__ = [
    "ParseResult",
    "ReportParser",
    "ReportState",
    "TOKEN_GRAMMARS",
    "match_token",
    "parse_report",
]
