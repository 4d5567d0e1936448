# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic projection and publishing helpers."""

from __future__ import annotations

from .projection import build_diagnostics, to_diagnostic, token_range
from .store import CollectionDisposedError, DiagnosticCollection, publish

__all__ = [
    "CollectionDisposedError",
    "DiagnosticCollection",
    "build_diagnostics",
    "publish",
    "to_diagnostic",
    "token_range",
]
