# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocols describing the editor host the engine plugs into."""

from __future__ import annotations

from .host import Disposable, EditorHost, HostDocument

__all__ = ["Disposable", "EditorHost", "HostDocument"]
