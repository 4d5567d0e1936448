# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Editor host interfaces consumed by the extension wiring."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..core.models import CodeAction, Diagnostic


@runtime_checkable
class Disposable(Protocol):
    """Handle returned by registrations; disposing it unregisters."""

    def dispose(self) -> None:
        """Release the registration."""

        raise NotImplementedError


@runtime_checkable
class HostDocument(Protocol):
    """Open document as exposed by the editor."""

    path: Path
    language_id: str | None

    @property
    def text(self) -> str:
        """Return the current document text."""

        raise NotImplementedError


DocumentListener = Callable[[HostDocument], None]
CommandCallback = Callable[[], object]
CodeActionProvider = Callable[[HostDocument, Sequence[Diagnostic]], list[CodeAction]]


@runtime_checkable
class EditorHost(Protocol):
    """Plugin host surface: workspace, events, commands and user messages."""

    def workspace_roots(self) -> Sequence[Path]:
        """Return the currently open workspace folders."""

        raise NotImplementedError

    def active_document(self) -> HostDocument | None:
        """Return the document of the focused editor, if any."""

        raise NotImplementedError

    def show_error_message(self, message: str) -> None:
        """Present ``message`` to the user."""

        raise NotImplementedError

    def register_command(self, name: str, callback: CommandCallback) -> Disposable:
        """Register a user-invocable command."""

        raise NotImplementedError

    def register_code_action_provider(self, languages: Sequence[str], provider: CodeActionProvider) -> Disposable:
        """Register a quick fix provider for ``languages``."""

        raise NotImplementedError

    def on_did_open(self, listener: DocumentListener) -> Disposable:
        """Subscribe to document-opened events."""

        raise NotImplementedError

    def on_did_save(self, listener: DocumentListener) -> Disposable:
        """Subscribe to document-saved events."""

        raise NotImplementedError


__all__ = [
    "CodeActionProvider",
    "CommandCallback",
    "Disposable",
    "DocumentListener",
    "EditorHost",
    "HostDocument",
]
