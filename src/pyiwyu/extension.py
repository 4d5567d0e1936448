# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire the analysis engine into an editor host.

Opening a supported document analyses it immediately (skipped when its text
was already analysed), saving schedules a debounced run, and the
``iwyu.analyzeFile`` command forces a run of the active document.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .analyzer import AnalysisEngine, Analyzer, TimerFactory, thread_timer
from .config import AnalyzerConfig
from .constants import ANALYZE_FILE_COMMAND, NO_ACTIVE_DOCUMENT_MESSAGE
from .core.logging import OutputLog
from .core.models import CodeAction, Diagnostic
from .fixes import provide_code_actions
from .interfaces.host import Disposable, EditorHost, HostDocument
from .process_utils import CommandRunner, SubprocessExecutionError
from .workspace import WorkspaceError

LOGGER = logging.getLogger(__name__)


class Extension:
    """Process-scoped plugin state owned by one host activation."""

    def __init__(
        self,
        host: EditorHost,
        *,
        config: AnalyzerConfig | None = None,
        runner: CommandRunner | None = None,
        log: OutputLog | None = None,
        timer_factory: TimerFactory = thread_timer,
    ) -> None:
        self.host = host
        self.config = config or AnalyzerConfig()
        self.log = log or OutputLog()
        self.engine = AnalysisEngine(
            config=self.config,
            roots=host.workspace_roots(),
            runner=runner,
            log=self.log,
            timer_factory=timer_factory,
        )
        self.subscriptions: list[Disposable] = []

    def activate(self) -> None:
        self.engine.initialize()
        self.subscriptions.extend(
            [
                self.host.register_code_action_provider(self.config.languages, self.provide_code_actions),
                self.host.register_command(ANALYZE_FILE_COMMAND, self.analyze_active_file),
                self.host.on_did_open(self.on_did_open),
                self.host.on_did_save(self.on_did_save),
            ],
        )

    def deactivate(self) -> None:
        subscriptions, self.subscriptions = self.subscriptions, []
        for subscription in subscriptions:
            subscription.dispose()
        self.engine.finalize()

    def analyze_active_file(self) -> bool:
        """Force a run of the active document; report failures to the user."""
        document = self.host.active_document()
        if document is None:
            self.host.show_error_message(NO_ACTIVE_DOCUMENT_MESSAGE)
            return False
        try:
            return self._analyzer(document).run(force=True)
        except (WorkspaceError, SubprocessExecutionError) as exc:
            self._report(exc)
            return False

    def on_did_open(self, document: HostDocument) -> None:
        if not self.supports(document):
            return
        try:
            self._analyzer(document).run(force=False)
        except WorkspaceError as exc:
            LOGGER.warning("%s", exc)
        except SubprocessExecutionError as exc:
            self._report(exc)

    def on_did_save(self, document: HostDocument) -> None:
        if not self.supports(document):
            return
        try:
            analyzer = self._analyzer(document)
        except WorkspaceError as exc:
            LOGGER.warning("%s", exc)
            return
        analyzer.run_after_delay(self.config.save_delay, on_error=self._report)

    def provide_code_actions(self, document: HostDocument, diagnostics: Sequence[Diagnostic]) -> list[CodeAction]:
        return provide_code_actions(document, diagnostics)

    def supports(self, document: HostDocument) -> bool:
        language = document.language_id or self.config.language_for(document.path)
        return self.config.supports(language)

    def _analyzer(self, document: HostDocument) -> Analyzer:
        self.engine.set_roots(self.host.workspace_roots())
        return self.engine.get_for(document)

    def _report(self, error: Exception) -> None:
        self.log.error(error)
        self.host.show_error_message(f"IWYU error: {error}")


def activate(
    host: EditorHost,
    *,
    config: AnalyzerConfig | None = None,
    runner: CommandRunner | None = None,
    log: OutputLog | None = None,
    timer_factory: TimerFactory = thread_timer,
) -> Extension:
    """Create, activate and return the extension state for ``host``."""

    extension = Extension(host, config=config, runner=runner, log=log, timer_factory=timer_factory)
    extension.activate()
    return extension


def deactivate(extension: Extension) -> None:
    """Tear down ``extension``; a later :func:`activate` starts from scratch."""

    extension.deactivate()


__all__ = ["Extension", "activate", "deactivate"]
