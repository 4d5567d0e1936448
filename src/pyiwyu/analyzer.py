# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-document run scheduling for the include analysis pipeline.

Each open document gets one :class:`Analyzer` holding its run state: the
fingerprint of the text last analysed successfully and at most one pending
debounce timer. Runs of one document are serialised; runs of different
documents may overlap and only meet in the shared diagnostic collection.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Protocol

from .config import AnalyzerConfig
from .core.logging import OutputLog
from .diagnostics.projection import build_diagnostics
from .diagnostics.store import DiagnosticCollection, publish
from .parsers.iwyu import ParseResult, parse_report
from .process_utils import CommandRunner, SubprocessRunner
from .workspace import build_iwyu_command, file_identity, resolve_workspace_root

LOGGER = logging.getLogger(__name__)


class AnalyzedDocument(Protocol):
    """Document surface the scheduler needs: identity and current text."""

    path: Path

    @property
    def text(self) -> str: ...


class TimerHandle(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]
ErrorHandler = Callable[[Exception], None]


def thread_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    """Return a daemon :class:`threading.Timer` so pending runs never block exit."""

    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


def fingerprint(text: str) -> str:
    """Return the content fingerprint used to skip redundant runs."""

    return hashlib.sha256(text.encode("utf-8", errors="surrogatepass")).hexdigest()


@dataclass(slots=True)
class RunState:
    """Mutable scheduling state of one document."""

    last_seen_fingerprint: str | None = None
    pending_timer: TimerHandle | None = None
    completed_runs: int = 0


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Summary of one completed pipeline run."""

    path: Path
    command: str
    result: ParseResult
    published: tuple[Path, ...]
    duration: float


class Analyzer:
    """Run scheduler for a single document."""

    def __init__(self, document: AnalyzedDocument, root: Path, engine: AnalysisEngine) -> None:
        self.document = document
        self.root = root
        self.path = file_identity(document.path)
        self.state = RunState()
        self.last_outcome: RunOutcome | None = None
        self._engine = engine
        self._run_lock = threading.Lock()
        self._timer_lock = threading.Lock()
        self._generation = 0

    @property
    def pending(self) -> bool:
        """Return ``True`` while a delayed run is waiting for its timer."""
        with self._timer_lock:
            return self.state.pending_timer is not None

    def run(self, force: bool = False) -> bool:
        """Analyse the document now unless its text is unchanged.

        An immediate request supersedes any pending delayed run.

        Args:
            force: Run even when the text matches the last analysed revision.

        Returns:
            bool: ``True`` when the pipeline ran, ``False`` when it was skipped.

        Raises:
            SubprocessExecutionError: If the external tool fails; the
                fingerprint is left untouched so the next trigger retries.
        """

        self.cancel_pending()
        return self._run(force)

    def run_after_delay(self, delay: float, *, on_error: ErrorHandler | None = None) -> TimerHandle:
        """Schedule ``run(force=False)`` after ``delay`` seconds.

        A previous pending request for this document is cancelled, so a burst
        of calls results in a single trailing run. Failures of the delayed run
        are passed to ``on_error`` (or logged when it is ``None``).
        """

        with self._timer_lock:
            previous = self.state.pending_timer
            if previous is not None:
                previous.cancel()
            self._generation += 1
            timer = self._engine.timer_factory(delay, partial(self._fire, self._generation, on_error))
            self.state.pending_timer = timer
        timer.start()
        return timer

    def cancel_pending(self) -> bool:
        """Cancel the pending delayed run; return ``True`` when one existed."""
        with self._timer_lock:
            timer = self.state.pending_timer
            self.state.pending_timer = None
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self, generation: int, on_error: ErrorHandler | None) -> None:
        with self._timer_lock:
            # A superseded timer may still fire after cancel(); only the latest one runs.
            if self.state.pending_timer is None or generation != self._generation:
                return
            self.state.pending_timer = None
        try:
            self._run(False)
        except Exception as exc:  # noqa: BLE001 - delayed runs have no awaiting caller
            if on_error is None:
                LOGGER.exception("delayed analysis of %s failed", self.path)
            else:
                on_error(exc)

    def _run(self, force: bool) -> bool:
        with self._run_lock:
            text = self.document.text
            digest = fingerprint(text)
            if not force and digest == self.state.last_seen_fingerprint:
                LOGGER.debug("skipping analysis of %s: text unchanged since last run", self.path)
                return False
            self.last_outcome = self._engine.analyze(self, text)
            self.state.last_seen_fingerprint = digest
            self.state.completed_runs += 1
            return True


class AnalysisEngine:
    """Registry of per-document analyzers sharing one diagnostic collection.

    ``initialize`` and ``finalize`` mirror a host's activate/deactivate
    cycle: initialising twice is a no-op and finalising drops every
    analyzer and the collection so the next ``initialize`` starts fresh.
    """

    def __init__(
        self,
        *,
        config: AnalyzerConfig | None = None,
        roots: Iterable[Path] = (),
        runner: CommandRunner | None = None,
        log: OutputLog | None = None,
        timer_factory: TimerFactory = thread_timer,
        collection_factory: Callable[[], DiagnosticCollection] = DiagnosticCollection,
    ) -> None:
        self.config = config or AnalyzerConfig()
        self.roots = [file_identity(root) for root in roots]
        self.runner: CommandRunner = runner or SubprocessRunner(timeout=self.config.timeout)
        self.log = log
        self.timer_factory = timer_factory
        self._collection_factory = collection_factory
        self._collection: DiagnosticCollection | None = None
        self._analyzers: dict[Path, Analyzer] = {}
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._collection is not None

    @property
    def collection(self) -> DiagnosticCollection:
        """Return the diagnostic collection, initialising it on first use."""
        return self.initialize()

    def initialize(self) -> DiagnosticCollection:
        with self._lock:
            if self._collection is None:
                self._collection = self._collection_factory()
            return self._collection

    def finalize(self) -> None:
        with self._lock:
            analyzers = list(self._analyzers.values())
            self._analyzers.clear()
            collection, self._collection = self._collection, None
        for analyzer in analyzers:
            analyzer.cancel_pending()
        if collection is not None:
            collection.dispose()

    def set_roots(self, roots: Iterable[Path]) -> None:
        """Replace the workspace roots used for documents seen from now on."""
        with self._lock:
            self.roots = [file_identity(root) for root in roots]

    def get_for(self, document: AnalyzedDocument) -> Analyzer:
        """Return the analyzer of ``document``, creating it on first reference.

        Raises:
            WorkspaceError: If the document lies outside every workspace root.
        """

        path = file_identity(document.path)
        with self._lock:
            analyzer = self._analyzers.get(path)
            if analyzer is None:
                analyzer = Analyzer(document, resolve_workspace_root(path, self.roots), self)
                self._analyzers[path] = analyzer
            else:
                analyzer.document = document
            return analyzer

    def lookup(self, path: Path) -> Analyzer | None:
        with self._lock:
            return self._analyzers.get(file_identity(path))

    def analyzers(self) -> list[Analyzer]:
        with self._lock:
            return list(self._analyzers.values())

    def analyze(self, analyzer: Analyzer, text: str) -> RunOutcome:
        """Run the tool for ``analyzer``'s document and publish the findings."""

        command = build_iwyu_command(self.config, analyzer.root, analyzer.path)
        LOGGER.debug("analysing path=%s command=%s", analyzer.path, command)
        started = time.monotonic()
        if self.log is not None:
            self.log.append_line(f"$ {command}")
            with self.log.spinner():
                stdout = self.runner(command, analyzer.root)
        else:
            stdout = self.runner(command, analyzer.root)
        result = parse_report(stdout, root=analyzer.root, current_file=analyzer.path)
        diagnostics = build_diagnostics(result, self._sources(result, analyzer, text))
        published = publish(self.collection, diagnostics)
        duration = time.monotonic() - started
        LOGGER.debug("analysed path=%s files=%d seconds=%.3f", analyzer.path, len(published), duration)
        return RunOutcome(
            path=analyzer.path,
            command=command,
            result=result,
            published=tuple(published),
            duration=duration,
        )

    def _sources(self, result: ParseResult, analyzer: Analyzer, text: str) -> Mapping[Path, str]:
        sources = {analyzer.path: text}
        for path in result.files:
            if path in sources:
                continue
            other = self.lookup(path)
            if other is not None:
                sources[path] = other.document.text
        return sources


__all__ = [
    "AnalysisEngine",
    "AnalyzedDocument",
    "Analyzer",
    "RunOutcome",
    "RunState",
    "TimerFactory",
    "fingerprint",
    "thread_timer",
]
