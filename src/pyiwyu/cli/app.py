# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from ..analyzer import AnalysisEngine
from ..config import AnalyzerConfig, ConfigError, load_config
from ..core.logging import OutputLog
from ..diagnostics.projection import build_diagnostics
from ..document import FileDocument
from ..fixes import merge_fix_edits, provide_code_actions
from ..parsers.iwyu import parse_report
from ..process_utils import CommandRunner, SubprocessExecutionError
from ..workspace import WorkspaceError, file_identity, resolve_workspace_root
from .rendering import display_path, render_diagnostics
from .shared import EXIT_CLEAN, EXIT_FINDINGS, CLIError, CLILogger, build_cli_logger

app = typer.Typer(
    name="pyiwyu",
    help="Include-what-you-use diagnostics and quick fixes for C-family sources.",
    no_args_is_help=True,
    add_completion=False,
)

FILE_ARGUMENT = Annotated[
    Path,
    typer.Argument(exists=True, dir_okay=False, help="Source file to analyse."),
]
REPORT_ARGUMENT = Annotated[
    str,
    typer.Argument(help="Saved tool report to parse, or '-' for stdin."),
]
ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", file_okay=False, help="Workspace root (defaults to the current directory)."),
]
SOURCE_OPTION = Annotated[
    Path | None,
    typer.Option("--source", "-s", dir_okay=False, help="Source text used to recover diagnostic spans."),
]
EXECUTABLE_OPTION = Annotated[
    str | None,
    typer.Option("--executable", help="Override the analysis tool executable."),
]
TIMEOUT_OPTION = Annotated[
    float | None,
    typer.Option("--timeout", min=0.001, help="Abort the tool after this many seconds."),
]
FIX_OPTION = Annotated[bool, typer.Option("--fix", help="Apply every available quick fix to the file.")]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]
COLOR_OPTION = Annotated[bool, typer.Option("--color/--no-color", help="Toggle coloured output.")]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Show debug logging.")]


def _root_for(path: Path, root: Path | None) -> Path:
    candidate = file_identity(root) if root is not None else Path.cwd()
    try:
        return resolve_workspace_root(path, [candidate])
    except WorkspaceError as exc:
        raise CLIError(str(exc)) from exc


def _load(root: Path, *, executable: str | None, timeout: float | None) -> AnalyzerConfig:
    try:
        return load_config(root, overrides={"executable": executable, "timeout": timeout})
    except ConfigError as exc:
        raise CLIError(str(exc)) from exc


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def run_analysis(
    file: Path,
    *,
    root: Path | None,
    fix: bool,
    logger: CLILogger,
    executable: str | None = None,
    timeout: float | None = None,
    runner: CommandRunner | None = None,
) -> int:
    """Analyse ``file`` once and return the process exit code.

    Raises:
        CLIError: For environment, configuration or tool failures.
    """

    path = file_identity(file)
    workspace = _root_for(path, root)
    config = _load(workspace, executable=executable, timeout=timeout)
    engine = AnalysisEngine(
        config=config,
        roots=[workspace],
        runner=runner,
        log=OutputLog(logger.console) if logger.debug_enabled else None,
    )
    engine.initialize()
    document = FileDocument(path, language_id=config.language_for(path))
    try:
        engine.get_for(document).run(force=True)
    except SubprocessExecutionError as exc:
        raise CLIError(f"IWYU error: {exc}") from exc

    published = engine.collection.snapshot()
    if fix:
        actions = provide_code_actions(document, published.get(path, ()))
        if actions:
            document.apply(merge_fix_edits(actions))
            logger.ok(f"Applied {len(actions)} fix(es) to {display_path(path, workspace)}")
        unfixed = {other: diags for other, diags in published.items() if other != path}
        count = render_diagnostics(logger.console, workspace, unfixed)
        engine.finalize()
        return EXIT_FINDINGS if count else EXIT_CLEAN

    count = render_diagnostics(logger.console, workspace, published)
    engine.finalize()
    if count:
        return EXIT_FINDINGS
    logger.ok(f"{display_path(path, workspace)} has correct #includes")
    return EXIT_CLEAN


def run_parse(report: str, *, root: Path | None, source: Path | None, logger: CLILogger) -> int:
    """Parse a saved report and return the process exit code."""

    workspace = file_identity(root) if root is not None else Path.cwd()
    try:
        report_text = sys.stdin.read() if report == "-" else Path(report).read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"unable to read report: {exc}") from exc
    current = file_identity(source) if source is not None else None
    sources: dict[Path, str] = {}
    if current is not None:
        try:
            sources[current] = current.read_text(encoding="utf-8")
        except OSError as exc:
            raise CLIError(f"unable to read source: {exc}") from exc
    result = parse_report(report_text, root=workspace, current_file=current)
    diagnostics = build_diagnostics(result, sources)
    count = render_diagnostics(logger.console, workspace, diagnostics)
    for path, entries in diagnostics.items():
        if not entries:
            logger.ok(f"{display_path(path, workspace)} has correct #includes")
    return EXIT_FINDINGS if count else EXIT_CLEAN


@app.command("analyze")
def analyze_command(
    file: FILE_ARGUMENT,
    root: ROOT_OPTION = None,
    fix: FIX_OPTION = False,
    executable: EXECUTABLE_OPTION = None,
    timeout: TIMEOUT_OPTION = None,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
    debug: DEBUG_OPTION = False,
) -> None:
    """Run the include analysis on FILE and print its diagnostics."""

    _configure_logging(debug)
    logger = build_cli_logger(emoji=emoji, debug=debug, no_color=not color)
    try:
        code = run_analysis(file, root=root, fix=fix, logger=logger, executable=executable, timeout=timeout)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


@app.command("parse")
def parse_command(
    report: REPORT_ARGUMENT,
    root: ROOT_OPTION = None,
    source: SOURCE_OPTION = None,
    emoji: EMOJI_OPTION = True,
    color: COLOR_OPTION = True,
) -> None:
    """Parse a saved tool REPORT and print the diagnostics it describes."""

    logger = build_cli_logger(emoji=emoji, no_color=not color)
    try:
        code = run_parse(report, root=root, source=source, logger=logger)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=code)


def main() -> None:
    app()


__all__ = ["app", "main", "run_analysis", "run_parse"]
