# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI behaviour tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from conftest import SAMPLE_REPORT, SAMPLE_SOURCE, FakeRunner
from rich.console import Console
from typer.testing import CliRunner

from pyiwyu.cli.app import app, run_analysis
from pyiwyu.cli.shared import EXIT_CLEAN, EXIT_ERROR, EXIT_FINDINGS, CLIError, CLILogger
from pyiwyu.process_utils import SubprocessExecutionError


def _logger() -> CLILogger:
    console = Console(file=io.StringIO(), width=200, soft_wrap=True, no_color=True)
    return CLILogger(console=console, use_emoji=False, use_color=False)


def _rendered(logger: CLILogger) -> str:
    return logger.console.file.getvalue()


def test_parse_command_prints_diagnostics(workspace: Path) -> None:
    report = workspace / "report.txt"
    report.write_text(SAMPLE_REPORT, encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "parse",
            str(report),
            "--root",
            str(workspace),
            "--source",
            str(workspace / "src" / "main.cpp"),
            "--no-emoji",
            "--no-color",
        ],
    )

    assert result.exit_code == EXIT_FINDINGS
    assert (
        "src/main.cpp:6:3: warning: std::string is defined in <string>, which isn't directly #included. [iwyu/add]"
        in result.output
    )
    assert "src/main.cpp:2:1: warning: Unused #include <vector>. [iwyu/remove]" in result.output
    assert "src/util.h has correct #includes" in result.output


def test_parse_command_reads_stdin(workspace: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["parse", "-", "--root", str(workspace), "--no-emoji"],
        input="(src/util.h has correct #includes/fwd-decls)\n",
    )

    assert result.exit_code == EXIT_CLEAN
    assert "src/util.h has correct #includes" in result.output


def test_parse_command_missing_report(workspace: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["parse", str(workspace / "absent.txt"), "--root", str(workspace), "--no-emoji"])

    assert result.exit_code == EXIT_ERROR
    assert "unable to read report" in result.output


def test_analyze_command_reports_missing_tool(workspace: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "analyze",
            str(workspace / "src" / "main.cpp"),
            "--root",
            str(workspace),
            "--executable",
            "pyiwyu-definitely-missing-tool",
            "--no-emoji",
        ],
    )

    assert result.exit_code == EXIT_ERROR
    assert "IWYU error:" in result.output
    assert "pyiwyu-definitely-missing-tool" in result.output


def test_analyze_command_rejects_file_outside_root(workspace: Path, tmp_path: Path) -> None:
    stray = tmp_path / "stray.cpp"
    stray.write_text("int x;\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["analyze", str(stray), "--root", str(workspace), "--no-emoji"])

    assert result.exit_code == EXIT_ERROR
    assert "open workspace" in result.output


def test_run_analysis_renders_findings(workspace: Path) -> None:
    logger = _logger()
    runner = FakeRunner(SAMPLE_REPORT)

    code = run_analysis(workspace / "src" / "main.cpp", root=workspace, fix=False, logger=logger, runner=runner)

    assert code == EXIT_FINDINGS
    lines = _rendered(logger).splitlines()
    assert len(lines) == 4
    assert lines[1].startswith("src/main.cpp:9:11: warning: printf is defined in <cstdio>")
    assert (workspace / "src" / "main.cpp").read_text(encoding="utf-8") == SAMPLE_SOURCE


def test_run_analysis_clean_file(workspace: Path) -> None:
    logger = _logger()
    runner = FakeRunner("(src/main.cpp has correct #includes/fwd-decls)\n")

    code = run_analysis(workspace / "src" / "main.cpp", root=workspace, fix=False, logger=logger, runner=runner)

    assert code == EXIT_CLEAN
    assert _rendered(logger) == ""


def test_run_analysis_applies_fixes(workspace: Path) -> None:
    logger = _logger()
    runner = FakeRunner(SAMPLE_REPORT)
    source = workspace / "src" / "main.cpp"

    code = run_analysis(source, root=workspace, fix=True, logger=logger, runner=runner)

    assert code == EXIT_CLEAN
    fixed = source.read_text(encoding="utf-8")
    assert fixed.startswith("// main translation unit\n\n#include <string>\n\n#include <cstdio>\n\nvoid run() {\n")
    assert "#include <vector>" not in fixed
    assert '#include "util.h"' not in fixed


def test_run_analysis_wraps_tool_failure(workspace: Path) -> None:
    runner = FakeRunner(error=SubprocessExecutionError(("iwyu_tool",), 1, "", "compile error"))

    with pytest.raises(CLIError, match="compile error") as excinfo:
        run_analysis(workspace / "src" / "main.cpp", root=workspace, fix=False, logger=_logger(), runner=runner)

    assert str(excinfo.value).startswith("IWYU error: ")
    assert excinfo.value.exit_code == EXIT_ERROR


def test_run_analysis_rejects_bad_config(workspace: Path) -> None:
    (workspace / ".pyiwyu.toml").write_text("save_delay = -1\n", encoding="utf-8")

    with pytest.raises(CLIError, match="invalid configuration"):
        run_analysis(
            workspace / "src" / "main.cpp",
            root=workspace,
            fix=False,
            logger=_logger(),
            runner=FakeRunner(""),
        )
