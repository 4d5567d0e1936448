# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import shlex
import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution, normalising arguments and disabling ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

LOGGER = logging.getLogger(__name__)

TIMEOUT_RETURNCODE: Final[int] = 124
NOT_FOUND_RETURNCODE: Final[int] = 127


class SubprocessExecutionError(RuntimeError):
    """Raised when a command cannot be spawned or exits with a non-zero status.

    The message joins the exit error with the captured stdout and stderr so a
    single log entry carries everything needed to diagnose the failure.
    """

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
        *,
        reason: str | None = None,
    ) -> None:
        head = reason or f"Command '{command[0] if command else '<empty>'}' exited with status {returncode}"
        super().__init__(f"{head}.\n\n{stdout or ''}\n\n{stderr or ''}\n")
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class CommandRunner(Protocol):
    """Execute one command line inside ``working_directory`` and return stdout."""

    def __call__(self, command_line: str, working_directory: Path) -> str: ...


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _ensure_text(value: str | bytes | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def run_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute *args* after normalising the executable path.

    Output is always captured as text and stdin is detached.

    Raises:
        SubprocessExecutionError: When ``check`` is true and the command exits
            non-zero or times out, or when the executable cannot be spawned.
    """
    try:
        normalized = _normalize_args(args)
    except FileNotFoundError as exc:
        raise SubprocessExecutionError(args, NOT_FOUND_RETURNCODE, None, None, reason=str(exc)) from exc

    try:
        # Bandit: argument lists are passed directly without shell expansion.
        completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout) or ""
        stderr = _ensure_text(exc.stderr)
        timeout_msg = f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"
        combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_RETURNCODE,
            stdout=stdout,
            stderr=combined_stderr,
        )
    except OSError as exc:
        raise SubprocessExecutionError(normalized, NOT_FOUND_RETURNCODE, None, None, reason=str(exc)) from exc

    if check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


class SubprocessRunner:
    """Default :class:`CommandRunner` splitting the command line with :mod:`shlex`."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    def __call__(self, command_line: str, working_directory: Path) -> str:
        LOGGER.debug("running command=%s cwd=%s", command_line, working_directory)
        try:
            args = shlex.split(command_line)
        except ValueError as exc:
            raise SubprocessExecutionError((command_line,), NOT_FOUND_RETURNCODE, None, None, reason=str(exc)) from exc
        completed = run_command(args, cwd=working_directory, timeout=self.timeout)
        return completed.stdout or ""


def execute(command_line: str, working_directory: Path, *, timeout: float | None = None) -> str:
    """Run ``command_line`` in ``working_directory`` and return captured stdout."""

    return SubprocessRunner(timeout=timeout)(command_line, working_directory)


__all__ = [
    "CommandRunner",
    "SubprocessExecutionError",
    "SubprocessRunner",
    "execute",
    "run_command",
]
