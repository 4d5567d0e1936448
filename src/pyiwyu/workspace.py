# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Utilities for reasoning about workspace roots and file identities."""

from __future__ import annotations

import os
import shlex
from collections.abc import Iterable
from os import PathLike
from pathlib import Path, PurePosixPath

from .config import AnalyzerConfig

_Pathish = str | PathLike[str]


class WorkspaceError(RuntimeError):
    """Raised when a document does not belong to any known workspace root."""


def file_identity(path: _Pathish, *, base_dir: _Pathish | None = None) -> Path:
    """Return the absolute, lexically normalised identity of ``path``.

    Relative paths are anchored at ``base_dir`` (``Path.cwd()`` when omitted).
    Symlinks are not followed so the result is stable for files that do not
    exist yet.
    """

    raw = Path(path).expanduser()
    if not raw.is_absolute():
        base = Path(base_dir) if base_dir is not None else Path.cwd()
        raw = base.expanduser().absolute() / raw
    return Path(os.path.normpath(raw))


def anchor_reported_path(root: Path, reported: str) -> Path:
    """Resolve a workspace-relative ``reported`` path against ``root``."""

    return file_identity(reported.strip(), base_dir=root)


def resolve_workspace_root(path: _Pathish, roots: Iterable[_Pathish]) -> Path:
    """Return the innermost root among ``roots`` enclosing ``path``.

    Raises:
        WorkspaceError: If no root encloses ``path``.
    """

    target = file_identity(path)
    best: Path | None = None
    for candidate in roots:
        root = file_identity(candidate)
        if target == root or root in target.parents:
            if best is None or len(root.parts) > len(best.parts):
                best = root
    if best is None:
        raise WorkspaceError(f"'{target}' doesn't seem to be located in an open workspace.")
    return best


def relative_source(root: Path, path: _Pathish) -> str:
    """Return ``path`` relative to ``root`` using forward slashes."""

    relative = file_identity(path).relative_to(file_identity(root))
    return PurePosixPath(*relative.parts).as_posix()


def build_iwyu_command(config: AnalyzerConfig, root: Path, source: _Pathish) -> str:
    """Render the command line that analyses ``source`` inside ``root``.

    The compilation database is looked up at the workspace root and the
    source is passed relative to it; the command is meant to run with
    ``root`` as its working directory.
    """

    database = file_identity(root) / config.compile_commands
    parts = [
        shlex.quote(config.executable),
        "-p",
        shlex.quote(str(database)),
        shlex.quote(relative_source(root, source)),
    ]
    if config.tool_args:
        parts.append("--")
        parts.extend(shlex.quote(arg) for arg in config.tool_args)
    return " ".join(parts)


__all__ = [
    "WorkspaceError",
    "anchor_reported_path",
    "build_iwyu_command",
    "file_identity",
    "relative_source",
    "resolve_workspace_root",
]
