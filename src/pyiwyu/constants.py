# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across pyiwyu modules."""

from __future__ import annotations

from typing import Final

DIAGNOSTIC_SOURCE: Final[str] = "iwyu"
COLLECTION_NAME: Final[str] = "iwyu"
OUTPUT_CHANNEL_NAME: Final[str] = "IWYU"

ANALYZE_FILE_COMMAND: Final[str] = "iwyu.analyzeFile"
NO_ACTIVE_DOCUMENT_MESSAGE: Final[str] = "No file is currently open to analyze."

DEFAULT_EXECUTABLE: Final[str] = "iwyu_tool"
COMPILE_COMMANDS_FILE: Final[str] = "compile_commands.json"
DEFAULT_TOOL_ARGS: Final[tuple[str, ...]] = (
    "-Xiwyu",
    "--no_fwd_decls",
    "-Xiwyu",
    "--verbose=3",
    "-Xiwyu",
    "--cxx17ns",
)
DEFAULT_SAVE_DELAY_SECONDS: Final[float] = 5.0

SUPPORTED_LANGUAGES: Final[tuple[str, ...]] = ("c", "cpp")

LANGUAGE_EXTENSIONS: Final[dict[str, set[str]]] = {
    "c": {".c"},
    "cpp": {
        ".cc",
        ".cpp",
        ".cxx",
        ".c++",
        ".h",
        ".hh",
        ".hpp",
        ".hxx",
        ".h++",
        ".ipp",
        ".inl",
    },
}

PYPROJECT_FILE: Final[str] = "pyproject.toml"
CONFIG_FILE: Final[str] = ".pyiwyu.toml"
CONFIG_TABLE: Final[str] = "pyiwyu"
