# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the include analysis engine."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    COMPILE_COMMANDS_FILE,
    CONFIG_FILE,
    CONFIG_TABLE,
    DEFAULT_EXECUTABLE,
    DEFAULT_SAVE_DELAY_SECONDS,
    DEFAULT_TOOL_ARGS,
    LANGUAGE_EXTENSIONS,
    PYPROJECT_FILE,
    SUPPORTED_LANGUAGES,
)


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class AnalyzerConfig(BaseModel):
    """How the external include analysis tool is invoked and scheduled."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    executable: str = DEFAULT_EXECUTABLE
    compile_commands: str = COMPILE_COMMANDS_FILE
    tool_args: list[str] = Field(default_factory=lambda: list(DEFAULT_TOOL_ARGS))
    save_delay: float = Field(default=DEFAULT_SAVE_DELAY_SECONDS, ge=0)
    timeout: float | None = Field(default=None, gt=0)
    languages: list[str] = Field(default_factory=lambda: list(SUPPORTED_LANGUAGES))
    extensions: dict[str, list[str]] = Field(
        default_factory=lambda: {language: sorted(suffixes) for language, suffixes in LANGUAGE_EXTENSIONS.items()},
    )

    @field_validator("executable", "compile_commands")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be blank")
        return value

    def supports(self, language_id: str | None) -> bool:
        """Return ``True`` when documents of ``language_id`` should be analysed."""
        return language_id is not None and language_id in self.languages

    def language_for(self, path: Path) -> str | None:
        """Infer a language identifier from the suffix of ``path``."""
        suffix = path.suffix.lower()
        for language, suffixes in self.extensions.items():
            if suffix in suffixes:
                return language
        return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"unable to read {path}: {exc}") from exc


def _pyproject_section(payload: Mapping[str, Any]) -> dict[str, Any]:
    tool = payload.get("tool")
    if not isinstance(tool, Mapping):
        return {}
    section = tool.get(CONFIG_TABLE)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{CONFIG_TABLE}] must be a table")
    return dict(section)


def load_config(root: Path, *, overrides: Mapping[str, Any] | None = None) -> AnalyzerConfig:
    """Load configuration for the workspace rooted at ``root``.

    ``[tool.pyiwyu]`` in ``pyproject.toml`` is read first, then the top level of
    ``.pyiwyu.toml`` is layered on top, then ``overrides``.

    Raises:
        ConfigError: If a file cannot be parsed or contains invalid values.
    """

    merged: dict[str, Any] = {}
    pyproject = root / PYPROJECT_FILE
    if pyproject.is_file():
        merged.update(_pyproject_section(_read_toml(pyproject)))
    dedicated = root / CONFIG_FILE
    if dedicated.is_file():
        merged.update(_read_toml(dedicated))
    if overrides:
        merged.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return AnalyzerConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration for {root}: {exc}") from exc


__all__ = ["AnalyzerConfig", "ConfigError", "load_config"]
