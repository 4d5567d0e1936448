# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the pyiwyu package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..constants import DIAGNOSTIC_SOURCE
from .severity import Severity

QUICK_FIX_KIND: Final[str] = "quickfix"


class FindingKind(str, Enum):
    """Strategy tag attached to diagnostics so fixes can be synthesised."""

    ADD = "add"
    REMOVE = "remove"


class Position(BaseModel):
    """Zero-based line/character coordinate inside a document."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    character: int = Field(ge=0)

    def __lt__(self, other: Position) -> bool:
        return (self.line, self.character) < (other.line, other.character)

    def __le__(self, other: Position) -> bool:
        return (self.line, self.character) <= (other.line, other.character)


class TextRange(BaseModel):
    """Half-open span between two positions."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @model_validator(mode="after")
    def _check_order(self) -> TextRange:
        """Reject ranges whose end precedes their start."""
        if self.end < self.start:
            raise ValueError("range end must not precede range start")
        return self

    @classmethod
    def of(cls, start_line: int, start_character: int, end_line: int, end_character: int) -> TextRange:
        """Build a range from four coordinates."""
        return cls(
            start=Position(line=start_line, character=start_character),
            end=Position(line=end_line, character=end_character),
        )

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the range covers no characters."""
        return self.start == self.end


class Diagnostic(BaseModel):
    """Editor-facing warning derived from one analysis finding."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    message: str
    severity: Severity = Severity.WARNING
    source: str = DIAGNOSTIC_SOURCE
    code: FindingKind | None = None
    data: dict[str, str | int] = Field(default_factory=dict)


class TextEdit(BaseModel):
    """Replace ``range`` with ``new_text``; an empty range is an insertion."""

    model_config = ConfigDict(frozen=True)

    range: TextRange
    new_text: str = ""

    @classmethod
    def insert(cls, position: Position, text: str) -> TextEdit:
        """Return an edit inserting ``text`` at ``position``."""
        return cls(range=TextRange(start=position, end=position), new_text=text)

    @classmethod
    def delete(cls, span: TextRange) -> TextEdit:
        """Return an edit removing ``span``."""
        return cls(range=span, new_text="")


class CodeAction(BaseModel):
    """Quick fix offered for one diagnostic."""

    model_config = ConfigDict(frozen=True)

    title: str
    path: Path
    edit: TextEdit
    diagnostics: tuple[Diagnostic, ...] = Field(default_factory=tuple)
    kind: str = QUICK_FIX_KIND


@dataclass(frozen=True, slots=True)
class AddFinding:
    """A symbol used at ``(line, column)`` whose header is not included directly."""

    file: Path
    line: int
    column: int
    symbol: str
    suggested_include: str

    @property
    def kind(self) -> FindingKind:
        return FindingKind.ADD


@dataclass(frozen=True, slots=True)
class RemoveFinding:
    """An unused ``#include`` spanning ``[start_line, end_line]`` (0-based)."""

    file: Path
    start_line: int
    end_line: int
    include_text: str
    include_spec: str

    @property
    def kind(self) -> FindingKind:
        return FindingKind.REMOVE


@dataclass(frozen=True, slots=True)
class CorrectMarker:
    """Assertion that ``file`` currently has no findings."""

    file: Path


Finding = AddFinding | RemoveFinding

__all__ = [
    "AddFinding",
    "CodeAction",
    "CorrectMarker",
    "Diagnostic",
    "Finding",
    "FindingKind",
    "Position",
    "QUICK_FIX_KIND",
    "RemoveFinding",
    "TextEdit",
    "TextRange",
]
