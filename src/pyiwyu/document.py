# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Text documents with line/character addressing and edit application."""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .core.models import Position, TextEdit, TextRange
from .workspace import file_identity


def _line_starts(text: str) -> list[int]:
    starts = [0]
    index = text.find("\n")
    while index != -1:
        starts.append(index + 1)
        index = text.find("\n", index + 1)
    return starts


def offset_at(text: str, position: Position) -> int:
    """Return the offset of ``position`` in ``text``, clamped to valid bounds."""

    starts = _line_starts(text)
    if position.line >= len(starts):
        return len(text)
    start = starts[position.line]
    end = starts[position.line + 1] - 1 if position.line + 1 < len(starts) else len(text)
    return min(start + position.character, end)


def position_at(text: str, offset: int) -> Position:
    """Return the position of ``offset`` in ``text``, clamped to valid bounds."""

    offset = min(max(offset, 0), len(text))
    starts = _line_starts(text)
    line = bisect_right(starts, offset) - 1
    return Position(line=line, character=offset - starts[line])


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Apply non-overlapping ``edits`` to ``text`` and return the result.

    Raises:
        ValueError: If two edits overlap.
    """

    spans = sorted(
        ((offset_at(text, edit.range.start), offset_at(text, edit.range.end), edit.new_text) for edit in edits),
        key=lambda item: (item[0], item[1]),
    )
    for (_, previous_end, _), (start, _, _) in zip(spans, spans[1:]):
        if start < previous_end:
            raise ValueError("text edits must not overlap")
    result = text
    for start, end, new_text in reversed(spans):
        result = result[:start] + new_text + result[end:]
    return result


@dataclass(slots=True)
class TextDocument:
    """In-memory document snapshot addressed by absolute file identity."""

    path: Path
    text: str = ""
    language_id: str | None = None
    version: int = 0

    def __post_init__(self) -> None:
        self.path = file_identity(self.path)

    @property
    def line_count(self) -> int:
        return self.text.count("\n") + 1

    def line_at(self, line: int) -> str:
        lines = self.text.split("\n")
        return lines[line] if 0 <= line < len(lines) else ""

    def offset_at(self, position: Position) -> int:
        return offset_at(self.text, position)

    def position_at(self, offset: int) -> Position:
        return position_at(self.text, offset)

    def full_range(self) -> TextRange:
        return TextRange(start=Position(line=0, character=0), end=self.position_at(len(self.text)))

    def update(self, text: str) -> None:
        """Replace the document text and bump its version."""
        self.text = text
        self.version += 1

    def apply(self, edits: Iterable[TextEdit]) -> None:
        self.update(apply_edits(self.text, edits))


class FileDocument:
    """Document backed by a file on disk; the text is re-read on every access."""

    def __init__(self, path: Path, *, language_id: str | None = None, encoding: str = "utf-8") -> None:
        self.path = file_identity(path)
        self.language_id = language_id
        self.encoding = encoding

    @property
    def text(self) -> str:
        try:
            return self.path.read_text(encoding=self.encoding)
        except FileNotFoundError:
            return ""

    def apply(self, edits: Iterable[TextEdit]) -> None:
        """Apply ``edits`` and write the result back to disk."""
        self.path.write_text(apply_edits(self.text, edits), encoding=self.encoding)

    def __repr__(self) -> str:
        return f"FileDocument({str(self.path)!r})"


__all__ = ["FileDocument", "TextDocument", "apply_edits", "offset_at", "position_at"]
