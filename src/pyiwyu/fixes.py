# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Quick fixes for include diagnostics: insert a missing include or drop an unused one."""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path
from typing import Final, Protocol

from .constants import DIAGNOSTIC_SOURCE
from .core.models import CodeAction, Diagnostic, FindingKind, Position, TextEdit, TextRange
from .document import position_at

ADD_MESSAGE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r" is defined in (?P<include>\"[^\"]+\"|<[^>]+>), which isn't directly #included\.$",
)
REMOVE_MESSAGE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^Unused #include (?P<include>.+)\.$")

_TRAILING_COMMENT: Final[str] = r"\s*(?://.*|/\*.*?\*/\s*)?"
GUARD_IFNDEF_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^\s*#\s*ifndef\s+(?P<name>\w+){_TRAILING_COMMENT}$")
GUARD_DEFINE_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^\s*#\s*define\s+(?P<name>\w+){_TRAILING_COMMENT}$")
PRAGMA_ONCE_PATTERN: Final[re.Pattern[str]] = re.compile(rf"^\s*#\s*pragma\s+once{_TRAILING_COMMENT}$")
INCLUDE_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"^\s*#\s*include\s*(?:\"[^\"]+\"|<[^>]+>){_TRAILING_COMMENT}$",
)
LINE_COMMENT_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*//.*$")
BLOCK_COMMENT_OPEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*/\*")
BLOCK_COMMENT_TAIL_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*(?://.*)?$")

ADD_TITLE: Final[str] = "Add #include {include}"
REMOVE_TITLE: Final[str] = "Remove header {include}"
REMOVE_TITLE_FALLBACK: Final[str] = "Remove header"


class FixKindError(ValueError):
    """Raised when a diagnostic is routed to a fix strategy it was not built for."""


class SupportsText(Protocol):
    path: Path

    @property
    def text(self) -> str: ...


def _block_comment_end(lines: list[str], index: int) -> int | None:
    """Return the index of the line closing the block comment opened at ``index``.

    ``None`` means the comment is not a whole-line unit (code follows the
    closing ``*/``) or never closes.
    """

    first = lines[index]
    search_from = first.index("/*") + 2
    for cursor in range(index, len(lines)):
        line = lines[cursor]
        close = line.find("*/", search_from if cursor == index else 0)
        if close == -1:
            continue
        if BLOCK_COMMENT_TAIL_PATTERN.match(line[close + 2 :]):
            return cursor
        return None
    return None


def prologue_end(text: str) -> int:
    """Return the offset just past the file prologue.

    The prologue is the longest run of whole lines made of blank lines,
    comments, ``#include`` directives and at most one include guard
    (``#ifndef NAME``/``#define NAME`` or ``#pragma once``).
    """

    if not text:
        return 0
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    offsets: list[int] = []
    total = 0
    for line in lines:
        offsets.append(total)
        total += len(line) + 1
    end_offset = 0
    guard_seen = False
    index = 0
    while index < len(lines):
        line = lines[index]
        consumed = 0
        if not line.strip() or LINE_COMMENT_PATTERN.match(line) or INCLUDE_LINE_PATTERN.match(line):
            consumed = 1
        elif BLOCK_COMMENT_OPEN_PATTERN.match(line):
            closing = _block_comment_end(lines, index)
            consumed = 0 if closing is None else closing - index + 1
        elif not guard_seen and PRAGMA_ONCE_PATTERN.match(line):
            guard_seen = True
            consumed = 1
        elif not guard_seen and index + 1 < len(lines):
            ifndef = GUARD_IFNDEF_PATTERN.match(line)
            define = GUARD_DEFINE_PATTERN.match(lines[index + 1])
            if ifndef and define and ifndef.group("name") == define.group("name"):
                guard_seen = True
                consumed = 2
        if not consumed:
            break
        index += consumed
        end_offset = offsets[index] if index < len(offsets) else len(text)
    return min(end_offset, len(text))


def include_from_add_message(message: str) -> str | None:
    match = ADD_MESSAGE_PATTERN.search(message)
    return match.group("include") if match else None


def include_from_remove_message(message: str) -> str | None:
    match = REMOVE_MESSAGE_PATTERN.match(message)
    return match.group("include") if match else None


def add_include_edit(text: str, include: str) -> TextEdit:
    """Return the edit inserting ``#include <include>`` after the prologue."""

    offset = prologue_end(text)
    new_text = f"#include {include}\n\n"
    if offset == len(text) and text and not text.endswith("\n"):
        new_text = "\n" + new_text
    return TextEdit.insert(position_at(text, offset), new_text)


def remove_line_edit(diagnostic: Diagnostic) -> TextEdit:
    """Return the edit deleting the physical line the diagnostic is anchored on."""

    line = diagnostic.range.start.line
    return TextEdit.delete(TextRange.of(line, 0, line + 1, 0))


def synthesize_add_fix(diagnostic: Diagnostic, text: str) -> TextEdit | None:
    """Return the insertion fixing a missing include, or ``None`` when unknown.

    Raises:
        FixKindError: If ``diagnostic`` is not a missing-include diagnostic.
    """

    if diagnostic.code is not FindingKind.ADD:
        raise FixKindError(f"expected an '{FindingKind.ADD.value}' diagnostic, got {diagnostic.code!r}")
    include = include_from_add_message(diagnostic.message)
    if include is None:
        fallback = diagnostic.data.get("include")
        include = fallback if isinstance(fallback, str) and fallback else None
    if include is None:
        return None
    return add_include_edit(text, include)


def synthesize_remove_fix(diagnostic: Diagnostic) -> TextEdit:
    """Return the deletion fixing an unused include.

    Raises:
        FixKindError: If ``diagnostic`` is not an unused-include diagnostic.
    """

    if diagnostic.code is not FindingKind.REMOVE:
        raise FixKindError(f"expected a '{FindingKind.REMOVE.value}' diagnostic, got {diagnostic.code!r}")
    return remove_line_edit(diagnostic)


def create_quick_fix(path: Path, text: str, diagnostic: Diagnostic) -> CodeAction | None:
    """Build the code action for one engine diagnostic.

    Raises:
        FixKindError: If ``diagnostic`` carries no known finding kind.
    """

    if diagnostic.code is FindingKind.ADD:
        edit = synthesize_add_fix(diagnostic, text)
        if edit is None:
            return None
        include = edit.new_text.strip().removeprefix("#include ").strip()
        title = ADD_TITLE.format(include=include)
    elif diagnostic.code is FindingKind.REMOVE:
        edit = synthesize_remove_fix(diagnostic)
        include = include_from_remove_message(diagnostic.message)
        title = REMOVE_TITLE.format(include=include) if include else REMOVE_TITLE_FALLBACK
    else:
        raise FixKindError(f"diagnostic {diagnostic.message!r} was not produced by the include analyzer")
    return CodeAction(title=title, path=path, edit=edit, diagnostics=(diagnostic,))


def provide_code_actions(document: SupportsText, diagnostics: Iterable[Diagnostic]) -> list[CodeAction]:
    """Return quick fixes for every include diagnostic among ``diagnostics``."""

    text = document.text
    actions: list[CodeAction] = []
    for diagnostic in diagnostics:
        if diagnostic.source != DIAGNOSTIC_SOURCE or diagnostic.code is None:
            continue
        action = create_quick_fix(document.path, text, diagnostic)
        if action is not None:
            actions.append(action)
    return actions


def merge_fix_edits(actions: Iterable[CodeAction]) -> list[TextEdit]:
    """Return the edits of ``actions`` with duplicates dropped, in action order.

    Several missing-include diagnostics often suggest the same header; they
    produce identical insertions that must only be applied once.
    """

    merged: list[TextEdit] = []
    for action in actions:
        if action.edit not in merged:
            merged.append(action.edit)
    return merged


__all__ = [
    "FixKindError",
    "add_include_edit",
    "create_quick_fix",
    "include_from_add_message",
    "include_from_remove_message",
    "merge_fix_edits",
    "prologue_end",
    "provide_code_actions",
    "remove_line_edit",
    "synthesize_add_fix",
    "synthesize_remove_fix",
]
