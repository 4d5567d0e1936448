# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project parsed findings onto editor-facing diagnostics."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Final

from ..core.models import AddFinding, Diagnostic, Finding, FindingKind, Position, RemoveFinding, TextRange
from ..core.severity import Severity
from ..document import offset_at, position_at
from ..parsers.iwyu import ParseResult
from ..parsers.tokens import match_token

ADD_MESSAGE_TEMPLATE: Final[str] = "{symbol} is defined in {include}, which isn't directly #included."
REMOVE_MESSAGE_TEMPLATE: Final[str] = "Unused #include {spec}."


def token_range(text: str | None, start: Position) -> TextRange:
    """Return the range of the token at ``start``.

    Falls back to a one-character span when ``text`` is unknown, when the
    position does not exist in ``text``, or when no token grammar matches.
    """

    fallback = TextRange(start=start, end=Position(line=start.line, character=start.character + 1))
    if text is None:
        return fallback
    offset = offset_at(text, start)
    if position_at(text, offset) != start:
        return fallback
    length = match_token(text, offset)
    if not length:
        return fallback
    return TextRange(start=start, end=position_at(text, offset + length))


def add_diagnostic(finding: AddFinding, text: str | None = None) -> Diagnostic:
    """Build the diagnostic anchored on the use site of a missing include."""

    start = Position(line=finding.line, character=finding.column)
    return Diagnostic(
        range=token_range(text, start),
        message=ADD_MESSAGE_TEMPLATE.format(symbol=finding.symbol, include=finding.suggested_include),
        severity=Severity.WARNING,
        code=FindingKind.ADD,
        data={"include": finding.suggested_include, "symbol": finding.symbol},
    )


def remove_diagnostic(finding: RemoveFinding) -> Diagnostic:
    """Build the diagnostic covering the first reported line of an unused include."""

    return Diagnostic(
        range=TextRange.of(finding.start_line, 0, finding.start_line + 1, 0),
        message=REMOVE_MESSAGE_TEMPLATE.format(spec=finding.include_spec),
        severity=Severity.WARNING,
        code=FindingKind.REMOVE,
        data={
            "include": finding.include_spec,
            "include_text": finding.include_text,
            "end_line": finding.end_line,
        },
    )


def to_diagnostic(finding: Finding, text: str | None = None) -> Diagnostic:
    if isinstance(finding, AddFinding):
        return add_diagnostic(finding, text)
    return remove_diagnostic(finding)


def build_diagnostics(
    findings: ParseResult | Mapping[Path, Sequence[Finding]],
    sources: Mapping[Path, str] | None = None,
) -> dict[Path, list[Diagnostic]]:
    """Convert findings into diagnostics, keeping report order per file.

    Args:
        findings: Parser output or an equivalent mapping.
        sources: Known document texts keyed by file identity, used to recover
            token spans for missing-include findings.

    Returns:
        dict[Path, list[Diagnostic]]: One entry per file mentioned in the report;
        an empty list means the file's diagnostics must be cleared.
    """

    items: Iterable[tuple[Path, Sequence[Finding]]]
    items = findings.findings_by_file.items() if isinstance(findings, ParseResult) else findings.items()
    known = sources or {}
    return {path: [to_diagnostic(finding, known.get(path)) for finding in entries] for path, entries in items}


__all__ = [
    "ADD_MESSAGE_TEMPLATE",
    "REMOVE_MESSAGE_TEMPLATE",
    "add_diagnostic",
    "build_diagnostics",
    "remove_diagnostic",
    "to_diagnostic",
    "token_range",
]
