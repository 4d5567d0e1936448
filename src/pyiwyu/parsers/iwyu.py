# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for the textual report emitted by include-what-you-use.

The report has no schema: findings are recognised line by line and a
``<path> should remove these lines:`` header switches the scanner into a
removal block that lasts until the next blank line or the end of input.
Every path in the report is workspace-relative and is re-anchored against
the workspace root before findings are grouped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

from ..core.models import AddFinding, CorrectMarker, Finding, RemoveFinding
from ..workspace import anchor_reported_path

ADD_FINDING_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?P<path>[^:]+):(?P<line>\d+):(?P<column>\d+): warning: (?P<symbol>\S+) is defined in "
    r"(?P<include>\"[^\"]+\"|<[^>]+>), which isn't directly #included\.$",
)
CORRECT_MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\((?P<path>.+) has correct #includes/fwd-decls\)$")
REMOVAL_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<path>.+) should remove these lines:$")
REMOVAL_ENTRY_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^- (?P<text>#include\s*(?P<spec>\"[^\"]+\"|<[^>]+>))\s*// lines (?P<start>\d+)-(?P<end>\d+)",
)


class ReportState(Enum):
    """Scanner states; a removal block remembers the file it belongs to."""

    SCANNING = "scanning"
    IN_REMOVAL_BLOCK = "in-removal-block"


@dataclass(slots=True)
class ParseResult:
    """Findings grouped by absolute file identity, in report order."""

    findings_by_file: dict[Path, list[Finding]] = field(default_factory=dict)
    source: Path | None = None

    def __iter__(self) -> Iterator[tuple[Path, list[Finding]]]:
        return iter(self.findings_by_file.items())

    def __len__(self) -> int:
        return len(self.findings_by_file)

    @property
    def files(self) -> list[Path]:
        return list(self.findings_by_file)

    @property
    def mentions_source(self) -> bool:
        """Return ``True`` when the analysed source itself appears in the report."""
        return self.source is not None and self.source in self.findings_by_file

    def findings_for(self, path: Path) -> list[Finding]:
        return list(self.findings_by_file.get(path, ()))


def _zero_based(value: str) -> int:
    return max(int(value) - 1, 0)


class ReportParser:
    """Line-fed state machine turning report lines into findings."""

    def __init__(self, root: Path, *, source: Path | None = None) -> None:
        self.root = root
        self.source = source
        self.state = ReportState.SCANNING
        self._block_file: Path | None = None
        self._findings: dict[Path, list[Finding]] = {}

    def feed(self, line: str) -> None:
        """Consume one report line."""
        if self.state is ReportState.IN_REMOVAL_BLOCK:
            self._feed_removal_block(line)
        else:
            self._feed_scanning(line)

    def feed_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            self.feed(line)

    def result(self) -> ParseResult:
        """Return the accumulated findings; end of input closes any open block."""
        self._close_block()
        return ParseResult(
            findings_by_file={path: list(findings) for path, findings in self._findings.items()},
            source=self.source,
        )

    def _feed_scanning(self, line: str) -> None:
        match = ADD_FINDING_PATTERN.match(line)
        if match is not None:
            path = self._anchor(match.group("path"))
            self._findings.setdefault(path, []).append(
                AddFinding(
                    file=path,
                    line=_zero_based(match.group("line")),
                    column=_zero_based(match.group("column")),
                    symbol=match.group("symbol"),
                    suggested_include=match.group("include"),
                ),
            )
            return
        match = CORRECT_MARKER_PATTERN.match(line)
        if match is not None:
            marker = CorrectMarker(file=self._anchor(match.group("path")))
            self._findings[marker.file] = []
            return
        match = REMOVAL_HEADER_PATTERN.match(line)
        if match is not None:
            path = self._anchor(match.group("path"))
            self._findings.setdefault(path, [])
            self._block_file = path
            self.state = ReportState.IN_REMOVAL_BLOCK

    def _feed_removal_block(self, line: str) -> None:
        if not line.strip():
            self._close_block()
            return
        match = REMOVAL_ENTRY_PATTERN.match(line)
        if match is None or self._block_file is None:
            return
        self._findings[self._block_file].append(
            RemoveFinding(
                file=self._block_file,
                start_line=_zero_based(match.group("start")),
                end_line=_zero_based(match.group("end")),
                include_text=match.group("text"),
                include_spec=match.group("spec"),
            ),
        )

    def _close_block(self) -> None:
        self._block_file = None
        self.state = ReportState.SCANNING

    def _anchor(self, reported: str) -> Path:
        return anchor_reported_path(self.root, reported)


def parse_report(report_text: str, *, root: Path, current_file: Path | None = None) -> ParseResult:
    """Parse ``report_text`` into findings keyed by absolute file identity.

    Args:
        report_text: Combined standard output of one tool invocation.
        root: Workspace root the reported paths are relative to.
        current_file: Identity of the analysed source, recorded on the result.

    Returns:
        ParseResult: Files mentioned by the report. A file reported as correct
        (or with an empty removal block) maps to an empty list; files the
        report never mentions are absent.
    """

    parser = ReportParser(root, source=current_file)
    parser.feed_lines(report_text.splitlines())
    return parser.result()


__all__ = [
    "ADD_FINDING_PATTERN",
    "CORRECT_MARKER_PATTERN",
    "ParseResult",
    "REMOVAL_ENTRY_PATTERN",
    "REMOVAL_HEADER_PATTERN",
    "ReportParser",
    "ReportState",
    "parse_report",
]
