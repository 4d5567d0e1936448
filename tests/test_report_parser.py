# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the include-what-you-use report parser."""

from __future__ import annotations

from pathlib import Path

from conftest import SAMPLE_REPORT

from pyiwyu.core.models import AddFinding, RemoveFinding
from pyiwyu.parsers.iwyu import ReportParser, ReportState, parse_report


def test_add_finding_is_zero_based(tmp_path: Path) -> None:
    report = "foo.cpp:10:5: warning: std::vector is defined in <vector>, which isn't directly #included.\n"

    result = parse_report(report, root=tmp_path)

    assert result.findings_by_file == {
        tmp_path / "foo.cpp": [
            AddFinding(
                file=tmp_path / "foo.cpp",
                line=9,
                column=4,
                symbol="std::vector",
                suggested_include="<vector>",
            ),
        ],
    }


def test_removal_block_emits_anchor_line(tmp_path: Path) -> None:
    report = 'foo.cpp should remove these lines:\n- #include "bar.h"  // lines 3-3\n\n'

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "foo.cpp") == [
        RemoveFinding(
            file=tmp_path / "foo.cpp",
            start_line=2,
            end_line=2,
            include_text='#include "bar.h"',
            include_spec='"bar.h"',
        ),
    ]


def test_correct_marker_yields_empty_list(tmp_path: Path) -> None:
    result = parse_report("(foo.cpp has correct #includes/fwd-decls)\n", root=tmp_path)

    assert result.findings_by_file == {tmp_path / "foo.cpp": []}


def test_full_report_groups_by_file_in_report_order(tmp_path: Path) -> None:
    result = parse_report(SAMPLE_REPORT, root=tmp_path, current_file=tmp_path / "src" / "main.cpp")

    main = tmp_path / "src" / "main.cpp"
    assert result.files == [main, tmp_path / "src" / "util.h"]
    findings = result.findings_for(main)
    assert [type(finding).__name__ for finding in findings] == [
        "AddFinding",
        "AddFinding",
        "RemoveFinding",
        "RemoveFinding",
    ]
    assert findings[0] == AddFinding(main, 5, 2, "std::string", "<string>")
    assert findings[1] == AddFinding(main, 8, 10, "printf", "<cstdio>")
    assert findings[3] == RemoveFinding(main, 2, 3, '#include "util.h"', '"util.h"')
    assert result.findings_for(tmp_path / "src" / "util.h") == []
    assert result.mentions_source


def test_parse_is_deterministic(tmp_path: Path) -> None:
    first = parse_report(SAMPLE_REPORT, root=tmp_path)
    second = parse_report(SAMPLE_REPORT, root=tmp_path)

    assert first.findings_by_file == second.findings_by_file
    assert first.files == second.files


def test_files_not_mentioned_are_absent(tmp_path: Path) -> None:
    result = parse_report("Some free-form banner\n---\n", root=tmp_path)

    assert len(result) == 0
    assert not result.mentions_source


def test_marker_after_findings_resets_file(tmp_path: Path) -> None:
    report = (
        "a.cc:1:1: warning: size_t is defined in <cstddef>, which isn't directly #included.\n"
        "(a.cc has correct #includes/fwd-decls)\n"
    )

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "a.cc") == []


def test_findings_after_marker_accumulate(tmp_path: Path) -> None:
    report = (
        "(a.cc has correct #includes/fwd-decls)\n"
        "a.cc:2:7: warning: size_t is defined in <cstddef>, which isn't directly #included.\n"
    )

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "a.cc") == [AddFinding(tmp_path / "a.cc", 1, 6, "size_t", "<cstddef>")]


def test_removal_block_ends_at_end_of_input(tmp_path: Path) -> None:
    report = "a.cc should remove these lines:\n- #include <map>  // lines 7-7"

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "a.cc") == [RemoveFinding(tmp_path / "a.cc", 6, 6, "#include <map>", "<map>")]


def test_removal_block_ignores_other_grammars_until_blank_line(tmp_path: Path) -> None:
    report = (
        "a.cc should remove these lines:\n"
        "b.cc:1:1: warning: FILE is defined in <cstdio>, which isn't directly #included.\n"
        "- not an include\n"
        "- #include <map>  // lines 4-4\n"
        "\n"
        "b.cc:1:1: warning: FILE is defined in <cstdio>, which isn't directly #included.\n"
    )

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "a.cc") == [RemoveFinding(tmp_path / "a.cc", 3, 3, "#include <map>", "<map>")]
    assert result.findings_for(tmp_path / "b.cc") == [AddFinding(tmp_path / "b.cc", 0, 0, "FILE", "<cstdio>")]


def test_empty_removal_block_still_touches_file(tmp_path: Path) -> None:
    result = parse_report("a.cc should remove these lines:\n\n", root=tmp_path)

    assert result.findings_by_file == {tmp_path / "a.cc": []}


def test_paths_are_normalised_against_root(tmp_path: Path) -> None:
    report = "./src/../src/a.cc:3:1: warning: T is defined in \"t.h\", which isn't directly #included.\n"

    result = parse_report(report, root=tmp_path)

    assert result.files == [tmp_path / "src" / "a.cc"]
    assert result.findings_for(tmp_path / "src" / "a.cc")[0].suggested_include == '"t.h"'


def test_windows_line_endings_are_accepted(tmp_path: Path) -> None:
    report = "a.cc should remove these lines:\r\n- #include <set>  // lines 1-1\r\n\r\n(b.cc has correct #includes/fwd-decls)\r\n"

    result = parse_report(report, root=tmp_path)

    assert result.findings_for(tmp_path / "a.cc") == [RemoveFinding(tmp_path / "a.cc", 0, 0, "#include <set>", "<set>")]
    assert result.findings_for(tmp_path / "b.cc") == []


def test_parser_state_machine_transitions(tmp_path: Path) -> None:
    parser = ReportParser(tmp_path)
    assert parser.state is ReportState.SCANNING

    parser.feed("a.cc should remove these lines:")
    assert parser.state is ReportState.IN_REMOVAL_BLOCK

    parser.feed("")
    assert parser.state is ReportState.SCANNING

    parser.feed("a.cc should remove these lines:")
    result = parser.result()
    assert parser.state is ReportState.SCANNING
    assert result.files == [tmp_path / "a.cc"]
