# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for quick fix synthesis."""

from __future__ import annotations

from pathlib import Path

import pytest

from pyiwyu.core.models import AddFinding, Diagnostic, FindingKind, RemoveFinding, TextRange
from pyiwyu.diagnostics.projection import add_diagnostic, remove_diagnostic
from pyiwyu.document import TextDocument, apply_edits
from pyiwyu.fixes import (
    FixKindError,
    create_quick_fix,
    merge_fix_edits,
    prologue_end,
    provide_code_actions,
    synthesize_add_fix,
    synthesize_remove_fix,
)

GUARDED_HEADER = """\
#ifndef FOO_H
#define FOO_H

// comment
#include <vector>
/* block
   comment */
#include "bar.h"

class Foo {};
#endif
"""


def _add(path: Path, include: str = "<string>") -> Diagnostic:
    return add_diagnostic(AddFinding(path, 0, 0, "std::string", include))


def _remove(path: Path, start: int, end: int | None = None) -> Diagnostic:
    return remove_diagnostic(RemoveFinding(path, start, start if end is None else end, "#include <map>", "<map>"))


def _apply_add(text: str, include: str = "<string>") -> str:
    edit = synthesize_add_fix(_add(Path("/w/a.h"), include), text)
    assert edit is not None
    return apply_edits(text, [edit])


def test_add_fix_lands_after_guard_and_prologue() -> None:
    result = _apply_add(GUARDED_HEADER)

    lines = result.split("\n")
    assert lines[9] == "#include <string>"
    assert lines[10] == ""
    assert lines[11] == "class Foo {};"
    assert result.count("#include <string>") == 1


def test_add_fix_on_empty_document_inserts_at_start() -> None:
    assert _apply_add("") == "#include <string>\n\n"


def test_add_fix_before_code_without_prologue() -> None:
    assert _apply_add("int main() {}\n") == "#include <string>\n\nint main() {}\n"


def test_add_fix_without_trailing_newline() -> None:
    assert _apply_add('#include "a.h"') == '#include "a.h"\n#include <string>\n\n'


def test_conditional_block_is_not_an_include_guard() -> None:
    text = "#ifndef _WIN32\n#include <unistd.h>\n#endif\n"

    assert prologue_end(text) == 0


def test_pragma_once_counts_as_guard() -> None:
    text = "#pragma once\n#include <map>\nint x;\n"

    assert prologue_end(text) == len("#pragma once\n#include <map>\n")


def test_block_comment_followed_by_code_ends_prologue() -> None:
    text = "// header\n/* inline */ int x;\n"

    assert prologue_end(text) == len("// header\n")


def test_include_with_trailing_comment_is_part_of_prologue() -> None:
    text = "#include <map>  // for map\n#include <set> /* for set */\nint x;\n"

    assert prologue_end(text) == len("#include <map>  // for map\n#include <set> /* for set */\n")


def test_remove_fix_deletes_only_anchor_line(tmp_path: Path) -> None:
    text = "a\nb\n#include <map>\n#include <set>\nc\n"

    edit = synthesize_remove_fix(_remove(tmp_path / "a.cc", 2, 3))

    assert edit.range == TextRange.of(2, 0, 3, 0)
    assert apply_edits(text, [edit]) == "a\nb\n#include <set>\nc\n"


def test_wrong_kind_raises(tmp_path: Path) -> None:
    with pytest.raises(FixKindError):
        synthesize_add_fix(_remove(tmp_path / "a.cc", 0), "")
    with pytest.raises(FixKindError):
        synthesize_remove_fix(_add(tmp_path / "a.cc"))


def test_add_fix_degrades_when_message_is_unknown(tmp_path: Path) -> None:
    unknown = Diagnostic(range=TextRange.of(0, 0, 0, 1), message="something else", code=FindingKind.ADD)
    from_data = unknown.model_copy(update={"data": {"include": "<set>"}})

    assert synthesize_add_fix(unknown, "int x;\n") is None
    edit = synthesize_add_fix(from_data, "int x;\n")
    assert edit is not None
    assert edit.new_text == "#include <set>\n\n"
    assert create_quick_fix(tmp_path / "a.cc", "int x;\n", unknown) is None


def test_remove_fix_title_falls_back_to_generic_label(tmp_path: Path) -> None:
    diagnostic = Diagnostic(range=TextRange.of(1, 0, 2, 0), message="odd", code=FindingKind.REMOVE)

    action = create_quick_fix(tmp_path / "a.cc", "x\ny\n", diagnostic)

    assert action is not None
    assert action.title == "Remove header"
    assert action.edit.range == TextRange.of(1, 0, 2, 0)


def test_foreign_diagnostic_is_a_contract_violation(tmp_path: Path) -> None:
    diagnostic = Diagnostic(range=TextRange.of(0, 0, 0, 1), message="x")

    with pytest.raises(FixKindError):
        create_quick_fix(tmp_path / "a.cc", "", diagnostic)


def test_provide_code_actions_filters_by_source(tmp_path: Path) -> None:
    document = TextDocument(tmp_path / "a.cc", "#include <map>\nint x;\n")
    foreign = Diagnostic(range=TextRange.of(0, 0, 0, 1), message="x", source="clang", code=FindingKind.REMOVE)

    actions = provide_code_actions(document, [_add(document.path), _remove(document.path, 0), foreign])

    assert [action.title for action in actions] == ["Add #include <string>", "Remove header <map>"]
    assert all(action.kind == "quickfix" for action in actions)
    assert actions[1].diagnostics == (_remove(document.path, 0),)
    assert actions[0].path == document.path


def test_merge_fix_edits_applies_shared_include_once(tmp_path: Path) -> None:
    document = TextDocument(tmp_path / "a.cc", "#include <map>\nint x;\n")
    diagnostics = [_add(document.path), _add(document.path), _remove(document.path, 0)]

    edits = merge_fix_edits(provide_code_actions(document, diagnostics))
    document.apply(edits)

    assert len(edits) == 2
    assert document.text == "#include <string>\n\nint x;\n"
