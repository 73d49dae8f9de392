"""Tests for the Module Reference Normalizer."""

from __future__ import annotations

import pytest
from tree_sitter_language_pack import get_parser

from snapquire.errors import PreconditionViolation
from snapquire.module_reference import ModuleKind, node_module_name, normalize_module_path
from snapquire.source_edit import SourceEditBuffer


def _parse_call(source: str):
    source_bytes = source.encode("utf-8")
    tree = get_parser("javascript").parse(source_bytes)
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            return node, SourceEditBuffer(source_bytes)
        stack.extend(reversed(node.named_children))
    raise AssertionError(f"no call in {source!r}")


class TestNodeModuleName:
    def test_string_literal(self):
        call, _ = _parse_call("require('./a');")
        assert node_module_name(call) == "./a"

    def test_null_literal_is_precondition_violation(self):
        call, _ = _parse_call("require(null);")
        with pytest.raises(PreconditionViolation):
            node_module_name(call)

    def test_non_literal_is_precondition_violation(self):
        call, _ = _parse_call("require(name);")
        with pytest.raises(AssertionError):
            node_module_name(call)


class TestNormalizeModulePath:
    def test_builtin_left_untouched(self, tmp_path):
        call, edits = _parse_call("require('fs');")
        ref = normalize_module_path(call, str(tmp_path), edits)
        assert ref.kind == ModuleKind.BUILTIN
        assert ref.module_name == "fs"
        assert ref.full_module_path is None
        assert len(edits) == 0

    def test_unresolved_left_untouched(self, tmp_path):
        call, edits = _parse_call("require('missing-dep');")
        ref = normalize_module_path(call, str(tmp_path), edits)
        assert ref.kind == ModuleKind.UNRESOLVED
        assert ref.full_module_path is None
        assert edits.apply() == b"require('missing-dep');"

    def test_file_module_rewritten_to_relative_path(self, tmp_path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "a.js").write_text("")
        call, edits = _parse_call("require('./lib/a');")
        ref = normalize_module_path(call, str(tmp_path), edits)
        assert ref.kind == ModuleKind.RESOLVED
        assert ref.rewritten
        assert ref.full_module_path == str(tmp_path / "lib" / "a.js")
        assert edits.apply() == b"require('./lib/a.js');"

    def test_quote_style_preserved(self, tmp_path):
        (tmp_path / "a.js").write_text("")
        call, edits = _parse_call('require.resolve("./a");')
        normalize_module_path(call, str(tmp_path), edits)
        assert edits.apply() == b'require.resolve("./a.js");'

    def test_already_normalized_records_no_edit(self, tmp_path):
        (tmp_path / "a.js").write_text("")
        call, edits = _parse_call("require('./a.js');")
        ref = normalize_module_path(call, str(tmp_path), edits)
        assert ref.kind == ModuleKind.RESOLVED
        assert not ref.rewritten
        assert len(edits) == 0
