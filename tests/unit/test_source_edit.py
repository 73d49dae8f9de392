"""Tests for the byte-range edit buffer."""

from __future__ import annotations

import pytest
from tree_sitter_language_pack import get_parser

from snapquire.errors import PreconditionViolation
from snapquire.source_edit import SourceEditBuffer

SOURCE = b"const a = require('a');\n"


def _node(source: bytes, node_type: str):
    tree = get_parser("javascript").parse(source)
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if node.type == node_type:
            return node
        stack.extend(reversed(node.named_children))
    raise AssertionError(f"no {node_type}")


class TestRecording:
    def test_no_edits_returns_source(self):
        buf = SourceEditBuffer(SOURCE)
        assert not buf
        assert buf.apply() == SOURCE

    def test_replace_range(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace_range(0, 5, "let")
        assert buf.apply() == b"let a = require('a');\n"

    def test_insertions_keep_recording_order(self):
        buf = SourceEditBuffer(b"x;")
        buf.replace_range(2, 2, "\nfirst")
        buf.replace_range(2, 2, "\nsecond")
        assert buf.apply() == b"x;\nfirst\nsecond"

    def test_duplicate_edit_ignored(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace_range(0, 5, "let")
        buf.replace_range(0, 5, "let")
        assert len(buf) == 1

    def test_containing_edit_subsumes_inner_edits(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace_range(18, 21, "'./a.js'")
        buf.delete_range(7, 22)
        assert len(buf) == 1
        assert buf.apply() == b"const a;\n"

    def test_partial_overlap_rejected(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace_range(6, 12, "b")
        with pytest.raises(PreconditionViolation):
            buf.replace_range(10, 20, "c")

    def test_edit_inside_pending_edit_rejected(self):
        buf = SourceEditBuffer(SOURCE)
        buf.delete_range(7, 22)
        with pytest.raises(PreconditionViolation):
            buf.replace_range(18, 21, "'x'")

    def test_invalid_range_rejected(self):
        buf = SourceEditBuffer(SOURCE)
        with pytest.raises(PreconditionViolation):
            buf.replace_range(5, 2, "")

    def test_insertion_at_boundary_survives_replacement(self):
        buf = SourceEditBuffer(b"abc")
        buf.replace_range(3, 3, "!")
        buf.replace_range(0, 3, "xyz")
        assert buf.apply() == b"xyz!"


class TestNodeHelpers:
    def test_text_of_applies_inner_edits(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace(_node(SOURCE, "string"), "'./a.js'")
        assert buf.text_of(_node(SOURCE, "call_expression")) == "require('./a.js')"

    def test_original_text_ignores_edits(self):
        buf = SourceEditBuffer(SOURCE)
        string = _node(SOURCE, "string")
        buf.replace(string, "'./a.js'")
        assert buf.original_text(string) == "'a'"

    def test_insert_after_node(self):
        buf = SourceEditBuffer(SOURCE)
        buf.insert_after(_node(SOURCE, "lexical_declaration"), " // lazy")
        assert buf.apply() == b"const a = require('a'); // lazy\n"

    def test_text_of_cut_by_edit_rejected(self):
        buf = SourceEditBuffer(SOURCE)
        buf.replace_range(0, 12, "let b")
        with pytest.raises(PreconditionViolation):
            buf.text_of(_node(SOURCE, "call_expression"))
