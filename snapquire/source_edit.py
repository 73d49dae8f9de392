"""Printer — byte-range edits spliced into the original source.

tree-sitter trees are read-only, so a structural rewrite is recorded as a set
of non-overlapping byte-range edits against the source the tree was parsed
from. Untouched regions are copied through verbatim, which keeps the
formatting of everything the transform does not rewrite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tree_sitter import Node

from .errors import PreconditionViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceEdit:
    """Replace ``source[start:end]`` with *text*; an insertion when start == end."""

    start: int
    end: int
    text: bytes
    seq: int

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def inside(self, start: int, end: int) -> bool:
        """True if this edit lies within ``[start, end)``.

        Insertions sitting exactly on either boundary belong to the
        surrounding text, not to the range.
        """
        if self.is_insertion:
            return start < self.start < end
        return start <= self.start and self.end <= end

    def crosses(self, start: int, end: int) -> bool:
        if self.is_insertion:
            return start < self.start < end
        if start == end:
            return self.start < start < self.end
        return self.start < end and start < self.end


class SourceEditBuffer:
    """Collects edits for one source snapshot and renders the result."""

    def __init__(self, source: bytes):
        self._source = source
        self._edits: list[SourceEdit] = []
        self._seq = 0

    @property
    def source(self) -> bytes:
        return self._source

    def __len__(self) -> int:
        return len(self._edits)

    def __bool__(self) -> bool:
        return bool(self._edits)

    # ── recording ────────────────────────────────────────────────

    def replace_range(self, start: int, end: int, text: str) -> None:
        if not 0 <= start <= end <= len(self._source):
            raise PreconditionViolation(f"Invalid edit range {start}:{end}")
        encoded = text.encode("utf-8")
        if any(
            e.start == start and e.end == end and e.text == encoded for e in self._edits
        ):
            return
        kept: list[SourceEdit] = []
        for edit in self._edits:
            if start != end and edit.inside(start, end):
                # Subsumed: the caller rendered this range through text_of().
                continue
            if edit.crosses(start, end):
                raise PreconditionViolation(
                    f"Edit {start}:{end} overlaps pending edit {edit.start}:{edit.end}"
                )
            kept.append(edit)
        kept.append(SourceEdit(start, end, encoded, self._seq))
        self._seq += 1
        self._edits = kept

    def replace(self, node: Node, text: str) -> None:
        self.replace_range(node.start_byte, node.end_byte, text)

    def delete_range(self, start: int, end: int) -> None:
        self.replace_range(start, end, "")

    def insert_after(self, node: Node, text: str) -> None:
        self.replace_range(node.end_byte, node.end_byte, text)

    # ── rendering ────────────────────────────────────────────────

    def _splice(self, start: int, end: int, edits: list[SourceEdit]) -> bytes:
        parts: list[bytes] = []
        pos = start
        for edit in sorted(edits, key=lambda e: (e.start, not e.is_insertion, e.seq)):
            parts.append(self._source[pos : edit.start])
            parts.append(edit.text)
            pos = edit.end
        parts.append(self._source[pos:end])
        return b"".join(parts)

    def text_of(self, node: Node) -> str:
        """Source text of *node* with every pending edit inside it applied."""
        start, end = node.start_byte, node.end_byte
        inner = [e for e in self._edits if e.inside(start, end)]
        if any(e.crosses(start, end) for e in self._edits if e not in inner):
            raise PreconditionViolation(
                f"Node {node.type} at {start}:{end} cuts through a pending edit"
            )
        return self._splice(start, end, inner).decode("utf-8")

    def original_text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def apply(self) -> bytes:
        """Return the full source with all edits spliced in."""
        logger.debug("Applying %d source edits", len(self._edits))
        return self._splice(0, len(self._source), self._edits)
