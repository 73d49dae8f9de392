"""Lazification Engine — top-level requires become memoized accessor functions.

A run has three phases over the same source:

A. every top-level ``const x = require('x')`` whose module is deferred is
   rewritten to ``let x;`` followed by
   ``function get_x() { return x = x || require('x'); }``;
B. top-level reads of a lazy binding are replaced with accessor calls, which
   can turn further declarations lazy (``const y = x``), so the scan restarts
   after every rewrite until it comes up empty;
C. reads of lazy bindings inside functions are replaced with accessor calls.

Each rewrite is recorded as byte edits, spliced into the source and
re-parsed before the next scan.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from tree_sitter import Node, Tree

from . import constants
from .call_classifier import is_static_require, is_static_require_resolve
from .diagnostics import (
    DiagnosticSink,
    EventKind,
    LoggingDiagnosticSink,
    make_event,
    source_location,
)
from .errors import PreconditionViolation, UnsupportedConstructError
from .module_reference import ModuleKind, normalize_module_path
from .parser import Parser, TreeSitterParserFactory
from .policy import as_policy
from .references import (
    REFERENCE_NODE_TYPES,
    is_reference_to_shadowed_variable,
    lazy_accessor_for,
)
from .scope import ScopeTree, node_text
from .source_edit import SourceEditBuffer
from .topology import is_top_level
from .transform_types import TransformOptions, TransformStats

logger = logging.getLogger(__name__)

# Initializers that can follow ``x ||`` without parentheses.
_TIGHT_BINDING_TYPES: frozenset[str] = frozenset(
    {
        "call_expression",
        "member_expression",
        "subscript_expression",
        "new_expression",
        "parenthesized_expression",
        "identifier",
        "this",
        "string",
        "template_string",
        "number",
        "regex",
        "true",
        "false",
        "null",
        "undefined",
        "object",
        "array",
        "function",
        "function_expression",
        "class",
    }
)

_INDENT = re.compile(rb"[ \t]*")


@dataclass
class _ParsedSource:
    """One parse of the current source plus the edits recorded against it."""

    tree: Tree
    scopes: ScopeTree
    edits: SourceEditBuffer

    @property
    def root(self) -> Node:
        return self.tree.root_node


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order, depth-first over named nodes."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def _line_indent(source: bytes, offset: int) -> str:
    line_start = source.rfind(b"\n", 0, offset) + 1
    indent = _INDENT.match(source, line_start, offset)
    return indent.group(0).decode("utf-8") if indent else ""


def _node_depth(node: Node) -> int:
    depth = 0
    parent = node.parent
    while parent is not None:
        depth += 1
        parent = parent.parent
    return depth


class Snapquirer:
    """Rewrites one script; ``transform()`` may be called any number of times."""

    def __init__(
        self,
        source: str,
        options: Optional[TransformOptions] = None,
        parser: Optional[Parser] = None,
    ):
        self.source = source
        self._options = options or TransformOptions()
        self._basedir = self._options.resolved_basedir()
        self._policy = as_policy(self._options.should_defer)
        self._diagnostics: DiagnosticSink = (
            self._options.diagnostics or LoggingDiagnosticSink()
        )
        self._parser = parser or Parser(TreeSitterParserFactory())
        self._lazy_requires_by_variable_name: dict[str, str] = {}
        self.stats = TransformStats()

    @property
    def basedir(self) -> str:
        return self._basedir

    @property
    def lazy_requires(self) -> dict[str, str]:
        """Variable name -> accessor name for the most recent run."""
        return dict(self._lazy_requires_by_variable_name)

    def transform(self) -> str:
        self._lazy_requires_by_variable_name.clear()
        self.stats = TransformStats()
        logger.info("Transforming %d bytes (basedir=%s)", len(self.source), self._basedir)

        # TODO: handle JSON files passed in as the script source
        source = self._make_requires_lazy(self.source.encode("utf-8"))
        if self._lazy_requires_by_variable_name:
            source = self._make_references_lazy(source)
            source = self._defer_require_references(source)
        return source.decode("utf-8")

    # ── helpers ──────────────────────────────────────────────────

    def _parse(self, source: bytes) -> _ParsedSource:
        tree = self._parser.parse(source)
        return _ParsedSource(tree, ScopeTree(tree.root_node), SourceEditBuffer(source))

    def _emit(self, kind: EventKind, node: Optional[Node] = None, name: str = "", **detail: Any):
        self._diagnostics.emit(make_event(kind, node, name, **detail))

    def _should_defer(self, module_name: str, kind: ModuleKind, resolved: Optional[str]) -> bool:
        if kind == ModuleKind.BUILTIN:
            return True
        return self._policy.should_defer(module_name, resolved or module_name)

    # ── phase A: declarations ────────────────────────────────────

    def _make_requires_lazy(self, source: bytes) -> bytes:
        parsed = self._parse(source)
        pending: list[Node] = []
        for node in _walk(parsed.root):
            if node.type != constants.CALL_EXPRESSION_TYPE:
                continue
            if is_static_require(node):
                ref = normalize_module_path(node, self._basedir, parsed.edits)
                self.stats.static_requires += 1
                self.stats.normalized_paths += int(ref.rewritten)
                self._emit(
                    EventKind.STATIC_REQUIRE,
                    node,
                    ref.module_name,
                    module_kind=ref.kind.value,
                    full_module_path=ref.full_module_path,
                )
                if self._should_defer(ref.module_name, ref.kind, ref.full_module_path) and (
                    is_top_level(node, parsed.scopes)
                ):
                    pending.append(node)
            elif is_static_require_resolve(node):
                ref = normalize_module_path(node, self._basedir, parsed.edits)
                self.stats.static_require_resolves += 1
                self.stats.normalized_paths += int(ref.rewritten)
                self._emit(
                    EventKind.STATIC_REQUIRE_RESOLVE,
                    node,
                    ref.module_name,
                    module_kind=ref.kind.value,
                )

        # Lazify only once every specifier in an initializer is normalized, and
        # innermost declarators first so an outer initializer renders their rewrites.
        targets: dict[int, Node] = {}
        for node in pending:
            declarator = self._lazy_target(node, parsed)
            if declarator is not None:
                targets.setdefault(declarator.id, declarator)
        for declarator in sorted(targets.values(), key=_node_depth, reverse=True):
            self._lazify_declarator(declarator, parsed)
        return parsed.edits.apply()

    # ── phase B: top-level references ────────────────────────────

    def _first_top_level_reference(self, parsed: _ParsedSource) -> Optional[tuple[Node, str]]:
        for node in _walk(parsed.root):
            if node.type not in REFERENCE_NODE_TYPES:
                continue
            accessor = lazy_accessor_for(node, self._lazy_requires_by_variable_name, parsed.scopes)
            if (
                accessor is not None
                and is_top_level(node, parsed.scopes)
                and not is_reference_to_shadowed_variable(node, parsed.scopes)
            ):
                return node, accessor
        return None

    def _make_references_lazy(self, source: bytes) -> bytes:
        while True:
            self.stats.reference_passes += 1
            parsed = self._parse(source)
            found = self._first_top_level_reference(parsed)
            if found is None:
                return source
            node, accessor = found
            self._emit(EventKind.LAZY_REQUIRE_REFERENCE, node, node_text(node), accessor=accessor)
            self._replace_with_accessor_call(node, accessor, parsed.edits)
            self.stats.top_level_references += 1
            self._make_assign_or_declaration_lazy(node, parsed)
            source = parsed.edits.apply()

    # ── phase C: nested references ───────────────────────────────

    def _defer_require_references(self, source: bytes) -> bytes:
        parsed = self._parse(source)
        for node in _walk(parsed.root):
            if node.type not in REFERENCE_NODE_TYPES:
                continue
            accessor = lazy_accessor_for(node, self._lazy_requires_by_variable_name, parsed.scopes)
            if (
                accessor is not None
                and not is_top_level(node, parsed.scopes)
                and not is_reference_to_shadowed_variable(node, parsed.scopes)
            ):
                self._emit(EventKind.DEFER_REQUIRE_REFERENCE, node, node_text(node), accessor=accessor)
                self._replace_with_accessor_call(node, accessor, parsed.edits)
                self.stats.deferred_references += 1
        return parsed.edits.apply()

    # ── rewrites ─────────────────────────────────────────────────

    @staticmethod
    def _replace_with_accessor_call(node: Node, accessor: str, edits: SourceEditBuffer) -> None:
        call = f"{accessor}()"
        if node.type == constants.SHORTHAND_PROPERTY_TYPE:
            # `{ a }` keeps its key
            call = f"{node_text(node)}: {call}"
        edits.replace(node, call)

    def _lazy_target(self, start: Node, parsed: _ParsedSource) -> Optional[Node]:
        """The variable declarator that *start* initializes, if any.

        Walks ancestors within *start*'s function scope; blocks are crossed.
        An assignment on the way is an unsupported shape and raises
        ``UnsupportedConstructError``.
        """
        scopes = parsed.scopes
        scope = scopes.enclosing_non_block(scopes.scope_of(start))
        parent = start.parent
        while parent is not None and scopes.enclosing_non_block(scopes.scope_of(parent)).index == scope.index:
            ptype = parent.type
            if ptype in constants.ASSIGNMENT_TYPES:
                self._emit(EventKind.IGNORED_TYPE, parent, ptype, todo=True)
                raise UnsupportedConstructError(ptype, str(source_location(parent)))
            if ptype == constants.VARIABLE_DECLARATOR_TYPE:
                return parent
            self._emit(EventKind.IGNORED_TYPE, name=ptype)
            parent = parent.parent
        return None

    def _make_assign_or_declaration_lazy(self, start: Node, parsed: _ParsedSource) -> Optional[str]:
        """Lazify the declaration that *start* initializes; returns its accessor name."""
        declarator = self._lazy_target(start, parsed)
        if declarator is None:
            return None
        return self._lazify_declarator(declarator, parsed)

    def _lazify_declarator(self, declarator: Node, parsed: _ParsedSource) -> Optional[str]:
        name_node = declarator.child_by_field_name("name")
        value_node = declarator.child_by_field_name("value")
        declaration = declarator.parent
        if name_node is None or value_node is None or declaration is None:
            raise PreconditionViolation("variable declarator without name or initializer")

        location = str(source_location(declarator))
        if name_node.type in constants.DESTRUCTURING_TYPES:
            raise UnsupportedConstructError(name_node.type, location, "destructuring target")

        name = node_text(name_node)
        if name in constants.GLOBALS:
            # Uses of a global's name are never rewritten, so the binding stays eager.
            logger.info("Keeping '%s' eager at %s: it shadows a global", name, location)
            return None

        container = declaration.parent
        if container is None or container.type not in constants.STATEMENT_LIST_TYPES:
            raise UnsupportedConstructError(
                container.type if container is not None else declaration.type,
                location,
                "declaration outside a statement list",
            )

        accessor = f"{constants.ACCESSOR_PREFIX}{name}"
        edits = parsed.edits
        if declaration.type == constants.LEXICAL_DECLARATION_TYPE:
            kind_node = declaration.child_by_field_name("kind")
            if kind_node is not None and node_text(kind_node) == "const":
                edits.replace(kind_node, "let")

        init = edits.text_of(value_node)
        if value_node.type not in _TIGHT_BINDING_TYPES:
            init = f"({init})"
        indent = _line_indent(edits.source, declaration.start_byte)
        edits.delete_range(name_node.end_byte, value_node.end_byte)
        edits.insert_after(
            declaration,
            f"\n{indent}function {accessor}() {{\n"
            f"{indent}  return {name} = {name} || {init};\n"
            f"{indent}}}",
        )

        self._lazy_requires_by_variable_name[name] = accessor
        self.stats.lazy_declarations += 1
        self._emit(EventKind.LAZY_REQUIRE, declarator, name, accessor=accessor)
        return accessor
