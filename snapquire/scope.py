"""Lexical scope arena built from a tree-sitter JavaScript tree.

Scopes are established by the program, by every function-like node, by catch
clauses and by blocks (statement blocks, switch bodies and ``for`` heads).
``let``/``const``/``class`` and function declarations bind in the nearest
scope; ``var`` skips blocks and catch clauses and binds in the enclosing
function (or program) scope. A function or catch body shares the scope of
its owner. Scopes live in a flat list and refer to their parent by index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from tree_sitter import Node

from . import constants

logger = logging.getLogger(__name__)


class ScopeKind(Enum):
    PROGRAM = "program"
    FUNCTION = "function"
    CATCH = "catch"
    BLOCK = "block"


@dataclass
class Scope:
    """A single lexical scope.

    ``depth`` counts the function and catch scopes around this one; blocks
    do not add to it.
    """

    index: int
    node: Node
    kind: ScopeKind
    parent: Optional[int]
    depth: int
    declared: set[str] = field(default_factory=set)

    @property
    def is_global(self) -> bool:
        return self.parent is None

    def declares(self, name: str) -> bool:
        return name in self.declared


def node_text(node: Node) -> str:
    return node.text.decode("utf-8")


def pattern_names(node: Node) -> list[str]:
    """Names bound by a binding target (identifier or destructuring pattern)."""
    ntype = node.type
    if ntype in (constants.IDENTIFIER_TYPE, "shorthand_property_identifier_pattern"):
        return [node_text(node)]
    if ntype == "pair_pattern":
        value = node.child_by_field_name("value")
        return pattern_names(value) if value is not None else []
    if ntype in ("assignment_pattern", "object_assignment_pattern"):
        left = node.child_by_field_name("left")
        return pattern_names(left) if left is not None else []
    if ntype in ("object_pattern", "array_pattern", "rest_pattern"):
        return [name for child in node.named_children for name in pattern_names(child)]
    return []


def _parameter_names(node: Node) -> list[str]:
    params = node.child_by_field_name("parameters")
    if params is not None:
        return [name for child in params.named_children for name in pattern_names(child)]
    single = node.child_by_field_name("parameter")
    return pattern_names(single) if single is not None else []


def _loop_variable_kind(node: Node) -> Optional[str]:
    """``var``/``let``/``const`` of a ``for (... in/of ...)`` head, None for ``for (k of ...)``."""
    kind = node.child_by_field_name("kind")
    if kind is not None:
        return node_text(kind)
    return next(
        (child.type for child in node.children if child.type in ("var", "let", "const")),
        None,
    )


def _opens_block(node: Node) -> bool:
    if node.type not in constants.BLOCK_SCOPE_TYPES:
        return False
    if node.type != constants.STATEMENT_BLOCK_TYPE:
        return True
    parent = node.parent
    return parent is None or parent.type not in (
        constants.FUNCTION_SCOPE_TYPES | {constants.CATCH_CLAUSE_TYPE}
    )


class ScopeTree:
    """Arena of scopes for one parsed tree."""

    def __init__(self, root: Node):
        self._scopes: list[Scope] = []
        self._by_node: dict[int, int] = {}
        self._build(root)

    # ── construction ─────────────────────────────────────────────

    def _new_scope(self, node: Node, kind: ScopeKind, parent: Optional[int]) -> int:
        depth = 0
        if parent is not None:
            depth = self[parent].depth + (0 if kind == ScopeKind.BLOCK else 1)
        index = len(self)
        self._scopes.append(Scope(index, node, kind, parent, depth))
        self._by_node[node.id] = index
        return index

    def _declare_lexical(self, index: int, names: list[str]) -> None:
        self[index].declared.update(names)

    def _declare_var(self, index: int, names: list[str]) -> None:
        scope = self[index]
        while scope.kind in (ScopeKind.BLOCK, ScopeKind.CATCH) and scope.parent is not None:
            scope = self[scope.parent]
        scope.declared.update(names)

    def _open_scope(self, node: Node, current: int) -> int:
        ntype = node.type
        if ntype == constants.CATCH_CLAUSE_TYPE:
            inner = self._new_scope(node, ScopeKind.CATCH, current)
            param = node.child_by_field_name("parameter")
            if param is not None:
                self[inner].declared.update(pattern_names(param))
            return inner

        name_node = node.child_by_field_name("name")
        if ntype in constants.FUNCTION_DECLARATION_TYPES and name_node is not None:
            self._declare_lexical(current, [node_text(name_node)])
        inner = self._new_scope(node, ScopeKind.FUNCTION, current)
        if ntype in constants.FUNCTION_EXPRESSION_TYPES | {"generator_function"}:
            if name_node is not None:
                self[inner].declared.add(node_text(name_node))
        self[inner].declared.update(_parameter_names(node))
        return inner

    def _declare_loop_variable(self, node: Node, current: int) -> None:
        kind = _loop_variable_kind(node)
        left = node.child_by_field_name("left")
        if kind is None or left is None:
            return
        if kind == "var":
            self._declare_var(current, pattern_names(left))
        else:
            self._declare_lexical(current, pattern_names(left))

    def _build(self, root: Node) -> None:
        stack: list[tuple[Node, int]] = []
        top = self._new_scope(root, ScopeKind.PROGRAM, None)
        stack.extend((child, top) for child in reversed(root.named_children))
        while stack:
            node, current = stack.pop()
            ntype = node.type
            if ntype in constants.SCOPE_TYPES:
                current = self._open_scope(node, current)
            elif _opens_block(node):
                current = self._new_scope(node, ScopeKind.BLOCK, current)

            if ntype == constants.VARIABLE_DECLARATOR_TYPE:
                name_node = node.child_by_field_name("name")
                declaration = node.parent
                if name_node is not None and declaration is not None:
                    names = pattern_names(name_node)
                    if declaration.type == constants.LEXICAL_DECLARATION_TYPE:
                        self._declare_lexical(current, names)
                    else:
                        self._declare_var(current, names)
            elif ntype in constants.CLASS_DECLARATION_TYPES:
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    self._declare_lexical(current, [node_text(name_node)])
            elif ntype == constants.FOR_IN_STATEMENT_TYPE:
                self._declare_loop_variable(node, current)
            stack.extend((child, current) for child in reversed(node.named_children))
        logger.debug("Built %d scopes", len(self))

    # ── queries ──────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._scopes)

    def __getitem__(self, index: int) -> Scope:
        return self._scopes[index]

    @property
    def global_scope(self) -> Scope:
        return self[0]

    def scope_of(self, node: Node) -> Scope:
        """Innermost scope enclosing *node*; a scope node belongs to its own scope."""
        current: Optional[Node] = node
        while current is not None:
            index = self._by_node.get(current.id)
            if index is not None:
                return self[index]
            current = current.parent
        return self.global_scope

    def parent(self, scope: Scope) -> Optional[Scope]:
        return None if scope.parent is None else self[scope.parent]

    def chain(self, scope: Scope) -> Iterator[Scope]:
        """Yield *scope* and each of its ancestors out to the global scope."""
        current: Optional[Scope] = scope
        while current is not None:
            yield current
            current = self.parent(current)

    def enclosing_non_block(self, scope: Scope) -> Scope:
        """Nearest function, catch or program scope at or around *scope*."""
        return next(s for s in self.chain(scope) if s.kind != ScopeKind.BLOCK)
