"""Topology Analyzer — does a position run unconditionally at module load?"""

from __future__ import annotations

from typing import Optional

from tree_sitter import Node

from . import constants
from .scope import ScopeTree


def syntactic_parent(node: Node) -> Optional[Node]:
    """Parent of *node*, skipping parentheses and argument-list wrappers."""
    parent = node.parent
    while parent is not None and parent.type in constants.TRANSPARENT_PARENT_TYPES:
        parent = parent.parent
    return parent


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression":
        node = next((c for c in node.named_children if c.type != "comment"), None)
    return node


def _is_callee(call: Node, node: Node) -> bool:
    return unwrap_parens(call.child_by_field_name("function")) == node


def _is_invoked_wrapper(fn: Node) -> bool:
    parent = syntactic_parent(fn)
    if parent is None:
        return False
    # (function () { ... })()
    if parent.type == constants.CALL_EXPRESSION_TYPE and _is_callee(parent, fn):
        return True
    # (function () { ... }).call(this)
    grandparent = syntactic_parent(parent)
    return grandparent is not None and grandparent.type == constants.CALL_EXPRESSION_TYPE


def is_top_level(node: Node, scopes: ScopeTree) -> bool:
    """True for the global scope and for the body of a single invoked function wrapper.

    Blocks are transparent, so `if (...) { ... }` at the top of the script is
    still top level. Positions nested two or more function scopes deep are never top level.
    """
    scope = scopes.enclosing_non_block(scopes.scope_of(node))
    if scope.is_global:
        return True
    if scope.depth != 1:
        return False

    current: Optional[Node] = node
    while current is not None:
        if current.type in constants.FUNCTION_EXPRESSION_TYPES and _is_invoked_wrapper(current):
            return True
        current = current.parent
    return False
