"""Shadow/Reference Resolver — which identifier occurrences read a lazy binding."""

from __future__ import annotations

from typing import Mapping, Optional

from tree_sitter import Node

from . import constants
from .scope import ScopeTree, node_text

REFERENCE_NODE_TYPES: frozenset[str] = frozenset(
    {constants.IDENTIFIER_TYPE, constants.SHORTHAND_PROPERTY_TYPE}
)

# parent type -> fields whose identifier child binds (or writes) rather than reads
_BINDING_FIELDS: dict[str, tuple[str, ...]] = {
    "variable_declarator": ("name",),
    "function_declaration": ("name",),
    "generator_function_declaration": ("name",),
    "function": ("name",),
    "function_expression": ("name",),
    "generator_function": ("name",),
    "class_declaration": ("name",),
    "class": ("name",),
    "arrow_function": ("parameter",),
    "catch_clause": ("parameter",),
    "assignment_pattern": ("left",),
    "object_assignment_pattern": ("left",),
    "pair_pattern": ("key", "value"),
    "assignment_expression": ("left",),
    "augmented_assignment_expression": ("left",),
    "update_expression": ("argument",),
    "for_in_statement": ("left",),
}

# parent types whose every identifier child is a binding
_BINDING_CONTAINERS: frozenset[str] = frozenset(
    {"formal_parameters", "array_pattern", "rest_pattern", "object_pattern"}
)

_NON_REFERENCE_PARENTS: frozenset[str] = frozenset(
    {
        "import_specifier",
        "import_clause",
        "namespace_import",
        "export_specifier",
        "labeled_statement",
        "break_statement",
        "continue_statement",
    }
)


def _is_field(parent: Node, field: str, node: Node) -> bool:
    return parent.child_by_field_name(field) == node


def is_reference(node: Node) -> bool:
    """True if the identifier occurrence reads the binding it names."""
    if node.type not in REFERENCE_NODE_TYPES:
        return False
    parent = node.parent
    if parent is None:
        return True
    ptype = parent.type
    if ptype in _BINDING_CONTAINERS or ptype in _NON_REFERENCE_PARENTS:
        return False
    fields = _BINDING_FIELDS.get(ptype, ())
    return not any(_is_field(parent, f, node) for f in fields)


def is_destructured_property_key(node: Node) -> bool:
    parent = node.parent
    return (
        parent is not None
        and parent.type == "pair_pattern"
        and _is_field(parent, "key", node)
    )


def _is_accessor_declaration_scope(scope_node: Node, accessor: str) -> bool:
    if scope_node.type not in constants.FUNCTION_DECLARATION_TYPES:
        return False
    name = scope_node.child_by_field_name("name")
    return name is not None and node_text(name) == accessor


def _is_accessor_assignment_scope(scope_node: Node, accessor: str) -> bool:
    """``get_x = function () { ... }``"""
    if scope_node.type not in constants.FUNCTION_EXPRESSION_TYPES:
        return False
    parent = scope_node.parent
    while parent is not None and parent.type == "parenthesized_expression":
        parent = parent.parent
    if parent is None or parent.type != "assignment_expression":
        return False
    left = parent.child_by_field_name("left")
    return left is not None and node_text(left) == accessor


def lazy_accessor_for(
    node: Node, registry: Mapping[str, str], scopes: ScopeTree
) -> Optional[str]:
    """Accessor name if *node* reads a registered lazy binding, else None."""
    if node.type not in REFERENCE_NODE_TYPES:
        return None
    accessor = registry.get(node_text(node))
    if accessor is None:
        return None
    scope_node = scopes.scope_of(node).node
    if _is_accessor_declaration_scope(scope_node, accessor):
        return None
    if _is_accessor_assignment_scope(scope_node, accessor):
        return None
    if is_destructured_property_key(node):
        return None
    return accessor if is_reference(node) else None


def is_reference_to_lazy_require(
    node: Node, registry: Mapping[str, str], scopes: ScopeTree
) -> bool:
    return lazy_accessor_for(node, registry, scopes) is not None


def is_reference_to_shadowed_variable(node: Node, scopes: ScopeTree) -> bool:
    """True if a nearer declaration hides the outermost binding of the name.

    Built-in global names count as an implicit first declaration.
    """
    name = node_text(node)
    found_declaration = name in constants.GLOBALS
    for scope in scopes.chain(scopes.scope_of(node)):
        if scope.declares(name):
            if found_declaration:
                return True
            found_declaration = True
    return False
