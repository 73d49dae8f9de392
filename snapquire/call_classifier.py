"""Call Classifier — syntactic recognition of ``require`` call shapes."""

from __future__ import annotations

import re
from typing import Any, Optional

from tree_sitter import Node

from . import constants

_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_ESCAPE_PATTERN = re.compile(
    r"\\(?:u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|x([0-9a-fA-F]{2})|(\r\n|\n|\r|\u2028|\u2029)|(.))",
    re.DOTALL,
)


def _unescape_match(match: re.Match) -> str:
    braced, unicode4, hex2, continuation, char = match.groups()
    if braced or unicode4 or hex2:
        return chr(int(braced or unicode4 or hex2, 16))
    if continuation:
        return ""
    return _SIMPLE_ESCAPES.get(char, char)


def unescape_js_string(body: str) -> str:
    """Decode JavaScript escape sequences in the body of a string literal."""
    if "\\" not in body:
        return body
    return _ESCAPE_PATTERN.sub(_unescape_match, body)


def call_arguments(node: Node) -> list[Node]:
    """Named argument nodes of a call, excluding comments."""
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return [c for c in args.named_children if c.type != "comment"]


def literal_argument(node: Node) -> Optional[Node]:
    """The sole literal argument of *node*, or None."""
    if node.type != constants.CALL_EXPRESSION_TYPE:
        return None
    args = call_arguments(node)
    if len(args) != 1 or args[0].type not in constants.LITERAL_TYPES:
        return None
    return args[0]


def literal_value(node: Node) -> Any:
    """Python value of a literal node (strings are unescaped)."""
    text = node.text.decode("utf-8")
    ntype = node.type
    if ntype == "string":
        return unescape_js_string(text[1:-1])
    if ntype == "true":
        return True
    if ntype == "false":
        return False
    if ntype == "null":
        return None
    # number and regex values are kept as written
    return text


def _is_require_identifier(node: Optional[Node]) -> bool:
    return (
        node is not None
        and node.type == constants.IDENTIFIER_TYPE
        and node.text.decode("utf-8") == constants.REQUIRE_IDENTIFIER
    )


def is_static_require(node: Node) -> bool:
    """``require(<literal>)``."""
    if node.type != constants.CALL_EXPRESSION_TYPE:
        return False
    return _is_require_identifier(node.child_by_field_name("function")) and (
        literal_argument(node) is not None
    )


def is_static_require_resolve(node: Node) -> bool:
    """``require.resolve(<literal>)``."""
    if node.type != constants.CALL_EXPRESSION_TYPE:
        return False
    callee = node.child_by_field_name("function")
    if callee is None or callee.type != constants.MEMBER_EXPRESSION_TYPE:
        return False
    prop = callee.child_by_field_name("property")
    return (
        _is_require_identifier(callee.child_by_field_name("object"))
        and prop is not None
        and prop.text.decode("utf-8") == constants.RESOLVE_PROPERTY
        and literal_argument(node) is not None
    )
