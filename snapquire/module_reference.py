"""Module Reference Normalizer — classify a require target and pin file paths."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tree_sitter import Node

from . import constants
from .call_classifier import call_arguments, literal_value
from .errors import PreconditionViolation
from .resolve_module import is_core_module, relative_module_path, resolve_non_core_module
from .source_edit import SourceEditBuffer

logger = logging.getLogger(__name__)


class ModuleKind(Enum):
    BUILTIN = "builtin"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ModuleReference:
    module_name: str
    full_module_path: Optional[str]
    kind: ModuleKind
    rewritten: bool = False


def node_module_name(node: Node) -> str:
    """Literal specifier of a require/require.resolve call.

    Raises ``PreconditionViolation`` unless the first argument is a literal
    with a non-null value.
    """
    args = call_arguments(node)
    if not args or args[0].type not in constants.LITERAL_TYPES:
        raise PreconditionViolation(f"{node.type} has no literal first argument")
    value = literal_value(args[0])
    if value is None:
        raise PreconditionViolation(f"{node.type} has a null literal argument")
    return value if isinstance(value, str) else args[0].text.decode("utf-8")


def _quote(path: str, original: str) -> str:
    quote = original[0] if original[:1] in ("'", '"') else "'"
    escaped = path.replace("\\", "\\\\").replace(quote, "\\" + quote)
    return f"{quote}{escaped}{quote}"


def normalize_module_path(
    node: Node, basedir: str, edits: SourceEditBuffer
) -> ModuleReference:
    """Resolve the call's specifier; rewrite file-system specifiers to relative paths."""
    module_name = node_module_name(node)
    if is_core_module(module_name):
        return ModuleReference(module_name, None, ModuleKind.BUILTIN)

    full_module_path = resolve_non_core_module(module_name, basedir)
    if full_module_path is None:
        logger.debug("Leaving unresolved module '%s' untouched", module_name)
        return ModuleReference(module_name, None, ModuleKind.UNRESOLVED)

    literal = call_arguments(node)[0]
    original = edits.original_text(literal)
    replacement = _quote(relative_module_path(full_module_path, basedir), original)
    rewritten = replacement != original
    if rewritten:
        edits.replace(literal, replacement)
    return ModuleReference(module_name, full_module_path, ModuleKind.RESOLVED, rewritten)
