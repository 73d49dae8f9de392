"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from tree_sitter import Node, Tree

from . import constants
from .errors import SourceParseError

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        return tslp.get_parser(language)


def _first_error_node(node: Node) -> Optional[Node]:
    """Depth-first search for the first ERROR or MISSING node under *node*."""
    if node.is_error or node.is_missing:
        return node
    if not node.has_error:
        return None
    return next(
        (
            found
            for child in node.children
            if (found := _first_error_node(child)) is not None
        ),
        None,
    )


class Parser:
    """Thin wrapper around a parser factory that rejects malformed source."""

    def __init__(self, parser_factory: ParserFactory, language: str = constants.JAVASCRIPT_LANGUAGE):
        self._factory = parser_factory
        self._language = language

    def parse(self, source: bytes) -> Tree:
        parser = self._factory.get_parser(self._language)
        tree = parser.parse(source)
        if tree.root_node.has_error:
            bad = _first_error_node(tree.root_node) or tree.root_node
            row, column = bad.start_point
            snippet = source[bad.start_byte : bad.end_byte].decode("utf-8", "replace")
            logger.debug("Parse error in %s source at %d:%d", self._language, row + 1, column)
            raise SourceParseError(row + 1, column, snippet[:40])
        return tree
