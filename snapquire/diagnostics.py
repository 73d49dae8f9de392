"""Diagnostics — structured trace events for every classification and rewrite.

Sinks only observe; nothing a sink does can change the transform's output.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel
from tree_sitter import Node

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    STATIC_REQUIRE = "static_require"
    STATIC_REQUIRE_RESOLVE = "static_require_resolve"
    LAZY_REQUIRE = "lazy_require"
    LAZY_REQUIRE_REFERENCE = "lazy_require_reference"
    DEFER_REQUIRE_REFERENCE = "defer_require_reference"
    IGNORED_TYPE = "ignored_type"


class SourceLocation(BaseModel):
    """1-based line, 0-based column of a tree-sitter node's start."""

    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


NO_SOURCE_LOCATION = SourceLocation(line=0, column=0)


def source_location(node: Node) -> SourceLocation:
    row, column = node.start_point
    return SourceLocation(line=row + 1, column=column)


class DiagnosticEvent(BaseModel):
    kind: EventKind
    name: str = ""
    detail: dict[str, Any] = {}
    code: str = ""
    source_location: SourceLocation = NO_SOURCE_LOCATION

    def __str__(self) -> str:
        parts = [self.kind.value]
        if self.name:
            parts.append(self.name)
        if self.code:
            parts.append(f"{self.code}|({self.source_location})")
        if self.detail:
            parts.append(", ".join(f"{k}={v}" for k, v in self.detail.items()))
        return " ".join(parts)


def stringify_node(node: Node) -> str:
    """Node source on a single line, newlines joined by ``+``."""
    return node.text.decode("utf-8").replace("\n", " + ")


def make_event(kind: EventKind, node: Node | None = None, name: str = "", **detail: Any) -> DiagnosticEvent:
    if node is None:
        return DiagnosticEvent(kind=kind, name=name, detail=detail)
    return DiagnosticEvent(
        kind=kind,
        name=name,
        detail=detail,
        code=stringify_node(node),
        source_location=source_location(node),
    )


class DiagnosticSink(ABC):
    """Receives diagnostic events from the lazification engine."""

    @abstractmethod
    def emit(self, event: DiagnosticEvent) -> None: ...


class LoggingDiagnosticSink(DiagnosticSink):
    """Default sink: decisions at INFO, ignored ancestor types at DEBUG."""

    def emit(self, event: DiagnosticEvent) -> None:
        if event.kind == EventKind.IGNORED_TYPE:
            logger.debug("%s", event)
        else:
            logger.info("%s", event)


class RecordingDiagnosticSink(DiagnosticSink):
    """Keeps every event in memory, in emission order."""

    def __init__(self):
        self.events: list[DiagnosticEvent] = []

    def emit(self, event: DiagnosticEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[DiagnosticEvent]:
        return [e for e in self.events if e.kind == kind]


class NullDiagnosticSink(DiagnosticSink):
    def emit(self, event: DiagnosticEvent) -> None:
        pass
