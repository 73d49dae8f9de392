"""Error taxonomy for the lazification transform."""

from __future__ import annotations


class SnapquireError(Exception):
    """Base class for every error raised by snapquire."""


class PreconditionViolation(SnapquireError, AssertionError):
    """A caller fed a node that does not satisfy an operation's precondition."""


class UnsupportedConstructError(SnapquireError, NotImplementedError):
    """The input contains a shape the transform cannot lazify."""

    def __init__(self, node_type: str, location: str = "", reason: str = ""):
        self.node_type = node_type
        self.location = location
        self.reason = reason
        message = f"Unimplemented: cannot lazify through {node_type}"
        if location:
            message += f" at {location}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class SourceParseError(SnapquireError, ValueError):
    """The source text could not be parsed."""

    def __init__(self, line: int, column: int, snippet: str = ""):
        self.line = line
        self.column = column
        self.snippet = snippet
        message = f"Syntax error at {line}:{column}"
        if snippet:
            message += f": {snippet!r}"
        super().__init__(message)


class ModuleResolutionError(SnapquireError, LookupError):
    """A module specifier could not be located on disk."""

    def __init__(self, specifier: str, basedir: str):
        self.specifier = specifier
        self.basedir = basedir
        super().__init__(f"Cannot find module '{specifier}' from '{basedir}'")
