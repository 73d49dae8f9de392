"""Transform configuration and statistics (pure data, no business logic)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .diagnostics import DiagnosticSink
from .policy import DeferralPolicy, ShouldDefer


@dataclass(frozen=True)
class TransformOptions:
    """Groups transform configuration."""

    full_file_path: Optional[str] = None
    basedir: Optional[str] = None
    should_defer: DeferralPolicy | ShouldDefer | None = None
    diagnostics: Optional[DiagnosticSink] = None

    def resolved_basedir(self) -> str:
        """Directory used for module resolution: basedir, else the file's directory, else cwd."""
        if self.basedir is not None:
            return os.path.abspath(self.basedir)
        if self.full_file_path is not None:
            return os.path.dirname(os.path.abspath(self.full_file_path))
        return os.getcwd()


@dataclass
class TransformStats:
    """Counters collected during one transform run."""

    static_requires: int = 0
    static_require_resolves: int = 0
    normalized_paths: int = 0
    lazy_declarations: int = 0
    top_level_references: int = 0
    deferred_references: int = 0
    reference_passes: int = 0

    def report(self) -> str:
        rows = [
            ("Static requires", self.static_requires),
            ("require.resolve calls", self.static_require_resolves),
            ("Normalized paths", self.normalized_paths),
            ("Lazy declarations", self.lazy_declarations),
            ("Top-level references", self.top_level_references),
            ("Deferred references", self.deferred_references),
            ("Reference passes", self.reference_passes),
        ]
        lines = ["═══ Transform Statistics ═══"]
        lines.extend(f"  {label:<24} {value:>6}" for label, value in rows)
        return "\n".join(lines)
