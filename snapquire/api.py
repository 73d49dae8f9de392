"""Composable API functions for the snapquire transform.

Each function corresponds to a CLI workflow but is callable programmatically
without argparse.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .diagnostics import DiagnosticSink
from .lazify import Snapquirer
from .policy import DeferralPolicy, ShouldDefer
from .transform_types import TransformOptions

logger = logging.getLogger(__name__)


def construct(
    source: str,
    full_file_path: Optional[str] = None,
    basedir: Optional[str] = None,
    should_defer: DeferralPolicy | ShouldDefer | None = None,
    diagnostics: Optional[DiagnosticSink] = None,
) -> Snapquirer:
    """Build a transformer for *source*.

    Args:
        source: JavaScript source text.
        full_file_path: Absolute path of the script; its directory becomes
            the module resolution base unless *basedir* is given.
        basedir: Directory used for module resolution.
        should_defer: Policy or ``(module_name, resolved) -> bool`` callable
            deciding which non-core requires become lazy. Defaults to all.
        diagnostics: Sink receiving trace events. Defaults to logging.

    Returns:
        A Snapquirer whose ``transform()`` returns the rewritten source.
    """
    options = TransformOptions(
        full_file_path=full_file_path,
        basedir=basedir,
        should_defer=should_defer,
        diagnostics=diagnostics,
    )
    return Snapquirer(source, options)


def transform_source(
    source: str,
    full_file_path: Optional[str] = None,
    basedir: Optional[str] = None,
    should_defer: DeferralPolicy | ShouldDefer | None = None,
    diagnostics: Optional[DiagnosticSink] = None,
) -> str:
    """Rewrite *source* and return the lazified text."""
    return construct(source, full_file_path, basedir, should_defer, diagnostics).transform()


def transform_file(
    path: str | os.PathLike,
    basedir: Optional[str] = None,
    should_defer: DeferralPolicy | ShouldDefer | None = None,
    diagnostics: Optional[DiagnosticSink] = None,
) -> str:
    """Read *path* (UTF-8), rewrite it, and return the lazified text."""
    full_path = Path(path).resolve()
    logger.info("Transforming file %s", full_path)
    source = full_path.read_text(encoding="utf-8")
    return transform_source(source, str(full_path), basedir, should_defer, diagnostics)
