"""Module path resolution following Node's ``require.resolve`` algorithm.

Only the subset the transform needs: core modules, relative/absolute file
specifiers, directory packages (``package.json`` ``main`` and ``index``
files) and ``node_modules`` lookup, with ``.js`` and ``.json`` extensions.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from . import constants
from .errors import ModuleResolutionError

logger = logging.getLogger(__name__)


def is_core_module(specifier: str) -> bool:
    if specifier.startswith(constants.NODE_SCHEME_PREFIX):
        return True
    return specifier in constants.NODE_CORE_MODULES


def _is_path_specifier(specifier: str) -> bool:
    return (
        specifier in (".", "..")
        or specifier.startswith(("./", "../", "/"))
        or os.path.isabs(specifier)
    )


def _load_as_file(candidate: Path) -> Optional[Path]:
    if candidate.is_file():
        return candidate
    for ext in constants.RESOLVE_EXTENSIONS:
        with_ext = candidate.with_name(candidate.name + ext)
        if with_ext.is_file():
            return with_ext
    return None


def _package_main(directory: Path) -> Optional[str]:
    manifest = directory / constants.PACKAGE_MANIFEST
    if not manifest.is_file():
        return None
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.debug("Ignoring malformed %s: %s", manifest, exc)
        return None
    main = data.get("main") if isinstance(data, dict) else None
    return main if isinstance(main, str) and main else None


def _load_as_directory(directory: Path) -> Optional[Path]:
    if not directory.is_dir():
        return None
    main = _package_main(directory)
    if main is not None:
        target = directory / main
        found = _load_as_file(target) or _load_index(target)
        if found is not None:
            return found
    return _load_index(directory)


def _load_index(directory: Path) -> Optional[Path]:
    if not directory.is_dir():
        return None
    return _load_as_file(directory / constants.INDEX_BASENAME)


def _load_module(target: Path) -> Optional[Path]:
    return _load_as_file(target) or _load_as_directory(target)


def _node_modules_dirs(basedir: Path) -> list[Path]:
    return [
        d / constants.NODE_MODULES_DIR
        for d in (basedir, *basedir.parents)
        if d.name != constants.NODE_MODULES_DIR
    ]


def resolve_sync(specifier: str, basedir: str) -> str:
    """Resolve *specifier* from *basedir*; core modules resolve to their own name.

    Raises ``ModuleResolutionError`` when no file matches.
    """
    if is_core_module(specifier) and not _is_path_specifier(specifier):
        return specifier

    base = Path(os.path.abspath(basedir))
    if _is_path_specifier(specifier):
        target = Path(os.path.normpath(base / specifier))
        found = _load_module(target)
    else:
        found = next(
            (
                hit
                for modules_dir in _node_modules_dirs(base)
                if (hit := _load_module(modules_dir / specifier)) is not None
            ),
            None,
        )
    if found is None:
        raise ModuleResolutionError(specifier, str(base))
    return os.path.normpath(str(found))


def resolve_non_core_module(specifier: str, basedir: str) -> Optional[str]:
    """Full path of a file-system module, or None for core modules and failures."""
    try:
        full_path = resolve_sync(specifier, basedir)
    except ModuleResolutionError as exc:
        logger.debug("%s", exc)
        return None
    is_core = is_core_module(full_path) or (os.sep not in full_path and "/" not in full_path)
    return None if is_core else full_path


def relative_module_path(full_module_path: str, basedir: str) -> str:
    """Forward-slash path of *full_module_path* relative to *basedir*, ``./``-prefixed."""
    rel_path = os.path.relpath(full_module_path, basedir).replace("\\", "/")
    return rel_path if rel_path.startswith(("./", "../")) else f"./{rel_path}"
