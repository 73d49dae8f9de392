"""Tests for module path resolution."""

from __future__ import annotations

import json
import os

import pytest

from snapquire.errors import ModuleResolutionError
from snapquire.resolve_module import (
    is_core_module,
    relative_module_path,
    resolve_non_core_module,
    resolve_sync,
)


def _write(path, text: str = "") -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return str(path)


class TestCoreModules:
    def test_core_name(self):
        assert is_core_module("fs")
        assert is_core_module("fs/promises")

    def test_node_scheme(self):
        assert is_core_module("node:fs")

    def test_not_core(self):
        assert not is_core_module("lodash")

    def test_core_resolves_to_itself(self, tmp_path):
        assert resolve_sync("path", str(tmp_path)) == "path"

    def test_core_is_not_a_file_system_module(self, tmp_path):
        assert resolve_non_core_module("fs", str(tmp_path)) is None
        assert resolve_non_core_module("fs/promises", str(tmp_path)) is None


class TestRelativeSpecifiers:
    def test_exact_file(self, tmp_path):
        target = _write(tmp_path / "a.js")
        assert resolve_sync("./a.js", str(tmp_path)) == target

    def test_js_extension_added(self, tmp_path):
        target = _write(tmp_path / "lib" / "util.js")
        assert resolve_sync("./lib/util", str(tmp_path)) == target

    def test_json_extension_added(self, tmp_path):
        target = _write(tmp_path / "data.json", "{}")
        assert resolve_sync("./data", str(tmp_path)) == target

    def test_js_preferred_over_json(self, tmp_path):
        target = _write(tmp_path / "conf.js")
        _write(tmp_path / "conf.json", "{}")
        assert resolve_sync("./conf", str(tmp_path)) == target

    def test_directory_index(self, tmp_path):
        target = _write(tmp_path / "pkg" / "index.js")
        assert resolve_sync("./pkg", str(tmp_path)) == target

    def test_parent_directory(self, tmp_path):
        target = _write(tmp_path / "shared.js")
        sub = tmp_path / "sub"
        sub.mkdir()
        assert resolve_sync("../shared", str(sub)) == target

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ModuleResolutionError, match="Cannot find module"):
            resolve_sync("./nope", str(tmp_path))

    def test_missing_file_is_none(self, tmp_path):
        assert resolve_non_core_module("./nope", str(tmp_path)) is None


class TestNodeModules:
    def test_package_main(self, tmp_path):
        pkg = tmp_path / "node_modules" / "dep"
        _write(pkg / "package.json", json.dumps({"main": "lib/main.js"}))
        target = _write(pkg / "lib" / "main.js")
        assert resolve_sync("dep", str(tmp_path)) == target

    def test_package_main_without_extension(self, tmp_path):
        pkg = tmp_path / "node_modules" / "dep"
        _write(pkg / "package.json", json.dumps({"main": "entry"}))
        target = _write(pkg / "entry.js")
        assert resolve_sync("dep", str(tmp_path)) == target

    def test_package_without_main_uses_index(self, tmp_path):
        pkg = tmp_path / "node_modules" / "dep"
        _write(pkg / "package.json", json.dumps({"name": "dep"}))
        target = _write(pkg / "index.js")
        assert resolve_sync("dep", str(tmp_path)) == target

    def test_malformed_manifest_falls_back_to_index(self, tmp_path):
        pkg = tmp_path / "node_modules" / "dep"
        _write(pkg / "package.json", "{not json")
        target = _write(pkg / "index.js")
        assert resolve_sync("dep", str(tmp_path)) == target

    def test_package_file(self, tmp_path):
        target = _write(tmp_path / "node_modules" / "dep" / "sub.js")
        assert resolve_sync("dep/sub", str(tmp_path)) == target

    def test_walks_up_from_nested_directory(self, tmp_path):
        target = _write(tmp_path / "node_modules" / "dep" / "index.js")
        nested = tmp_path / "src" / "deep"
        nested.mkdir(parents=True)
        assert resolve_sync("dep", str(nested)) == target

    def test_unknown_package_raises(self, tmp_path):
        with pytest.raises(ModuleResolutionError):
            resolve_sync("definitely-not-installed-pkg", str(tmp_path))


class TestRelativeModulePath:
    def test_prefixes_dot_slash(self, tmp_path):
        full = os.path.join(str(tmp_path), "lib", "a.js")
        assert relative_module_path(full, str(tmp_path)) == "./lib/a.js"

    def test_parent_path_kept(self, tmp_path):
        full = os.path.join(str(tmp_path), "a.js")
        sub = os.path.join(str(tmp_path), "sub")
        assert relative_module_path(full, sub) == "../a.js"

    def test_node_modules_path(self, tmp_path):
        full = os.path.join(str(tmp_path), "node_modules", "dep", "index.js")
        assert relative_module_path(full, str(tmp_path)) == "./node_modules/dep/index.js"
