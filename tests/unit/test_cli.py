"""Tests for the snapquire command line."""

from __future__ import annotations

from snapquire.cli import build_arg_parser, main


def _script(tmp_path, text: str):
    path = tmp_path / "main.js"
    path.write_text(text)
    return path


class TestArgParser:
    def test_defaults(self):
        args = build_arg_parser().parse_args(["main.js"])
        assert args.file == "main.js"
        assert args.basedir is None
        assert args.keep_eager == []
        assert not args.stats
        assert args.verbose == 0

    def test_repeated_keep_eager(self):
        args = build_arg_parser().parse_args(["main.js", "-k", "a", "--keep-eager", "b"])
        assert args.keep_eager == ["a", "b"]


class TestMain:
    def test_prints_result(self, tmp_path, capsys):
        path = _script(tmp_path, "const a = require('a');\nfunction main() { return a; }\n")
        assert main([str(path)]) == 0
        out = capsys.readouterr().out
        assert "function get_a() {" in out
        assert "return get_a();" in out

    def test_output_file(self, tmp_path, capsys):
        path = _script(tmp_path, "const a = require('a');\n")
        target = tmp_path / "out.js"
        assert main([str(path), "--output", str(target)]) == 0
        assert capsys.readouterr().out == ""
        assert target.read_text().startswith("let a;\n")

    def test_keep_eager(self, tmp_path, capsys):
        (tmp_path / "lib.js").write_text("")
        path = _script(tmp_path, "const lib = require('./lib');\n")
        assert main([str(path), "--keep-eager", "./lib"]) == 0
        assert capsys.readouterr().out == "const lib = require('./lib.js');\n"

    def test_stats_on_stderr(self, tmp_path, capsys):
        path = _script(tmp_path, "const a = require('a');\n")
        assert main([str(path), "--stats"]) == 0
        assert "Transform Statistics" in capsys.readouterr().err

    def test_unsupported_input_fails(self, tmp_path, capsys):
        path = _script(tmp_path, "exports.a = require('a');\n")
        assert main([str(path)]) == 1
        assert "Unimplemented" in capsys.readouterr().err

    def test_missing_file_fails(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.js")]) == 1
        assert capsys.readouterr().err.startswith("snapquire:")
