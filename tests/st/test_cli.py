"""CLI system tests

End-to-end runs of ``verity diff``, ``verity snapshot`` and ``verity config``.
"""
import json

import pytest

from verity.cli import main


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestDiffCmd:
    """diff sub-command"""

    def test_identical(self, tmp_path, capsys):
        a = write_json(tmp_path / "a.json", {"k": [1, 2]})
        b = write_json(tmp_path / "b.json", {"k": [1, 2]})
        assert main(["diff", a, b]) == 0
        assert "No differences." in capsys.readouterr().out

    def test_differences_listed(self, tmp_path, capsys):
        a = write_json(tmp_path / "a.json", {"k": 1, "x": 0})
        b = write_json(tmp_path / "b.json", {"k": 2, "y": 0})
        assert main(["diff", a, b, "--no-color"]) == 1
        out = capsys.readouterr().out
        assert "3 difference(s)" in out
        assert '["k"]' in out
        assert "unexpected" in out and "missing" in out

    def test_max_depth(self, tmp_path, capsys):
        nested = {"a": {"b": {"c": {"d": 1}}}}
        a = write_json(tmp_path / "a.json", nested)
        assert main(["diff", a, a, "--max-depth", "2"]) == 1
        assert "too_deep" in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        a = write_json(tmp_path / "a.json", {})
        assert main(["diff", a, str(tmp_path / "nope.json")]) == 2

    def test_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{", encoding="utf-8")
        assert main(["diff", str(bad), str(bad)]) == 2


class TestSnapshotCmd:
    """snapshot sub-command"""

    def test_stdout(self, tmp_path, capsys):
        src = write_json(tmp_path / "in.json", {"b": 1, "a": 2})
        assert main(["snapshot", src]) == 0
        assert capsys.readouterr().out == '{\n  "a": 2,\n  "b": 1\n}\n'

    def test_output_file(self, tmp_path):
        src = write_json(tmp_path / "in.json", {"b": 1, "a": 2})
        out = tmp_path / "snap" / "out.json"
        assert main(["snapshot", src, "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8").startswith('{\n  "a": 2')


class TestConfigCmd:
    """config sub-command"""

    def test_show(self, tmp_path, capsys):
        path = tmp_path / "verity.yaml"
        path.write_text("tolerance: 0.5\nadapter: console\n", encoding="utf-8")
        assert main(["config", str(path)]) == 0
        out = capsys.readouterr().out
        assert "0.5" in out
        assert "ConsoleAdapter" in out

    def test_invalid(self, tmp_path):
        path = tmp_path / "verity.yaml"
        path.write_text("max_details: 0\n", encoding="utf-8")
        assert main(["config", str(path)]) == 2

    def test_missing(self, tmp_path):
        assert main(["config", str(tmp_path / "absent.yaml")]) == 2


def test_no_command_prints_help(capsys):
    assert main([]) == 2
    assert "usage" in capsys.readouterr().out.lower()


def test_unknown_command_exits():
    with pytest.raises(SystemExit):
        main(["frobnicate"])
