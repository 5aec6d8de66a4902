"""End-to-end CLI tests.

Most tests call mindmapper.cli.main() in-process; a few invoke
`python -m mindmapper` as a subprocess to verify real command execution.
"""

from __future__ import annotations

import io
import json
import subprocess
import sys

import pytest

from mindmapper.cli import main

OUTLINE = "Design homepage\n  Create wireframes\nDeploy app\n"


def _run_mindmapper(*args: str, cwd=None, stdin: str | None = None) -> subprocess.CompletedProcess:
    """Run mindmapper as a subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "mindmapper", *args],
        capture_output=True,
        text=True,
        cwd=cwd,
        input=stdin,
        timeout=60,
    )


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory with an outline file."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "tasks.txt").write_text(OUTLINE)
    return tmp_path


class TestCLIHelp:
    """Test --help and no-command behavior."""

    def test_main_help(self):
        result = _run_mindmapper("--help")
        assert result.returncode == 0
        assert "mindmapper" in result.stdout

    def test_version(self):
        result = _run_mindmapper("--version")
        assert result.returncode == 0
        assert result.stdout.startswith("mindmapper ")

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


class TestGenerateCommand:
    """Test the generate command."""

    def test_json_to_stdout(self, workdir, capsys):
        assert main(["generate", "tasks.txt"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["format"] == "mindmap-json"
        assert [n["category"] for n in data["nodes"]] == [None, "Design", "Design", "Deployment"]
        assert data["metadata"]["input_text"] == OUTLINE

    def test_format_from_extension(self, workdir):
        assert main(["generate", "tasks.txt", "-o", "tasks.mm"]) == 0

        content = (workdir / "tasks.mm").read_text()
        assert content.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert '<node TEXT="Create wireframes"/>' in content

    def test_explicit_format(self, workdir, capsys):
        assert main(["generate", "tasks.txt", "--format", "text"]) == 0

        assert capsys.readouterr().out == "# Mind Map Export\n\n" + OUTLINE

    def test_no_auto_group(self, workdir, capsys):
        assert main(["generate", "tasks.txt", "--no-auto-group", "--layout", "force"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert {n["category"] for n in data["nodes"][1:]} == {"Other"}
        assert data["metadata"]["layout"] == "force"
        assert data["metadata"]["auto_group"] is False

    def test_stdin(self, workdir, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("A\n  B\n"))

        assert main(["generate", "-", "-f", "text"]) == 0
        assert capsys.readouterr().out == "# Mind Map Export\n\nA\n  B\n"

    def test_empty_outline_fails(self, workdir, capsys):
        (workdir / "empty.txt").write_text("\n\n")

        assert main(["generate", "empty.txt"]) == 1
        assert "empty" in capsys.readouterr().err

    def test_missing_file_fails(self, workdir, capsys):
        assert main(["generate", "nope.txt"]) == 1
        assert "Error" in capsys.readouterr().err

    def test_config_file_applies(self, workdir, capsys):
        (workdir / ".mindmapper.toml").write_text("[generate]\nauto_group = false\n")

        assert main(["generate", "tasks.txt"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["nodes"][1]["category"] == "Other"

    def test_invalid_config_reports_error(self, workdir, capsys):
        (workdir / ".mindmapper.toml").write_text("[generate\n")

        assert main(["generate", "tasks.txt"]) == 1
        assert "Invalid TOML" in capsys.readouterr().err


class TestConvertCommand:
    """Test the convert command."""

    def test_json_to_freemind_to_text(self, workdir):
        assert main(["generate", "tasks.txt", "-o", "map.json"]) == 0
        assert main(["convert", "map.json", "-o", "map.mm"]) == 0
        assert main(["convert", "map.mm", "-o", "back.txt"]) == 0

        assert (workdir / "back.txt").read_text() == "# Mind Map Export\n\n" + OUTLINE

    def test_default_target_is_text(self, workdir, capsys):
        main(["generate", "tasks.txt", "-o", "map.json"])
        capsys.readouterr()

        assert main(["convert", "map.json"]) == 0
        assert capsys.readouterr().out.startswith("# Mind Map Export")

    def test_invalid_input_fails(self, workdir, capsys):
        (workdir / "bad.json").write_text("{not json")

        assert main(["convert", "bad.json", "--to", "freemind"]) == 1
        assert "not a valid json mind map" in capsys.readouterr().err

    def test_unknown_source_format_fails(self, workdir, capsys):
        (workdir / "map.dat").write_text("x")

        assert main(["convert", "map.dat"]) == 1
        assert "--from" in capsys.readouterr().err

    def test_stdin_with_from(self, workdir, monkeypatch, capsys):
        xml = '<map><node TEXT="Root"><node TEXT="A"/></node></map>'
        monkeypatch.setattr(sys, "stdin", io.StringIO(xml))

        assert main(["convert", "-", "--from", "freemind", "--to", "text"]) == 0
        assert capsys.readouterr().out == "# Mind Map Export\n\nA\n"

    def test_subprocess_round_trip(self, tmp_path):
        (tmp_path / "tasks.txt").write_text(OUTLINE)

        generated = _run_mindmapper("generate", "tasks.txt", "-o", "map.json", cwd=tmp_path)
        assert generated.returncode == 0, generated.stderr

        converted = _run_mindmapper("convert", "map.json", "--to", "text", cwd=tmp_path)
        assert converted.returncode == 0, converted.stderr
        assert converted.stdout == "# Mind Map Export\n\n" + OUTLINE


class TestInitCommand:
    """Test the init command."""

    def test_creates_config(self, workdir, capsys):
        from mindmapper.config import DEFAULT_CONFIG, parse_toml

        assert main(["init"]) == 0

        config_file = workdir / ".mindmapper.toml"
        assert parse_toml(config_file.read_text()) == DEFAULT_CONFIG
        assert "Created" in capsys.readouterr().out

    def test_refuses_to_overwrite(self, workdir):
        (workdir / ".mindmapper.toml").write_text("# mine\n")

        assert main(["init"]) == 1
        assert (workdir / ".mindmapper.toml").read_text() == "# mine\n"

    def test_force_overwrites(self, workdir):
        (workdir / ".mindmapper.toml").write_text("# mine\n")

        assert main(["init", "--force"]) == 0
        assert "[history]" in (workdir / ".mindmapper.toml").read_text()

    def test_directory_option(self, tmp_path):
        target = tmp_path / "project"
        target.mkdir()

        assert main(["init", "--directory", str(target)]) == 0
        assert (target / ".mindmapper.toml").exists()
