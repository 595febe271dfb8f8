"""Tests for the command line interface."""
import json
import sys

import pytest

from mdlint import cli


@pytest.fixture
def run(tmp_path, monkeypatch):
    """Run the CLI with arguments from an empty directory, returning the exit code."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MDLINT_CONFIG", raising=False)

    def invoke(*args):
        monkeypatch.setattr(sys, "argv", ["mdlint", *args])
        try:
            cli.main()
        except SystemExit as e:
            return e.code
        return 0
    return invoke


def test_lint_reports_violations(run, tmp_path, capsys):
    (tmp_path / "doc.md").write_text("# T\n\nhello   \n")

    assert run("lint", "doc.md") == 1
    out = capsys.readouterr().out
    assert "doc.md:3:6" in out
    assert "MD009" in out


def test_lint_clean_file(run, tmp_path, capsys):
    (tmp_path / "doc.md").write_text("# T\n\nhello\n")

    assert run("lint", "doc.md") == 0
    assert "1 file(s) clean" in capsys.readouterr().out


def test_lint_fix(run, tmp_path, capsys):
    path = tmp_path / "doc.md"
    path.write_text("# T\n\nhello   \n")

    assert run("lint", "--fix", "doc.md") == 0
    assert path.read_text() == "# T\n\nhello\n"
    assert "Fixed" in capsys.readouterr().out


def test_lint_json(run, tmp_path, capsys):
    (tmp_path / "doc.md").write_text("# T\n\nhello   \n")

    assert run("lint", "--format", "json", "doc.md") == 1
    data = json.loads(capsys.readouterr().out)
    assert data[0]["violations"][0]["rule"] == "MD009"


def test_lint_directory(run, tmp_path, capsys):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "a.md").write_text("# A\n")
    (docs / "b.markdown").write_text("# B\n")
    (docs / "notes.txt").write_text("ignored   \n")

    assert run("lint", "docs") == 0
    assert "2 file(s) clean" in capsys.readouterr().out


def test_lint_rule_filter(run, tmp_path):
    (tmp_path / "doc.md").write_text("#Title\n\nhello\n")

    assert run("lint", "-r", "MD009", "doc.md") == 0
    assert run("lint", "-r", "no-missing-space-atx", "doc.md") == 1


def test_lint_editorconfig(run, tmp_path):
    (tmp_path / ".editorconfig").write_text("root = true\n\n[*.md]\nmd_no_trailing_spaces = false\n")
    (tmp_path / "doc.md").write_text("# T\n\nhello   \n")

    assert run("lint", "doc.md") == 0
    assert run("lint", "--no-editorconfig", "doc.md") == 1


def test_lint_options_file(run, tmp_path):
    (tmp_path / ".markdownlint.yaml").write_text("MD009: false\n")
    (tmp_path / "doc.md").write_text("# T\n\nhello   \n")

    assert run("lint", "doc.md") == 0


def test_lint_store_defaults(run, tmp_path):
    (tmp_path / "doc.md").write_text("Intro with <b>bold</b> text\n")

    assert run("lint", "doc.md") == 0

    (tmp_path / ".markdownlint.yaml").write_text("MD041: true\n")
    assert run("lint", "doc.md") == 1


def test_lint_bad_options_file(run, tmp_path, capsys):
    (tmp_path / "bad.yaml").write_text("- not a mapping\n")
    (tmp_path / "doc.md").write_text("# T\n")

    assert run("lint", "-c", "bad.yaml", "doc.md") == 2
    assert "must contain a mapping" in capsys.readouterr().err


def test_lint_missing_file(run, capsys):
    assert run("lint", "missing.md") == 1
    assert "File not found" in capsys.readouterr().err


def test_lint_empty_directory(run, tmp_path):
    (tmp_path / "empty").mkdir()

    assert run("lint", "empty") == 2


# ----------------------------------------------------------------------------
# Rule and directive commands
# ----------------------------------------------------------------------------

def test_rules_command(run, capsys):
    assert run("rules") == 0
    out = capsys.readouterr().out
    assert "MD001" in out
    assert "MD060" in out


def test_rule_command(run, capsys):
    assert run("rule", "line-length") == 0
    out = capsys.readouterr().out
    assert "MD013" in out
    assert "line_length" in out


def test_rule_command_unknown(run, capsys):
    assert run("rule", "MD999") == 1
    assert "Unknown rule" in capsys.readouterr().err


def test_directive_command(run, capsys):
    assert run("directive", "<!-- markdownlint-disable MD013 no-bare-urls -->") == 0
    out = capsys.readouterr().out
    assert "Kind: disable" in out
    assert "Rules: MD013, MD034" in out


def test_directive_command_not_directive(run, capsys):
    assert run("directive", "plain text") == 0
    assert "Not a suppression directive" in capsys.readouterr().out
