"""Tests for the jj-analyze CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from jj_analyze.cli import app
from jj_analyze.config.loader import CONFIG_FILENAME

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path / "fakehome")
    return tmp_path


def _write(root: Path, document: dict, name: str = "revset.yaml") -> Path:
    path = root / name
    path.write_text(yaml.dump(document))
    return path


UNION_DOC = {"op": "commits", "refs": ["a", "b"]}

ANCESTORS_DOC = {
    "op": "ancestors",
    "heads": {"op": "commits", "refs": [{"kind": "visible_heads"}]},
}


# ── explain ──────────────────────────────────────────────────────────


def test_explain_plain(isolated):
    path = _write(isolated, UNION_DOC)
    result = runner.invoke(app, ["explain", str(path), "--color", "never", "--no-analyze"])
    assert result.exit_code == 0
    assert result.output == "Union [\n  a\n  b\n]\n"


def test_explain_marks_expensive_in_eager_context(isolated):
    path = _write(isolated, ANCESTORS_DOC)
    result = runner.invoke(app, ["explain", str(path), "--color", "never", "-x", "eager"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "(EXPENSIVE) Ancestors {",
        "  heads: visible_heads()",
        "}",
    ]


def test_explain_default_context_is_lazy(isolated):
    path = _write(isolated, ANCESTORS_DOC)
    result = runner.invoke(app, ["explain", str(path), "--color", "never"])
    assert result.exit_code == 0
    assert "(EXPENSIVE)" not in result.output


def test_explain_context_from_config(isolated):
    (isolated / CONFIG_FILENAME).write_text("analyze:\n  context: eager\n")
    path = _write(isolated, ANCESTORS_DOC)
    result = runner.invoke(app, ["explain", str(path), "--color", "never"])
    assert result.exit_code == 0
    assert "(EXPENSIVE)" in result.output


def test_explain_analysis_disabled_in_config(isolated):
    (isolated / CONFIG_FILENAME).write_text("analyze:\n  enabled: false\n")
    path = _write(isolated, ANCESTORS_DOC)
    result = runner.invoke(app, ["explain", str(path), "--color", "never", "-x", "eager"])
    assert result.exit_code == 0
    assert "(EXPENSIVE)" not in result.output


def test_explain_stdin():
    result = runner.invoke(
        app, ["explain", "-", "--color", "never"], input=yaml.dump(UNION_DOC)
    )
    assert result.exit_code == 0
    assert "Union [" in result.output


def test_explain_missing_document(isolated):
    result = runner.invoke(app, ["explain", str(isolated / "missing.yaml")])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_explain_invalid_document(isolated):
    path = _write(isolated, {"op": "bogus"})
    result = runner.invoke(app, ["explain", str(path)])
    assert result.exit_code == 1
    assert "Invalid expression" in result.output


def test_explain_unknown_commit_id(isolated):
    path = _write(isolated, {"op": "commits", "ids": ["ff00000000000000"]})
    result = runner.invoke(app, ["explain", str(path), "--color", "never"])
    assert result.exit_code == 1
    assert "was not issued" in result.output


def test_invalid_config_exits(isolated):
    (isolated / CONFIG_FILENAME).write_text("ui:\n  color: sometimes\n")
    path = _write(isolated, UNION_DOC)
    result = runner.invoke(app, ["explain", str(path)])
    assert result.exit_code == 1
    assert "Invalid config" in result.output


def test_global_config_option(isolated):
    custom = isolated / "custom.yaml"
    custom.write_text("analyze:\n  context: eager\n")
    path = _write(isolated, ANCESTORS_DOC)
    result = runner.invoke(
        app, ["--config", str(custom), "explain", str(path), "--color", "never"]
    )
    assert result.exit_code == 0
    assert "(EXPENSIVE)" in result.output


# ── references ───────────────────────────────────────────────────────


def test_references_lists_table(isolated):
    path = _write(isolated, {"op": "commits", "refs": ["main", {"kind": "working_copy"}]})
    result = runner.invoke(app, ["references", str(path)])
    assert result.exit_code == 0
    assert "References (4)" in result.output
    assert "root()" in result.output
    assert "main" in result.output
    assert "0200000000000000" in result.output


# ── config ───────────────────────────────────────────────────────────


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "context: lazy" in result.output


def test_config_init(isolated):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (isolated / CONFIG_FILENAME).is_file()


def test_config_init_refuses_overwrite(isolated):
    (isolated / CONFIG_FILENAME).write_text("log_level: info\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (isolated / CONFIG_FILENAME).read_text() == "log_level: info\n"


def test_config_init_force(isolated):
    (isolated / CONFIG_FILENAME).write_text("log_level: info\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "analyze:" in (isolated / CONFIG_FILENAME).read_text()
