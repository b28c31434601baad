"""Tests for the CLI entry points."""

import json
import shutil
from pathlib import Path

from click.testing import CliRunner

from boxnest.cli import cli

FIXTURES = Path(__file__).parent / "fixtures"
NESTED_JSON = FIXTURES / "nested.json"


def _copy_fixture(tmp_path):
    path = tmp_path / "nested.json"
    shutil.copy(NESTED_JSON, path)
    return path


def _laid_out(tmp_path):
    path = _copy_fixture(tmp_path)
    result = CliRunner().invoke(cli, ["layout", str(path)])
    assert result.exit_code == 0, result.output
    return path


def test_layout_writes_output(tmp_path):
    """layout command writes a laid-out document to -o."""
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(NESTED_JSON), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "Laid out 7 rectangles (grid)" in result.output
    data = json.loads(out.read_text())
    system = next(r for r in data["rectangles"] if r["id"] == "system")
    assert (system["w"], system["h"]) == (29, 10)


def test_layout_default_output(tmp_path):
    """layout command overwrites the input when no -o given."""
    path = _copy_fixture(tmp_path)
    before = path.read_text()
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(path)])
    assert result.exit_code == 0, result.output
    assert path.read_text() != before
    assert path.read_text().endswith("\n")


def test_layout_overrides_settings(tmp_path):
    """layout command accepts --strategy and margin flags."""
    out = tmp_path / "out.json"
    runner = CliRunner()
    result = runner.invoke(cli, [
        "layout", str(NESTED_JSON), "-o", str(out),
        "--strategy", "mixed-flow", "--margin", "2", "--label-margin", "3",
    ])
    assert result.exit_code == 0, result.output
    settings = json.loads(out.read_text())["settings"]
    assert settings["layoutAlgorithm"] == "mixed-flow"
    assert (settings["margin"], settings["labelMargin"]) == (2, 3)


def test_layout_unknown_strategy():
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", str(NESTED_JSON), "--strategy", "spiral"])
    assert result.exit_code != 0


def test_validate_success(tmp_path):
    """validate command succeeds on a laid-out document."""
    path = _laid_out(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(path)])
    assert result.exit_code == 0, result.output
    assert "Valid: 7 rectangles, 2 roots, 0 warnings" in result.output


def test_validate_reports_errors():
    """validate command fails on a document that was never laid out."""
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(NESTED_JSON)])
    assert result.exit_code == 1
    assert "Validation errors:" in result.output
    assert "[containment]" in result.output


def test_validate_bad_file(tmp_path):
    """validate command reports parse errors."""
    bad = tmp_path / "bad.json"
    bad.write_text("not a json document")
    runner = CliRunner()
    result = runner.invoke(cli, ["validate", str(bad)])
    assert result.exit_code == 1
    assert "Parse error" in result.output


def test_fit(tmp_path):
    """fit command shrinks a parent to its minimum size."""
    path = _laid_out(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fit", str(path), "system"])
    assert result.exit_code == 0, result.output
    assert "Fitted 'system' to 29x9" in result.output


def test_fit_recursive(tmp_path):
    path = _laid_out(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fit", str(path), "ingest", "--recursive"])
    assert result.exit_code == 0, result.output
    data = json.loads(path.read_text())
    system = next(r for r in data["rectangles"] if r["id"] == "system")
    assert (system["w"], system["h"]) == (29, 9)


def test_fit_unknown_parent(tmp_path):
    path = _laid_out(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["fit", str(path), "nope"])
    assert result.exit_code == 1
    assert "Unknown rectangle 'nope'" in result.output


def test_info_output():
    """info command prints document metadata and the tree."""
    runner = CliRunner()
    result = runner.invoke(cli, ["info", str(NESTED_JSON)])
    assert result.exit_code == 0
    assert "Rectangles: 7" in result.output
    assert "Strategy: grid" in result.output
    assert "Margins: 1 (label 2)" in result.output
    assert "    reader 'Reader' (leaf)" in result.output
    assert "[manual]" in result.output


def test_version():
    """--version flag prints version string."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "version" in result.output.lower()


def test_verbose_flag(tmp_path):
    path = _copy_fixture(tmp_path)
    runner = CliRunner()
    result = runner.invoke(cli, ["-v", "layout", str(path)])
    assert result.exit_code == 0, result.output


def test_layout_nonexistent_file():
    """layout command fails gracefully on missing input."""
    runner = CliRunner()
    result = runner.invoke(cli, ["layout", "/nonexistent/file.json"])
    assert result.exit_code != 0
