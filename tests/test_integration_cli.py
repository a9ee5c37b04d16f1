"""Integration tests for CLI functionality."""

import json
import subprocess
import sys

from rootfinder_pkg.cli import main_entry


def test_cli_version():
    """Test --version flag."""
    result = subprocess.run(
        [sys.executable, "-m", "rootfinder_pkg", "--version"],
        capture_output=True,
        text=True,
        timeout=30,
    )
    assert result.returncode == 0
    assert result.stdout.strip() != ""


def test_cli_solve_json():
    """Test solving with JSON output."""
    result = subprocess.run(
        [sys.executable, "-m", "rootfinder_pkg", "x^2 = 9", "--format", "json"],
        capture_output=True,
        text=True,
        timeout=60,
    )
    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert data["ok"] is True
    assert sorted(data["exact"]) == ["-3", "3"]


def test_main_entry_human(capsys):
    """Test human-readable output."""
    assert main_entry(["2*x = 3", "--no-numeric-fallback"]) == 0
    out = capsys.readouterr().out
    assert "x = 3/2" in out
    assert "Approx: 1.5" in out


def test_main_entry_variable(capsys):
    """Test --var."""
    assert main_entry(["a*y = 1", "--var", "y", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["variable"] == "y"
    assert data["exact"] == ["1/a"]


def test_main_entry_invalid_input(capsys):
    """Test that invalid input yields a non-zero exit code."""
    assert main_entry(["x = 1 = 2"]) == 1
    assert "Error:" in capsys.readouterr().out


def test_main_entry_no_roots(capsys):
    """Test reporting an empty solution set."""
    assert main_entry(["exp(x) = 0", "--no-numeric-fallback"]) == 0
    assert "No solutions found for x" in capsys.readouterr().out


def test_main_entry_without_equation(capsys):
    """Test that a missing equation prints usage."""
    assert main_entry([]) == 2
    assert "usage" in capsys.readouterr().out.lower()


def test_log_file(tmp_path):
    """Test writing logs to a file."""
    log_file = tmp_path / "rootfinder.log"
    assert main_entry(["x = 1", "--log-level", "DEBUG", "--log-file", str(log_file)]) == 0
    assert "[DEBUG] rootfinder.solver" in log_file.read_text()
