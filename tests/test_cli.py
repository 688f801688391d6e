"""Tests for the detect-compromised command."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from hulud_scanner.cli import BUNDLED_CSV, main


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("hulud_scanner.cli.setup_logging"):
        yield


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    cwd = tmp_path / "work"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def _invoke(*args: str, env: dict | None = None):
    return CliRunner().invoke(main, list(args), env=env or {"HULUD_SCAN_CSV": None})


# ── help ──


class TestHelp:
    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help_exits_zero(self, flag):
        result = _invoke(flag)
        assert result.exit_code == 0
        assert "--csv" in result.output
        assert "--scan" in result.output
        assert "--output" in result.output


# ── scan outcomes ──


class TestScan:
    def test_vulnerable_exits_one(self, workdir, project, compromised_csv, write_manifest):
        write_manifest(project / "node_modules" / "evil-pkg", {"name": "evil-pkg", "version": "1.1.0"})

        result = _invoke("--csv", str(compromised_csv), "--scan", str(project))

        assert result.exit_code == 1
        assert "evil-pkg@1.1.0" in result.output
        assert "ACTION REQUIRED" in result.output
        data = json.loads((workdir / "compromise-scan-report.json").read_text())
        assert data["summary"]["status"] == "VULNERABLE"
        assert data["summary"]["compromisedPackagesFound"] == 1

    def test_safe_exits_zero(self, workdir, project, compromised_csv, write_manifest):
        write_manifest(project / "node_modules" / "evil-pkg", {"name": "evil-pkg", "version": "2.0.0"})

        result = _invoke("--csv", str(compromised_csv), "--scan", str(project))

        assert result.exit_code == 0
        assert "No compromised packages detected" in result.output
        data = json.loads((workdir / "compromise-scan-report.json").read_text())
        assert data["summary"]["status"] == "SAFE"

    def test_custom_output(self, workdir, project, compromised_csv):
        result = _invoke(
            "--csv", str(compromised_csv), "--scan", str(project), "--output", "results.json"
        )
        assert result.exit_code == 0
        assert (workdir / "results.json").exists()
        assert "Full report saved to" in result.output

    def test_workers_option(self, workdir, project, compromised_csv, write_manifest):
        write_manifest(project / "node_modules" / "evil-pkg", {"name": "evil-pkg", "version": "1.0.0"})
        write_manifest(project / "node_modules" / "x", {"name": "x", "version": "1.0.0"})
        result = _invoke("--csv", str(compromised_csv), "--scan", str(project), "--workers", "3")
        assert result.exit_code == 1

    def test_csv_from_environment(self, workdir, project, compromised_csv, write_manifest):
        write_manifest(project / "node_modules" / "evil-pkg", {"name": "evil-pkg", "version": "1.1.0"})
        result = _invoke("--scan", str(project), env={"HULUD_SCAN_CSV": str(compromised_csv)})
        assert result.exit_code == 1

    def test_bundled_list_by_default(self, workdir, project):
        result = _invoke("--scan", str(project))
        assert result.exit_code == 0
        data = json.loads((workdir / "compromise-scan-report.json").read_text())
        assert data["scan"]["csvPath"] == str(BUNDLED_CSV)
        assert "compromised package list is empty" in result.output

    def test_help_mentions_empty_bundled_list(self):
        result = _invoke("--help")
        assert "empty" in result.output
        assert "HULUD_SCAN_CSV" in result.output

    def test_verbose_prints_phases(self, workdir, project, compromised_csv):
        result = _invoke("--csv", str(compromised_csv), "--scan", str(project), "-v")
        assert result.exit_code == 0
        assert "Pipeline summary" in result.output
        assert "loading_db" in result.output
        assert "aggregating" in result.output


# ── degraded paths ──


class TestErrors:
    def test_load_failure_exits_zero(self, workdir, project, tmp_path):
        result = _invoke("--csv", str(tmp_path / "missing.csv"), "--scan", str(project))
        assert result.exit_code == 0
        assert "Error loading CSV file" in result.output
        data = json.loads((workdir / "compromise-scan-report.json").read_text())
        assert data["summary"]["status"] == "SAFE"
        assert data["scan"]["duration"] is None

    def test_load_failure_with_flag_exits_one(self, workdir, project, tmp_path):
        result = _invoke(
            "--csv", str(tmp_path / "missing.csv"), "--scan", str(project), "--fail-on-load-error"
        )
        assert result.exit_code == 1

    def test_bad_output_path_does_not_change_exit_code(self, workdir, project, compromised_csv):
        result = _invoke(
            "--csv", str(compromised_csv), "--scan", str(project), "--output", "../outside.json"
        )
        assert result.exit_code == 0
        assert "Error saving report" in result.output
        assert not (workdir.parent / "outside.json").exists()

    def test_bad_output_path_keeps_vulnerable_exit(
        self, workdir, project, compromised_csv, write_manifest
    ):
        write_manifest(project / "node_modules" / "evil-pkg", {"name": "evil-pkg", "version": "1.1.0"})
        result = _invoke(
            "--csv", str(compromised_csv), "--scan", str(project), "--output", "report.txt"
        )
        assert result.exit_code == 1
        assert "Error saving report" in result.output

    def test_strict_output_rejects_sibling(self, workdir, project, compromised_csv):
        sibling = Path(str(workdir) + "-x") / "r.json"
        sibling.parent.mkdir()
        result = _invoke(
            "--csv", str(compromised_csv), "--scan", str(project),
            "--output", str(sibling), "--strict-output",
        )
        assert result.exit_code == 0
        assert "Error saving report" in result.output
        assert not sibling.exists()

    def test_fatal_error_exits_one(self, workdir, project, compromised_csv):
        with patch("hulud_scanner.cli.ScanRunner.run", side_effect=RuntimeError("boom")):
            result = _invoke("--csv", str(compromised_csv), "--scan", str(project))
        assert result.exit_code == 1
        assert "Fatal error: boom" in result.output
