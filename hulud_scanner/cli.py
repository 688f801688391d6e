"""CLI entry point: detect-compromised.

Usage:
    detect-compromised                                  # scan ./node_modules with the bundled list
    detect-compromised --scan /path/to/project          # scan another project
    detect-compromised --csv custom.csv --output results.json
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from hulud_scanner.core.logging import setup_logging
from hulud_scanner.exceptions import ScannerError
from hulud_scanner.scanner.models import ScanReport
from hulud_scanner.scanner.progress import ScanProgress
from hulud_scanner.scanner.runner import ScanRunner
from hulud_scanner.scanner.writer import DEFAULT_OUTPUT, write_report

BUNDLED_CSV = Path(__file__).resolve().parent / "data" / "sha1_hulud_full.csv"

_RULE = "=" * 70


def _print_summary(report: ScanReport) -> None:
    summary = report.summary
    click.echo("\n" + _RULE)
    click.echo("                    SCAN SUMMARY")
    click.echo(_RULE + "\n")

    click.echo(f"Total packages scanned:      {summary.total_packages_scanned}")
    click.echo(f"Unique packages:             {summary.total_unique_packages}")
    click.echo(f"Compromised packages found:  {summary.compromised_packages_found}\n")

    if summary.compromised_packages_found > 0:
        click.secho("CRITICAL VULNERABILITIES DETECTED:\n", fg="red", bold=True)
        for i, vuln in enumerate(report.vulnerabilities, 1):
            click.echo(f"{i}. {vuln.package_name}@{vuln.installed_version}")
            click.echo(f"   Range: {vuln.compromised_range}")
            click.echo(f"   Location: {vuln.location}")
            click.echo(f"   Severity: {vuln.severity}")
            click.echo(f"   {vuln.recommendation}\n")
        click.secho("ACTION REQUIRED: Remove compromised packages immediately!\n", fg="red")
    else:
        click.secho("No compromised packages detected\n", fg="green")

    click.echo(_RULE + "\n")


def _print_phases(progress: ScanProgress) -> None:
    summary = progress.get_summary()
    click.echo(f"Pipeline summary (total: {summary['total_duration']}s):")
    for p in summary["phases"]:
        status_icon = {
            "completed": "+",
            "failed": "!",
            "skipped": "-",
            "running": "~",
            "pending": ".",
        }.get(p["status"], "?")
        duration = f" ({p['duration']}s)" if p["duration"] else ""
        text = p["detail"] or p["error"] or ""
        detail = f" - {text}" if text else ""
        click.echo(f"  [{status_icon}] {p['phase']}{duration}{detail}")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--csv",
    "csv_path",
    envvar="HULUD_SCAN_CSV",
    default=str(BUNDLED_CSV),
    show_default=True,
    help="Path to CSV file with compromised packages. The bundled list ships empty "
    "(header only); pass a real list here or via HULUD_SCAN_CSV",
)
@click.option(
    "--scan",
    "scan_path",
    default=None,
    help="Path to scan for node_modules (default: current directory)",
)
@click.option(
    "--output",
    "output_path",
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Output path for JSON report",
)
@click.option("--workers", default=1, show_default=True, type=click.IntRange(min=1), help="Manifest parser threads")
@click.option("--strict-output", is_flag=True, help="Require the report path to be inside the cwd by path segments")
@click.option("--fail-on-load-error", is_flag=True, help="Exit 1 if the compromised list cannot be loaded")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(
    csv_path: str,
    scan_path: str | None,
    output_path: str,
    workers: int,
    strict_output: bool,
    fail_on_load_error: bool,
    verbose: bool,
) -> None:
    """SHA-1 HULUD compromised package detector.

    Scans node_modules for packages from the November 2025 npm supply chain
    incident and writes a JSON report.  Exits 1 when compromised packages
    are found.
    """
    setup_logging("DEBUG" if verbose else None)

    try:
        runner = ScanRunner(csv_path, scan_path, workers=workers)
        click.echo("\nStarting SHA-1 HULUD compromised package scan...\n")
        click.echo(f"Scan Path: {runner.scan_path}")
        click.echo(f"CSV Path: {runner.csv_path}\n")

        report = runner.run()
        if runner.load_error is not None:
            click.echo(f"Error loading CSV file: {runner.load_error.reason}", err=True)
        elif runner.db_entries == 0:
            click.echo(
                "Warning: the compromised package list is empty, so nothing can be flagged. "
                "Pass --csv or set HULUD_SCAN_CSV.",
                err=True,
            )

        _print_summary(report)
        if verbose:
            _print_phases(runner.progress)

        try:
            saved = write_report(report, output_path, strict=strict_output)
            click.echo(f"Full report saved to: {saved}\n")
        except ScannerError as e:
            click.echo(f"Error saving report: {e}", err=True)
    except Exception as e:
        click.echo(f"Fatal error: {e}", err=True)
        sys.exit(1)

    if report.summary.compromised_packages_found > 0:
        sys.exit(1)
    if fail_on_load_error and runner.load_error is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()
