"""ReportWriter — validate the output location and persist the JSON report."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from hulud_scanner.exceptions import OutputPathError, ReportWriteError
from hulud_scanner.scanner.models import ScanReport
from hulud_scanner.scanner.schemas import report_to_json

log = structlog.get_logger("hulud_scanner.engine")

DEFAULT_OUTPUT = "compromise-scan-report.json"


def sanitize_output_path(requested: str, *, strict: bool = False) -> Path:
    """Resolve *requested* against the cwd and reject unsafe locations.

    The default containment test is a plain string prefix against the cwd,
    which accepts sibling directories sharing the prefix (``/a/bc`` under
    ``/a/b``).  ``strict=True`` compares path segments instead.
    """
    resolved = os.path.abspath(requested)
    cwd = os.getcwd()

    if strict:
        try:
            contained = os.path.commonpath([resolved, cwd]) == cwd
        except ValueError:
            contained = False
    else:
        contained = resolved.startswith(cwd)
    if not contained:
        raise OutputPathError(
            "Invalid output path: Path traversal attempt detected. "
            "Output must be within current directory."
        )

    if not resolved.endswith(".json"):
        raise OutputPathError("Invalid output path: Output file must have .json extension.")

    filename = os.path.basename(requested)
    if ".." in filename or "/" in filename or "\\" in filename:
        raise OutputPathError("Invalid output path: Filename contains suspicious characters.")

    return Path(resolved)


def write_report(report: ScanReport, requested: str = DEFAULT_OUTPUT, *, strict: bool = False) -> Path:
    """Write *report* as JSON and return the absolute path written.

    Raises :class:`OutputPathError` for a rejected location and
    :class:`ReportWriteError` on I/O failure.
    """
    safe_path = sanitize_output_path(requested, strict=strict)
    try:
        with open(safe_path, "w", encoding="utf-8") as fh:
            fh.write(report_to_json(report))
    except OSError as e:
        raise ReportWriteError(f"Error saving report to {safe_path}: {e}") from e

    log.info("scanner.report_written", path=str(safe_path))
    return safe_path
