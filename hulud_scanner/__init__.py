"""hulud-scanner: offline audit of node_modules against a compromised package list."""

__version__ = "0.1.0"

from hulud_scanner.scanner import (
    RangeDatabase,
    ScanReport,
    ScanReportBuilder,
    ScanRunner,
    is_compromised,
    run_scan,
    write_report,
)

__all__ = [
    "RangeDatabase",
    "ScanReport",
    "ScanReportBuilder",
    "ScanRunner",
    "is_compromised",
    "run_scan",
    "write_report",
]
