"""Compromised package scanner engine — match node_modules against a known list."""

from hulud_scanner.scanner.database import RangeDatabase
from hulud_scanner.scanner.manifest import scan_manifest
from hulud_scanner.scanner.models import (
    ScanReport,
    ScanState,
    ScannedPackage,
    VersionRange,
    Vulnerability,
)
from hulud_scanner.scanner.progress import ScanProgress
from hulud_scanner.scanner.report import ScanReportBuilder
from hulud_scanner.scanner.runner import ScanRunner, run_scan
from hulud_scanner.scanner.versions import (
    compare_versions,
    is_compromised,
    normalize_version,
    parse_range,
)
from hulud_scanner.scanner.walker import find_manifests
from hulud_scanner.scanner.writer import sanitize_output_path, write_report

__all__ = [
    "RangeDatabase",
    "ScanProgress",
    "ScanReport",
    "ScanReportBuilder",
    "ScanRunner",
    "ScanState",
    "ScannedPackage",
    "VersionRange",
    "Vulnerability",
    "compare_versions",
    "find_manifests",
    "is_compromised",
    "normalize_version",
    "parse_range",
    "run_scan",
    "sanitize_output_path",
    "scan_manifest",
    "write_report",
]
