"""Data models for the compromised package scanner."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

SEVERITY_CRITICAL = "CRITICAL"
INCIDENT_LABEL = "SHA-1 HULUD npm supply chain incident (Nov 2025)"
RECOMMENDATION = "Remove immediately and check for malicious activity"

STATUS_SAFE = "SAFE"
STATUS_VULNERABLE = "VULNERABLE"


class ScanState(str, enum.Enum):
    """Lifecycle of a full scan."""

    INIT = "init"
    LOADING_DB = "loading_db"
    LOAD_FAILED = "load_failed"
    WALKING = "walking"
    SCANNING = "scanning"
    AGGREGATING = "aggregating"
    DONE = "done"


@dataclass(frozen=True)
class VersionRange:
    """An inclusive version interval; ``is_single`` means an exact version."""

    min: str
    max: str
    is_single: bool


@dataclass
class ScannedPackage:
    """A package identity read from one manifest file."""

    name: str
    version: str
    path: str


@dataclass
class Vulnerability:
    """An installed package whose version falls inside a compromised range."""

    package_name: str
    installed_version: str
    compromised_range: str
    location: str
    severity: str = SEVERITY_CRITICAL
    incident: str = INCIDENT_LABEL
    recommendation: str = RECOMMENDATION


@dataclass
class ScanInfo:
    scan_path: str
    csv_path: str
    start_time: str | None
    end_time: str | None
    duration: int | None


@dataclass
class ScanSummary:
    total_packages_scanned: int
    total_unique_packages: int
    compromised_packages_found: int
    status: str


@dataclass
class ScanReport:
    """Result of a full scan run."""

    scan: ScanInfo
    summary: ScanSummary
    vulnerabilities: list[Vulnerability] = field(default_factory=list)
    scanned_packages: list[ScannedPackage] = field(default_factory=list)

    @property
    def is_vulnerable(self) -> bool:
        return self.summary.status == STATUS_VULNERABLE
