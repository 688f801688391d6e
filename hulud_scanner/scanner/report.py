"""ScanReportBuilder — accumulate per-manifest results into a ScanReport."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from hulud_scanner.scanner.models import (
    STATUS_SAFE,
    STATUS_VULNERABLE,
    ScanInfo,
    ScannedPackage,
    ScanReport,
    ScanSummary,
    Vulnerability,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_ms(ts: datetime) -> datetime:
    return ts.replace(microsecond=ts.microsecond // 1000 * 1000)


def _iso(ts: datetime | None) -> str | None:
    if ts is None:
        return None
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ScanReportBuilder:
    """Append-only accumulator owned by a single scan run."""

    def __init__(self) -> None:
        self.scanned_packages: list[ScannedPackage] = []
        self.vulnerabilities: list[Vulnerability] = []
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None

    def mark_start(self) -> None:
        self.start_time = _now()

    def mark_end(self) -> None:
        self.end_time = _now()

    def add(
        self,
        scanned: ScannedPackage | None,
        vulnerability: Vulnerability | None = None,
    ) -> None:
        """Record the outcome of one manifest scan."""
        if scanned is None:
            return
        self.scanned_packages.append(scanned)
        if vulnerability is not None:
            self.vulnerabilities.append(vulnerability)

    @property
    def duration_ms(self) -> int | None:
        if self.start_time is None or self.end_time is None:
            return None
        delta = _to_ms(self.end_time) - _to_ms(self.start_time)
        return delta // timedelta(milliseconds=1)

    def build(self, scan_path: str, csv_path: str) -> ScanReport:
        found = len(self.vulnerabilities)
        return ScanReport(
            scan=ScanInfo(
                scan_path=scan_path,
                csv_path=csv_path,
                start_time=_iso(self.start_time),
                end_time=_iso(self.end_time),
                duration=self.duration_ms,
            ),
            summary=ScanSummary(
                total_packages_scanned=len(self.scanned_packages),
                total_unique_packages=len({p.name for p in self.scanned_packages}),
                compromised_packages_found=found,
                status=STATUS_VULNERABLE if found > 0 else STATUS_SAFE,
            ),
            vulnerabilities=list(self.vulnerabilities),
            scanned_packages=list(self.scanned_packages),
        )
