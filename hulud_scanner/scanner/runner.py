"""ScanRunner — load the database, walk node_modules, scan, aggregate."""

from __future__ import annotations

import os
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import structlog

from hulud_scanner.exceptions import CompromisedListLoadError
from hulud_scanner.scanner.database import RangeDatabase
from hulud_scanner.scanner.manifest import scan_manifest
from hulud_scanner.scanner.models import ScannedPackage, ScanReport, ScanState, Vulnerability
from hulud_scanner.scanner.progress import ScanProgress
from hulud_scanner.scanner.report import ScanReportBuilder
from hulud_scanner.scanner.walker import find_manifests

log = structlog.get_logger("hulud_scanner.engine")

DEPENDENCY_ROOT = "node_modules"


class ScanRunner:
    """Run one full scan.

    The runner owns its :class:`ScanReportBuilder`; with ``workers > 1``
    manifests are parsed on a thread pool but results are appended by the
    calling thread only, in discovery order.
    """

    def __init__(
        self,
        csv_path: str | Path,
        scan_path: str | Path | None = None,
        *,
        workers: int = 1,
        progress: ScanProgress | None = None,
    ) -> None:
        self.csv_path = str(csv_path)
        self.scan_path = str(scan_path) if scan_path is not None else os.getcwd()
        self.workers = max(1, workers)
        self.progress = progress or ScanProgress()
        self.load_error: CompromisedListLoadError | None = None
        self.db_entries: int | None = None

    @property
    def state(self) -> ScanState:
        return self.progress.state

    def run(self) -> ScanReport:
        progress = self.progress
        builder = ScanReportBuilder()
        builder.mark_start()
        log.info("scanner.start", scan_path=self.scan_path, csv_path=self.csv_path)

        # ── Load compromised list ─────────────────────────────────────────
        progress.advance(ScanState.LOADING_DB)
        try:
            db = RangeDatabase.load(self.csv_path)
        except CompromisedListLoadError as e:
            log.error("scanner.db_load_failed", path=self.csv_path, error=e.reason)
            self.load_error = e
            progress.fail(e.reason)
            return builder.build(self.scan_path, self.csv_path)
        self.db_entries = len(db)
        if len(db) == 0:
            log.warning("scanner.db_empty", path=self.csv_path)
        progress.note(f"{len(db)} entries")

        # ── Walk ──────────────────────────────────────────────────────────
        progress.advance(ScanState.WALKING)
        root = Path(self.scan_path) / DEPENDENCY_ROOT
        if root.is_dir():
            manifests = find_manifests(root)
            progress.note(f"{len(manifests)} manifests")
            log.info("scanner.manifests_found", root=str(root), count=len(manifests))
        else:
            log.warning("scanner.no_dependency_root", path=str(root))
            progress.note(f"no {DEPENDENCY_ROOT} directory", skipped=True)
            manifests = []

        # ── Scan ──────────────────────────────────────────────────────────
        progress.advance(ScanState.SCANNING)
        progress.expect(len(manifests))
        for scanned, vuln in self._scan_all(manifests, db):
            builder.add(scanned, vuln)
            progress.manifest_scanned()
        progress.note(
            f"{len(builder.scanned_packages)} packages, "
            f"{len(builder.vulnerabilities)} compromised"
        )
        builder.mark_end()

        # ── Aggregate ─────────────────────────────────────────────────────
        progress.advance(ScanState.AGGREGATING)
        report = builder.build(self.scan_path, self.csv_path)
        progress.note(report.summary.status)
        progress.advance(ScanState.DONE)

        log.info(
            "scanner.done",
            scanned=report.summary.total_packages_scanned,
            unique=report.summary.total_unique_packages,
            compromised=report.summary.compromised_packages_found,
            status=report.summary.status,
        )
        return report

    def _scan_all(
        self,
        manifests: list[Path],
        db: RangeDatabase,
    ) -> Iterator[tuple[ScannedPackage | None, Vulnerability | None]]:
        if self.workers == 1 or len(manifests) < 2:
            for path in manifests:
                yield scan_manifest(path, db)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            yield from pool.map(lambda p: scan_manifest(p, db), manifests)


def run_scan(
    csv_path: str | Path,
    scan_path: str | Path | None = None,
    *,
    workers: int = 1,
) -> ScanReport:
    """Convenience wrapper: run a scan and return its report."""
    return ScanRunner(csv_path, scan_path, workers=workers).run()
