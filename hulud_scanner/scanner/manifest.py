"""ManifestScanner — read one package.json and match it against the database."""

from __future__ import annotations

import json
from pathlib import Path

import structlog

from hulud_scanner.scanner.database import RangeDatabase
from hulud_scanner.scanner.models import ScannedPackage, Vulnerability
from hulud_scanner.scanner.versions import is_compromised

log = structlog.get_logger("hulud_scanner.engine")


def scan_manifest(
    manifest_path: str | Path,
    db: RangeDatabase,
) -> tuple[ScannedPackage | None, Vulnerability | None]:
    """Scan a single manifest.

    Returns ``(None, None)`` when the file is unreadable, is not a JSON
    object, or lacks a string ``name``/``version``.  Otherwise returns the
    scanned package and, if its version is inside a compromised range, the
    matching vulnerability.
    """
    path = str(manifest_path)
    try:
        data = json.loads(Path(manifest_path).read_text(encoding="utf-8", errors="replace"))
    except (OSError, ValueError, RecursionError) as e:
        log.debug("scanner.manifest_skipped", path=path, reason=str(e))
        return None, None

    if not isinstance(data, dict):
        log.debug("scanner.manifest_skipped", path=path, reason="not an object")
        return None, None

    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not name or not isinstance(version, str) or not version:
        log.debug("scanner.manifest_skipped", path=path, reason="missing name or version")
        return None, None

    scanned = ScannedPackage(name=name, version=version, path=path)

    compromised_range = db.lookup(name)
    if compromised_range is None or not is_compromised(version, compromised_range):
        return scanned, None

    log.warning(
        "scanner.compromised_package",
        package=name,
        version=version,
        range=compromised_range,
        location=path,
    )
    return scanned, Vulnerability(
        package_name=name,
        installed_version=version,
        compromised_range=compromised_range,
        location=path,
    )
