"""Dotted-numeric version comparison and compromised-range matching.

This is deliberately not a semantic-versioning engine: every dot-separated
segment is coerced to an integer and anything non-numeric counts as ``0``, so
``1.0.0-beta`` orders the same as ``1.0.0``.
"""

from __future__ import annotations

import re

from hulud_scanner.scanner.models import VersionRange

_PREFIX_RE = re.compile(r"^[\^~>=<]+")


def normalize_version(version: str) -> str:
    """Strip a leading run of range operators (``^1.2.0`` -> ``1.2.0``)."""
    return _PREFIX_RE.sub("", version)


def _segment_value(segment: str) -> int:
    segment = segment.strip()
    if segment.isdecimal():
        return int(segment)
    return 0


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as *a* sorts before, equal to, or after *b*."""
    parts_a = a.split(".")
    parts_b = b.split(".")

    for i in range(max(len(parts_a), len(parts_b))):
        left = _segment_value(parts_a[i]) if i < len(parts_a) else 0
        right = _segment_value(parts_b[i]) if i < len(parts_b) else 0
        if left > right:
            return 1
        if left < right:
            return -1
    return 0


def parse_range(range_string: str) -> VersionRange:
    """Parse ``"1.0.0-1.0.2"`` into a closed interval, or ``"0.1.1"`` into a point."""
    if "-" in range_string:
        parts = range_string.split("-")
        return VersionRange(min=parts[0].strip(), max=parts[1].strip(), is_single=False)
    return VersionRange(min=range_string, max=range_string, is_single=True)


def is_compromised(installed_version: str, range_string: str) -> bool:
    """Check whether *installed_version* falls inside *range_string* (inclusive)."""
    clean = normalize_version(installed_version)
    rng = parse_range(range_string)

    if rng.is_single:
        return compare_versions(clean, rng.min) == 0

    return compare_versions(clean, rng.min) >= 0 and compare_versions(clean, rng.max) <= 0
