"""Recursive discovery of package.json manifests under a dependency root."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import structlog

log = structlog.get_logger("hulud_scanner.engine")

MANIFEST_FILENAME = "package.json"

# Binary shims and caches hold no installed packages
_SKIP_DIRS = {".bin", ".cache"}


def find_manifests(root: str | Path) -> list[Path]:
    """Return every ``package.json`` below *root*, depth-first.

    Entries of each directory are visited in name order.  Directories that
    cannot be listed are skipped and traversal continues with their siblings.
    """
    found: list[Path] = []
    stack: list[Iterator[os.DirEntry]] = []

    entries = _list_dir(Path(root))
    if entries is not None:
        stack.append(iter(entries))

    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False

        if is_dir:
            if entry.name in _SKIP_DIRS:
                continue
            children = _list_dir(Path(entry.path))
            if children is not None:
                stack.append(iter(children))
        elif entry.name == MANIFEST_FILENAME:
            found.append(Path(entry.path))

    return found


def _list_dir(directory: Path) -> list[os.DirEntry] | None:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        log.debug("scanner.dir_skipped", path=str(directory), error=str(e))
        return None
