"""RangeDatabase — compromised package names mapped to version ranges."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

import structlog

from hulud_scanner.exceptions import CompromisedListLoadError

log = structlog.get_logger("hulud_scanner.engine")


class RangeDatabase(Mapping[str, str]):
    """Read-only ``package name -> version range`` mapping.

    Built once from the compromised-list CSV and never mutated afterwards,
    so it can be shared between worker threads without locking.
    """

    def __init__(self, entries: dict[str, str], source: str = "<memory>") -> None:
        self._entries = MappingProxyType(dict(entries))
        self.source = source

    @classmethod
    def from_text(cls, text: str, source: str = "<memory>") -> RangeDatabase:
        """Parse CSV text: header line, then ``packageName,versionRange`` rows."""
        entries: dict[str, str] = {}
        for raw_line in text.split("\n")[1:]:
            if not raw_line.strip():
                continue

            name, _, version_range = raw_line.partition(",")
            name = name.strip()
            version_range = version_range.strip()
            if not name or not version_range:
                continue

            prev = entries.get(name)
            if prev is not None:
                log.debug(
                    "scanner.entry_overwritten",
                    package=name,
                    old_range=prev,
                    new_range=version_range,
                )
            entries[name] = version_range

        return cls(entries, source=source)

    @classmethod
    def load(cls, path: str | Path) -> RangeDatabase:
        """Read and parse the compromised-list file at *path*.

        Raises :class:`CompromisedListLoadError` if the file cannot be read.
        """
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise CompromisedListLoadError(str(path), str(e)) from e

        db = cls.from_text(text, source=str(path))
        log.info("scanner.db_loaded", source=str(path), entries=len(db))
        return db

    def lookup(self, name: str) -> str | None:
        return self._entries.get(name)

    def __getitem__(self, name: str) -> str:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
