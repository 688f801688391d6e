"""ScanProgress — state transitions of one scan run with per-state timing."""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import structlog

from hulud_scanner.scanner.models import ScanState

log = structlog.get_logger("hulud_scanner.engine")

_NEXT: dict[ScanState, tuple[ScanState, ...]] = {
    ScanState.INIT: (ScanState.LOADING_DB,),
    ScanState.LOADING_DB: (ScanState.WALKING, ScanState.LOAD_FAILED),
    ScanState.WALKING: (ScanState.SCANNING,),
    ScanState.SCANNING: (ScanState.AGGREGATING,),
    ScanState.AGGREGATING: (ScanState.DONE,),
    ScanState.LOAD_FAILED: (),
    ScanState.DONE: (),
}

_TERMINAL = (ScanState.DONE, ScanState.LOAD_FAILED)

_LOG_EVERY = 100


@dataclass
class PhaseRecord:
    state: ScanState
    status: str = "running"  # running | completed | failed | skipped
    started_at: float = field(default_factory=time.monotonic)
    completed_at: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.completed_at is None:
            return None
        return self.completed_at - self.started_at


class ScanProgress:
    """Drive a scan through :class:`ScanState` and time each non-terminal state.

    Illegal transitions raise ``ValueError``.  Manifest counters are updated
    from the thread that aggregates results.
    """

    def __init__(self) -> None:
        self.state = ScanState.INIT
        self.phases: list[PhaseRecord] = []
        self.manifests_total = 0
        self.manifests_scanned = 0

    @property
    def current(self) -> PhaseRecord | None:
        if self.phases and self.phases[-1].completed_at is None:
            return self.phases[-1]
        return None

    def advance(self, state: ScanState) -> None:
        if state not in _NEXT[self.state]:
            raise ValueError(f"illegal scan transition {self.state.value} -> {state.value}")
        log.debug("scanner.state", old=self.state.value, new=state.value)
        self._close("completed")
        self.state = state
        if state not in _TERMINAL:
            self.phases.append(PhaseRecord(state=state))

    def fail(self, error: str) -> None:
        """Abort a database load: record *error* and enter LOAD_FAILED."""
        phase = self.current
        self.advance(ScanState.LOAD_FAILED)
        if phase is not None:
            phase.status = "failed"
            phase.error = error

    def note(self, detail: str, *, skipped: bool = False) -> None:
        phase = self.current
        if phase is None:
            return
        phase.detail = detail
        if skipped:
            phase.status = "skipped"

    def expect(self, total: int) -> None:
        self.manifests_total = total
        self.manifests_scanned = 0

    def manifest_scanned(self) -> None:
        self.manifests_scanned += 1
        done = self.manifests_scanned
        if done % _LOG_EVERY == 0 or done == self.manifests_total:
            log.debug("scanner.progress", scanned=done, total=self.manifests_total)

    def get(self, state: ScanState) -> PhaseRecord | None:
        for phase in self.phases:
            if phase.state is state:
                return phase
        return None

    def get_summary(self) -> dict:
        total = sum(p.duration for p in self.phases if p.duration is not None)
        return {
            "state": self.state.value,
            "total_duration": round(total, 3),
            "manifests": {"scanned": self.manifests_scanned, "total": self.manifests_total},
            "phases": [
                {
                    "phase": p.state.value,
                    "status": p.status,
                    "duration": round(p.duration, 3) if p.duration is not None else None,
                    "detail": p.detail,
                    "error": p.error,
                }
                for p in self.phases
            ],
        }

    def _close(self, status: str) -> None:
        phase = self.current
        if phase is None:
            return
        phase.completed_at = time.monotonic()
        if phase.status == "running":
            phase.status = status
