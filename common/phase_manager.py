"""
Phase manager for tracking suite phases, their timing and run metadata.
"""

import os
import subprocess
import time
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


@dataclass
class PhaseRecord:
    """Timing and status of one suite phase."""

    phase_id: str
    start_ts: float
    end_ts: Optional[float] = None
    status: str = "running"
    detail: str = ""

    @property
    def duration(self) -> Optional[float]:
        if self.end_ts is None:
            return None
        return self.end_ts - self.start_ts


class PhaseManager:
    """Tracks the sequential phases of a run (seed, full-list, ...)."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self.run_start_ts: Optional[float] = None
        self.started_at: Optional[datetime] = None
        self.phases: List[PhaseRecord] = []
        self.current: Optional[PhaseRecord] = None

    def begin_run(self) -> None:
        self.reset()
        self.run_start_ts = self._clock()
        self.started_at = datetime.now()

    def begin_phase(self, phase_id: str) -> None:
        """Begin a new phase, closing the previous one if still open."""
        if self.run_start_ts is None:
            self.begin_run()
        if self.current is not None:
            logger.warning(f"Phase {self.current.phase_id} was not ended; closing it")
            self.end_phase("interrupted")

        self.current = PhaseRecord(phase_id=phase_id, start_ts=self._clock())
        self.phases.append(self.current)
        logger.debug(f"Began phase: {phase_id}")

    def end_phase(self, status: str = "ok", detail: str = "") -> Optional[PhaseRecord]:
        if self.current is None:
            logger.warning("end_phase called without an active phase")
            return None

        record = self.current
        record.end_ts = self._clock()
        record.status = status
        record.detail = detail
        self.current = None
        logger.debug(f"Phase {record.phase_id} ended ({status}) after {record.duration:.1f}s")
        return record

    @property
    def elapsed(self) -> float:
        """Seconds since begin_run (0 if the run has not begun)."""
        if self.run_start_ts is None:
            return 0.0
        return self._clock() - self.run_start_ts

    def failed_phases(self) -> List[PhaseRecord]:
        return [p for p in self.phases if p.status == "failed"]

    def reset(self) -> None:
        self.run_start_ts = None
        self.started_at = None
        self.phases = []
        self.current = None

    def __repr__(self) -> str:
        return f"PhaseManager(phases={len(self.phases)}, current={self.current.phase_id if self.current else None!r})"


def _git(args: List[str], cwd: str) -> str:
    try:
        output = subprocess.check_output(
            ["git", "-C", cwd] + args, text=True, stderr=subprocess.DEVNULL
        )
    except (OSError, subprocess.CalledProcessError):
        return UNKNOWN
    return output.strip() or UNKNOWN


def git_revision(cwd: Optional[str] = None) -> str:
    """Short commit hash of the source tree, or 'unknown'."""
    return _git(["rev-parse", "--short", "HEAD"], cwd or os.getcwd())


def git_branch(cwd: Optional[str] = None) -> str:
    """Current branch name of the source tree, or 'unknown'."""
    return _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd or os.getcwd())


@dataclass
class RunMetadata:
    """Metadata block written at the top of the report."""

    started_at: datetime
    revision: str
    branch: str
    endpoint: str
    tiers: List[int]
    runs: int
    warmup: int
    elapsed_seconds: float
    phases: List[PhaseRecord] = field(default_factory=list)


def collect_run_metadata(config, phase_manager: PhaseManager, source_dir: Optional[str] = None) -> RunMetadata:
    """Snapshot run metadata from the configuration and the phase manager."""
    branch = config.label or git_branch(source_dir)
    return RunMetadata(
        started_at=phase_manager.started_at or datetime.now(),
        revision=git_revision(source_dir),
        branch=branch,
        endpoint=config.endpoint,
        tiers=list(config.tiers),
        runs=config.runs,
        warmup=config.warmup,
        elapsed_seconds=phase_manager.elapsed,
        phases=list(phase_manager.phases),
    )
