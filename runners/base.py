"""
Interface for statistical timing runners.
"""

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence


@dataclass(frozen=True)
class Trial:
    """One named command in a benchmark matrix."""

    name: str
    command: str
    bucket: str
    tier: int


class TimingRunner:
    """Runs a matrix of shell commands repeatedly and exports statistics.

    Implementations own warmup, repetition and statistics entirely; the
    harness only persists and quotes what they produce.
    """

    tool: Optional[str] = None

    def run(
        self,
        trials: Sequence[Trial],
        runs: int,
        warmup: int,
        json_path: str,
        markdown_path: str,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        raise NotImplementedError
