"""
hyperfine-backed timing runner.
"""

import logging
import subprocess
from typing import List, Mapping, Optional, Sequence

from common.errors import TimingRunnerError
from runners.base import TimingRunner, Trial

logger = logging.getLogger(__name__)


class HyperfineRunner(TimingRunner):
    """Invokes hyperfine once with the whole command matrix."""

    tool = "hyperfine"

    def __init__(self, executable: str = "hyperfine", style: str = "full"):
        self.executable = executable
        self.style = style

    def build_args(
        self,
        trials: Sequence[Trial],
        runs: int,
        warmup: int,
        json_path: str,
        markdown_path: str,
    ) -> List[str]:
        args = [
            self.executable,
            "--runs", str(runs),
            "--warmup", str(warmup),
            "--export-json", json_path,
            "--export-markdown", markdown_path,
            "--style", self.style,
        ]
        for trial in trials:
            args += ["--command-name", trial.name, trial.command]
        return args

    def run(
        self,
        trials: Sequence[Trial],
        runs: int,
        warmup: int,
        json_path: str,
        markdown_path: str,
        env: Optional[Mapping[str, str]] = None,
    ) -> None:
        if not trials:
            raise ValueError("hyperfine needs at least one command")

        args = self.build_args(trials, runs, warmup, json_path, markdown_path)
        logger.info(f"Running hyperfine ({len(trials)} commands, {runs} runs, {warmup} warmup)...")
        logger.debug(f"hyperfine args: {args}")

        try:
            completed = subprocess.run(args, env=dict(env) if env is not None else None, check=False)
        except OSError as e:
            raise TimingRunnerError(f"Failed to start hyperfine: {e}") from e

        if completed.returncode != 0:
            raise TimingRunnerError(f"hyperfine exited with status {completed.returncode}")

        logger.info("Results saved to:")
        logger.info(f"  JSON: {json_path}")
        logger.info(f"  Markdown: {markdown_path}")
