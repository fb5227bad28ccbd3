"""
Base class for access-pattern benchmarks.

A driver builds the (layout x tier) matrix of named trial commands, drops
trials whose bucket is missing or under-populated, and hands the rest to the
timing runner in one invocation.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from benchmarks.commands import TrialCommandBuilder, create_command_builder
from common.errors import NoEligibleWorkError
from configuration import BenchConfig
from runners.base import TimingRunner, Trial
from systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NOT_APPLICABLE = "not_applicable"
STATUS_FAILED = "failed"


@dataclass
class SkippedTrial:
    name: str
    bucket: str
    reason: str


@dataclass
class PhaseOutcome:
    """What one benchmark phase did."""

    label: str
    title: str
    status: str = STATUS_OK
    trials: List[Trial] = field(default_factory=list)
    skipped: List[SkippedTrial] = field(default_factory=list)
    json_path: Optional[str] = None
    markdown_path: Optional[str] = None
    error: str = ""


class BenchmarkDriver:
    """Builds and runs the trial matrix of one access pattern."""

    label = ""
    title = ""

    def __init__(
        self,
        config: BenchConfig,
        storage: ObjectStorageSystem,
        runner: TimingRunner,
        commands: Optional[TrialCommandBuilder] = None,
    ):
        self.config = config
        self.storage = storage
        self.runner = runner
        self.commands = commands or create_command_builder(config)

    def eligible_tiers(self, tiers: List[int]) -> List[int]:
        """Tiers this pattern applies to."""
        return tiers

    def candidate_trials(self, tier: int) -> Iterable[Trial]:
        """Trials for one tier, before bucket checks."""
        raise NotImplementedError

    def describe(self) -> str:
        return self.title

    async def check_bucket(self, bucket: str, tier: int) -> Optional[str]:
        """Return a skip reason, or None if the bucket is ready to be measured."""
        if not await self.storage.bucket_exists(bucket):
            return f"Bucket {bucket} does not exist. Run seed first."

        count = await self.storage.count_objects(bucket)
        if count < tier:
            return f"Bucket {bucket} holds {count} objects, expected {tier}. Re-run seed."
        if count > tier:
            logger.warning(f"Bucket {bucket} holds {count} objects, more than its tier {tier}")
        return None

    async def build_matrix(self, tiers: List[int]) -> Tuple[List[Trial], List[SkippedTrial]]:
        trials: List[Trial] = []
        skipped: List[SkippedTrial] = []
        checked: Dict[str, Optional[str]] = {}

        for tier in tiers:
            for trial in self.candidate_trials(tier):
                if trial.bucket not in checked:
                    checked[trial.bucket] = await self.check_bucket(trial.bucket, trial.tier)
                reason = checked[trial.bucket]
                if reason:
                    logger.warning(f"WARN: {reason} Skipping {trial.name}.")
                    skipped.append(SkippedTrial(trial.name, trial.bucket, reason))
                    continue
                trials.append(trial)

        return trials, skipped

    def clear_artifacts(self) -> None:
        """Remove this pattern's exports from an earlier run."""
        for extension in ("json", "md"):
            path = self.config.artifact_path(self.label, extension)
            if os.path.exists(path):
                logger.debug(f"Removing previous artifact {path}")
                os.remove(path)

    async def run(self, tiers: Optional[Iterable[int]] = None) -> PhaseOutcome:
        """Run the benchmark for the given tiers (default: configured tiers).

        Raises:
            NoEligibleWorkError: If every trial had to be skipped
            TimingRunnerError: If the timing runner fails
        """
        tiers = sorted(tiers or self.config.tiers)
        outcome = PhaseOutcome(label=self.label, title=self.title)
        self.clear_artifacts()

        eligible = self.eligible_tiers(tiers)
        if not eligible:
            logger.info(f"No tiers apply to {self.label}; nothing to benchmark.")
            outcome.status = STATUS_NOT_APPLICABLE
            return outcome

        logger.info(f"=== Benchmark: {self.describe()} ===")
        logger.info(f"Runs: {self.config.runs}, Warmup: {self.config.warmup}")

        trials, skipped = await self.build_matrix(eligible)
        outcome.skipped = skipped
        if not trials:
            raise NoEligibleWorkError(self.label, skipped)

        self.config.ensure_results_dir()
        outcome.trials = trials
        outcome.json_path = self.config.artifact_path(self.label, "json")
        outcome.markdown_path = self.config.artifact_path(self.label, "md")

        self.runner.run(
            trials,
            runs=self.config.runs,
            warmup=self.config.warmup,
            json_path=outcome.json_path,
            markdown_path=outcome.markdown_path,
            env=self.config.subprocess_env(),
        )
        return outcome
