"""
Orchestrator: seed, run all ListObjects benchmarks and generate a combined report.
"""

import logging
import os
from typing import Dict, Optional

from benchmarks import BENCHMARKS
from benchmarks.base import STATUS_FAILED, STATUS_OK, PhaseOutcome
from common.errors import NoEligibleWorkError, TimingRunnerError
from common.phase_manager import PhaseManager, RunMetadata, collect_run_metadata
from common.storage_factory import create_storage_system
from common.tools import require_tools, tools_for_listing_client
from configuration import BenchConfig
from persistence.report import ReportAggregator
from persistence.results import export_parquet
from runners import HyperfineRunner, TimingRunner
from seeding import create_seeder

logger = logging.getLogger(__name__)

SOURCE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
BANNER = "=" * 55


class BenchmarkSuite:
    """Runs seed -> full-list -> paginated -> prefix -> report."""

    def __init__(
        self,
        config: BenchConfig,
        storage=None,
        runner: Optional[TimingRunner] = None,
        skip_seed: bool = False,
        source_dir: str = SOURCE_DIR,
    ):
        self.config = config
        self.storage = storage or create_storage_system(config)
        self.runner = runner or HyperfineRunner()
        self.skip_seed = skip_seed
        self.source_dir = source_dir
        self.phase_manager = PhaseManager()
        self.outcomes: Dict[str, PhaseOutcome] = {}

    def required_tools(self):
        tools = list(tools_for_listing_client(self.config.listing_client))
        if self.runner.tool:
            tools.append(self.runner.tool)
        return tools

    def _log_banner(self, metadata: RunMetadata) -> None:
        logger.info(BANNER)
        logger.info(" ListObjects Benchmark Suite")
        logger.info(f" Branch: {metadata.branch}  Commit: {metadata.revision}")
        logger.info(f" Endpoint: {self.config.endpoint}")
        logger.info(f" Tiers: {' '.join(str(t) for t in self.config.tiers)}")
        logger.info(f" Runs: {self.config.runs}  Warmup: {self.config.warmup}")
        logger.info(BANNER)

    async def _seed(self, step: str) -> None:
        self.phase_manager.begin_phase("seed")
        if self.skip_seed:
            logger.info(f"--- Step {step}: Seeding skipped (--no-seed) ---")
            self.phase_manager.end_phase("skipped")
            return

        logger.info(f"--- Step {step}: Seeding buckets ---")
        seeder = create_seeder(self.config, self.storage)
        reports = await seeder.seed()
        short = sum(1 for r in reports if r.is_short)
        self.phase_manager.end_phase("ok", f"{short} short bucket(s)" if short else "")

    async def _benchmark(self, step: str, benchmark_class) -> PhaseOutcome:
        driver = benchmark_class(self.config, self.storage, self.runner)
        logger.info(f"--- Step {step}: {driver.title} benchmark ---")
        self.phase_manager.begin_phase(driver.label)
        try:
            outcome = await driver.run()
        except (NoEligibleWorkError, TimingRunnerError) as e:
            logger.error(f"{driver.label} failed: {e}")
            skipped = getattr(e, "skipped", [])
            outcome = PhaseOutcome(label=driver.label, title=driver.title, status=STATUS_FAILED,
                                   skipped=skipped, error=str(e))
        self.phase_manager.end_phase(outcome.status, outcome.error)
        return outcome

    async def run(self) -> int:
        """Run the whole suite. Returns the process exit code."""
        require_tools(*self.required_tools())
        self.phase_manager.begin_run()

        total_steps = len(BENCHMARKS) + 1
        async with self.storage:
            await self.storage.verify_connection()
            self._log_banner(collect_run_metadata(self.config, self.phase_manager, self.source_dir))

            await self._seed(f"1/{total_steps}")
            for index, benchmark_class in enumerate(BENCHMARKS, start=2):
                outcome = await self._benchmark(f"{index}/{total_steps}", benchmark_class)
                self.outcomes[outcome.label] = outcome

        metadata = collect_run_metadata(self.config, self.phase_manager, self.source_dir)
        report_path = ReportAggregator(self.config).write(metadata, self.outcomes)
        export_parquet(self.config.results_dir,
                       labels=[o.label for o in self.outcomes.values() if o.status == STATUS_OK])

        failed = [o.label for o in self.outcomes.values() if o.status == STATUS_FAILED]
        logger.info(BANNER)
        if failed:
            logger.error(f" Benchmark suite finished with failed phases: {', '.join(failed)}")
        else:
            logger.info(f" Benchmark suite complete! Total time: {metadata.elapsed_seconds:.0f}s")
        logger.info(f" Report: {report_path}")
        logger.info(BANNER)
        return 1 if failed else 0


def regenerate_report(config: BenchConfig, source_dir: str = SOURCE_DIR) -> str:
    """Rewrite report.md from the artifacts already in the results directory."""
    phase_manager = PhaseManager()
    phase_manager.begin_run()
    metadata = collect_run_metadata(config, phase_manager, source_dir)
    return ReportAggregator(config).write(metadata)
