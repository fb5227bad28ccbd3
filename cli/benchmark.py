"""
Run one access-pattern benchmark (full-list, paginated or prefix).
"""

import logging
from typing import Iterable, Optional, Type

from benchmarks.base import BenchmarkDriver, PhaseOutcome
from common.storage_factory import create_storage_system
from common.tools import require_tools, tools_for_listing_client
from configuration import BenchConfig
from runners import HyperfineRunner, TimingRunner

logger = logging.getLogger(__name__)


class BenchmarkCommand:
    """Checks tools and connectivity, then runs one driver."""

    def __init__(
        self,
        config: BenchConfig,
        benchmark_class: Type[BenchmarkDriver],
        storage=None,
        runner: Optional[TimingRunner] = None,
    ):
        self.config = config
        self.benchmark_class = benchmark_class
        self.storage = storage or create_storage_system(config)
        self.runner = runner or HyperfineRunner()

    def required_tools(self):
        tools = list(tools_for_listing_client(self.config.listing_client))
        if self.runner.tool:
            tools.append(self.runner.tool)
        return tools

    async def run(self, tiers: Optional[Iterable[int]] = None) -> PhaseOutcome:
        require_tools(*self.required_tools())

        async with self.storage:
            await self.storage.verify_connection()
            driver = self.benchmark_class(self.config, self.storage, self.runner)
            return await driver.run(tiers)
