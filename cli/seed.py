"""
Seed benchmark buckets with objects.

Creates buckets in two layouts:
  - flat:   all objects at the root (key = "obj-NNNNNN")
  - nested: objects distributed under BENCH_NESTED_PREFIXES prefixes
            (key = "prefix-NNN/obj-NNNNNN")
"""

import logging
from typing import Iterable, List, Optional

from common.storage_factory import create_storage_system
from configuration import BenchConfig
from seeding import SeedReport, create_seeder

logger = logging.getLogger(__name__)


class SeedCommand:
    """Seeds every configured tier with the configured strategy."""

    def __init__(self, config: BenchConfig, storage=None):
        self.config = config
        self.storage = storage or create_storage_system(config)

    async def run(self, tiers: Optional[Iterable[int]] = None) -> List[SeedReport]:
        async with self.storage:
            await self.storage.verify_connection()

            seeder = create_seeder(self.config, self.storage)
            reports = await seeder.seed(tiers)

            names = await self.storage.list_bucket_names(self.config.bucket_prefix)
            logger.info("Buckets:")
            for name in names:
                logger.info(f"  {name}")

        return reports
