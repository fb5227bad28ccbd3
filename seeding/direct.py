"""
Direct-write seeding: one PutObject per key, fanned out up to the configured parallelism.
"""

import logging
from typing import Tuple

from common.layout import Layout
from common.worker_pool import WorkerPool
from seeding.base import CorpusSeeder

logger = logging.getLogger(__name__)


class DirectWriteSeeder(CorpusSeeder):
    """Writes each missing key straight to the remote store."""

    strategy = "direct"

    async def _populate(self, layout: Layout, tier: int, bucket: str, has_existing: bool) -> Tuple[int, int]:
        existing = await self.storage.list_keys(bucket) if has_existing else set()
        missing = (key for key in self.keys(layout, tier) if key not in existing)

        async def put(key):
            return await self.storage.put_object(bucket, key, self.payload)

        pool = WorkerPool(self.config.seed_parallelism, name=f"seed:{bucket}")
        outcomes = await pool.map(put, missing)

        written = sum(1 for ok in outcomes if ok)
        failed = (len(outcomes) - written) + pool.failed
        return written, failed
