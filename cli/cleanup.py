"""
Cleanup: remove all benchmark buckets and, optionally, the results directory.
"""

import logging
import os
import shutil
from typing import List

from botocore.exceptions import BotoCoreError, ClientError

from common.storage_factory import create_storage_system
from configuration import BenchConfig

logger = logging.getLogger(__name__)


class CleanupCommand:

    def __init__(self, config: BenchConfig, storage=None):
        self.config = config
        self.storage = storage or create_storage_system(config)
        self.failed: List[str] = []

    async def run(self, keep_results: bool = False) -> List[str]:
        """Delete every bucket named with the configured prefix. Returns the names removed.

        A bucket that cannot be removed is logged and recorded in self.failed;
        the remaining buckets are still processed.
        """
        removed = []
        self.failed = []
        async with self.storage:
            await self.storage.verify_connection()

            buckets = await self.storage.list_bucket_names(self.config.bucket_prefix)
            if not buckets:
                logger.info("No benchmark buckets found.")

            for bucket in buckets:
                logger.info(f"Removing bucket: {bucket} (deleting all objects first)...")
                try:
                    deleted = await self.storage.delete_bucket(bucket)
                except (ClientError, BotoCoreError) as e:
                    logger.error(f"Failed to remove {bucket}: {e}")
                    self.failed.append(bucket)
                    continue
                logger.info(f"Removed: {bucket} ({deleted} objects)")
                removed.append(bucket)

        results_dir = self.config.results_dir
        if not keep_results and os.path.isdir(results_dir):
            logger.info(f"Removing results directory: {results_dir}")
            shutil.rmtree(results_dir)
            logger.info("Results removed.")
        else:
            logger.info(f"Results kept at: {results_dir}")

        if self.failed:
            logger.error(f"Cleanup incomplete; buckets left behind: {', '.join(self.failed)}")
        else:
            logger.info("Cleanup complete.")
        return removed
