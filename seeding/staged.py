"""
Stage-then-sync seeding: hard-link one payload file into a local tree, then
synchronize the whole tree to the bucket in one bulk call.
"""

import logging
import os
import shutil
import tempfile
from typing import Optional, Tuple

from common.layout import LAYOUTS, Layout
from seeding.base import CorpusSeeder

logger = logging.getLogger(__name__)

PAYLOAD_FILENAME = ".payload"


class StagedSyncSeeder(CorpusSeeder):
    """Materializes keys as hard links in a staging area and bulk-syncs them."""

    strategy = "staged"

    def __init__(self, *args, stage_root: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self._stage_root_override = stage_root
        self.stage_dir: Optional[str] = None
        self.payload_path: Optional[str] = None

    def _prepare(self) -> None:
        self.stage_dir = tempfile.mkdtemp(prefix="listbench-stage-", dir=self._stage_root_override)
        self.payload_path = os.path.join(self.stage_dir, PAYLOAD_FILENAME)
        with open(self.payload_path, "wb") as f:
            f.write(self.payload)
        logger.debug(f"Staging area: {self.stage_dir}")

    def tier_dir(self, layout: Layout, tier: int) -> str:
        return os.path.join(self.stage_dir, f"{Layout(layout).value}-{tier}")

    def stage(self, layout: Layout, tier: int) -> str:
        """Create the local tree for one bucket. Returns its directory."""
        directory = self.tier_dir(layout, tier)
        os.makedirs(directory, exist_ok=True)

        logger.info(f"Creating {tier} local files ({layout})...")
        for key in self.keys(layout, tier):
            path = os.path.join(directory, *key.split("/"))
            parent = os.path.dirname(path)
            if parent != directory:
                os.makedirs(parent, exist_ok=True)
            if not os.path.exists(path):
                os.link(self.payload_path, path)
        return directory

    async def _populate(self, layout: Layout, tier: int, bucket: str, has_existing: bool) -> Tuple[int, int]:
        directory = self.stage(layout, tier)
        logger.info(f"Syncing {tier} objects to s3://{bucket}/ ...")
        result = await self.storage.sync_directory(directory, bucket, self.config.seed_parallelism)
        return result.uploaded, result.failed

    def _finish_tier(self, tier: int) -> None:
        # Free disk space before staging the next tier
        for layout in LAYOUTS:
            shutil.rmtree(self.tier_dir(layout, tier), ignore_errors=True)

    def _cleanup(self) -> None:
        if self.stage_dir:
            shutil.rmtree(self.stage_dir, ignore_errors=True)
            self.stage_dir = None
