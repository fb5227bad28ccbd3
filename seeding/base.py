"""
Corpus seeding: ensure every (layout, tier) bucket holds at least tier objects.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from common.layout import LAYOUTS, Layout, bucket_name, generate_keys
from configuration import BenchConfig
from systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    """Result of seeding one bucket."""

    bucket: str
    layout: Layout
    tier: int
    before: int
    after: int
    written: int = 0
    failed: int = 0
    skipped: bool = False

    @property
    def is_short(self) -> bool:
        return self.after < self.tier


class CorpusSeeder:
    """Base class for seeding strategies.

    Subclasses implement _populate(), which writes the keys of one bucket that
    are not yet present. Everything else (bucket creation, the idempotence
    check and the post-seed count) is shared.
    """

    strategy = "base"

    def __init__(self, config: BenchConfig, storage: ObjectStorageSystem, payload: Optional[bytes] = None):
        self.config = config
        self.storage = storage
        # Content is irrelevant to listing; one fixed payload keeps upload cost uniform
        self.payload = payload if payload is not None else os.urandom(config.payload_bytes)

    def keys(self, layout: Layout, tier: int) -> Iterator[str]:
        return generate_keys(layout, tier, self.config.nested_prefixes)

    async def seed(self, tiers: Optional[Iterable[int]] = None) -> List[SeedReport]:
        """Seed both layouts for every tier, smallest tier first."""
        tiers = sorted(tiers or self.config.tiers)
        logger.info(f"Seeding benchmark buckets (tiers: {' '.join(str(t) for t in tiers)}, "
                    f"strategy: {self.strategy})")

        reports = []
        self._prepare()
        try:
            for tier in tiers:
                for layout in LAYOUTS:
                    reports.append(await self.seed_bucket(layout, tier))
                self._finish_tier(tier)
        finally:
            self._cleanup()

        short = [r for r in reports if r.is_short]
        if short:
            logger.warning(f"{len(short)} bucket(s) are below their tier: "
                           f"{', '.join(f'{r.bucket} ({r.after}/{r.tier})' for r in short)}")
        logger.info("Seeding complete.")
        return reports

    async def seed_bucket(self, layout: Layout, tier: int) -> SeedReport:
        bucket = bucket_name(self.config.bucket_prefix, layout, tier)
        await self.storage.ensure_bucket(bucket)

        before = await self.storage.count_objects(bucket)
        if before >= tier:
            logger.info(f"Bucket {bucket} already has {before} objects (>= {tier}); skipping")
            return SeedReport(bucket, Layout(layout), tier, before=before, after=before, skipped=True)

        logger.info(f"Seeding {bucket}: {before} -> {tier} objects ({layout})")
        written, failed = await self._populate(layout, tier, bucket, has_existing=before > 0)

        after = await self.storage.count_objects(bucket)
        if after < tier:
            logger.warning(f"Bucket {bucket} holds {after} objects after seeding, expected {tier} "
                           f"({failed} writes failed)")
        else:
            logger.info(f"Done: {bucket} ({written} objects written)")

        return SeedReport(bucket, Layout(layout), tier, before=before, after=after,
                          written=written, failed=failed)

    async def _populate(self, layout: Layout, tier: int, bucket: str, has_existing: bool) -> Tuple[int, int]:
        """Write missing keys. Returns (written, failed)."""
        raise NotImplementedError

    def _prepare(self) -> None:
        pass

    def _finish_tier(self, tier: int) -> None:
        pass

    def _cleanup(self) -> None:
        pass
