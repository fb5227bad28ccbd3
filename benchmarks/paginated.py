"""
Benchmark: paginated list (walk every page using continuation tokens).
"""

import logging
from typing import Iterable, List

from benchmarks.base import BenchmarkDriver
from common.layout import LAYOUTS, bucket_name
from configuration import PAGINATED_LABEL
from runners.base import Trial

logger = logging.getLogger(__name__)


def page_count(tier: int, page_size: int) -> int:
    """Number of ListObjectsV2 requests needed to walk tier objects."""
    return -(-tier // page_size)


class PaginatedBenchmark(BenchmarkDriver):
    """Measures the full continuation-token loop as one unit."""

    label = PAGINATED_LABEL
    title = "Paginated List"

    def describe(self) -> str:
        return f"{self.title} (page size: {self.config.page_size})"

    def eligible_tiers(self, tiers: List[int]) -> List[int]:
        # Pagination is meaningless unless the bucket spans several pages
        eligible = [t for t in tiers if t > self.config.page_size]
        if not eligible:
            logger.info(f"No tiers > {self.config.page_size} objects. "
                        f"Pagination benchmark requires > {self.config.page_size} objects.")
        return eligible

    def candidate_trials(self, tier: int) -> Iterable[Trial]:
        pages = page_count(tier, self.config.page_size)
        for layout in LAYOUTS:
            bucket = bucket_name(self.config.bucket_prefix, layout, tier)
            yield Trial(
                name=f"{layout}-{tier} ({pages}p)",
                command=self.commands.paginated(bucket, self.config.page_size),
                bucket=bucket,
                tier=tier,
            )
