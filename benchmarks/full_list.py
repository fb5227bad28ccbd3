"""
Benchmark: full list (all objects of a bucket in one logical call).
"""

from typing import Iterable

from benchmarks.base import BenchmarkDriver
from common.layout import LAYOUTS, bucket_name
from configuration import FULL_LIST_LABEL
from runners.base import Trial


class FullListBenchmark(BenchmarkDriver):
    """One listing call per (layout, tier) requesting up to tier items.

    The client may page internally to honor the item count; the measured unit
    is the whole logical operation.
    """

    label = FULL_LIST_LABEL
    title = "Full List"

    def candidate_trials(self, tier: int) -> Iterable[Trial]:
        for layout in LAYOUTS:
            bucket = bucket_name(self.config.bucket_prefix, layout, tier)
            yield Trial(
                name=f"{layout}-{tier}",
                command=self.commands.full_list(bucket, tier),
                bucket=bucket,
                tier=tier,
            )
