"""
Benchmark: prefix-filtered list and delimiter-based CommonPrefixes.

Two sub-trials per tier, both against the nested bucket:
  1. Prefix filter: list objects under the first partition.
  2. Delimiter: list top-level CommonPrefixes (an "ls" of the directories).
"""

from typing import Iterable

from benchmarks.base import BenchmarkDriver
from common.layout import DELIMITER, Layout, bucket_name, partition_prefix
from configuration import PREFIX_LABEL
from runners.base import Trial


class PrefixBenchmark(BenchmarkDriver):

    label = PREFIX_LABEL
    title = "Prefix & Delimiter List"

    def candidate_trials(self, tier: int) -> Iterable[Trial]:
        bucket = bucket_name(self.config.bucket_prefix, Layout.NESTED, tier)
        yield Trial(
            name=f"prefix-filter-{tier}",
            command=self.commands.prefix_filter(bucket, partition_prefix(0)),
            bucket=bucket,
            tier=tier,
        )
        yield Trial(
            name=f"delimiter-{tier}",
            command=self.commands.delimiter(bucket, DELIMITER),
            bucket=bucket,
            tier=tier,
        )
