"""
Access-pattern benchmarks.
"""

from benchmarks.base import BenchmarkDriver, PhaseOutcome, SkippedTrial
from benchmarks.full_list import FullListBenchmark
from benchmarks.paginated import PaginatedBenchmark
from benchmarks.prefix import PrefixBenchmark

# Suite order
BENCHMARKS = (FullListBenchmark, PaginatedBenchmark, PrefixBenchmark)

__all__ = [
    'BenchmarkDriver', 'PhaseOutcome', 'SkippedTrial',
    'FullListBenchmark', 'PaginatedBenchmark', 'PrefixBenchmark', 'BENCHMARKS',
]
