"""
Key-space layouts and deterministic naming for benchmark buckets.
"""

from enum import Enum
from typing import Iterator, List


class Layout(str, Enum):
    """Key naming/distribution scheme used when generating benchmark objects."""

    FLAT = "flat"
    NESTED = "nested"

    def __str__(self) -> str:
        return self.value


LAYOUTS = (Layout.FLAT, Layout.NESTED)

FLAT_KEY_FORMAT = "obj-{index:06d}"
PARTITION_FORMAT = "prefix-{partition:03d}"
DELIMITER = "/"


def bucket_name(bucket_prefix: str, layout: Layout, tier: int) -> str:
    """Return the bucket name for a layout and tier: {prefix}-{layout}-{tier}."""
    return f"{bucket_prefix}-{Layout(layout).value}-{tier}"


def partition_prefix(partition: int) -> str:
    """Return the key prefix (with trailing delimiter) of a nested partition."""
    return PARTITION_FORMAT.format(partition=partition) + DELIMITER


def partition_counts(count: int, partitions: int) -> List[int]:
    """Distribute count objects across partitions.

    Every partition gets count // partitions objects; the first
    count % partitions partitions get one extra.
    """
    if partitions <= 0:
        raise ValueError(f"partitions must be positive, got {partitions}")
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    base, remainder = divmod(count, partitions)
    return [base + 1 if p < remainder else base for p in range(partitions)]


def flat_keys(count: int) -> Iterator[str]:
    for index in range(count):
        yield FLAT_KEY_FORMAT.format(index=index)


def nested_keys(count: int, partitions: int) -> Iterator[str]:
    for partition, this_count in enumerate(partition_counts(count, partitions)):
        prefix = partition_prefix(partition)
        for index in range(this_count):
            yield prefix + FLAT_KEY_FORMAT.format(index=index)


def generate_keys(layout: Layout, count: int, partitions: int) -> Iterator[str]:
    """Yield the deterministic keys of a layout holding count objects."""
    if Layout(layout) is Layout.FLAT:
        return flat_keys(count)
    return nested_keys(count, partitions)


def expected_prefix_count(count: int, partitions: int, partition: int = 0) -> int:
    """Number of objects a nested bucket of count objects holds under one partition."""
    return partition_counts(count, partitions)[partition]


def populated_partitions(count: int, partitions: int) -> int:
    """Number of partitions holding at least one object (= common prefixes at top level)."""
    return sum(1 for c in partition_counts(count, partitions) if c > 0)
