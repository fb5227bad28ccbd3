"""
Single logical listing operation, timed from inside trial commands.

Each probe runs exactly one listing walk (no connectivity pre-check, so the
measured time is the listing itself) and returns its page/entry totals.
"""

import logging
from typing import Optional

from common.layout import DELIMITER
from common.storage_factory import create_storage_system
from configuration import BenchConfig, DEFAULT_PAGE_SIZE
from systems.base import PaginationStats

logger = logging.getLogger(__name__)

PROBE_OPERATIONS = ("list", "paginate", "prefix", "delimiter")


async def run_probe(
    config: BenchConfig,
    operation: str,
    bucket: str,
    page_size: Optional[int] = None,
    limit: Optional[int] = None,
    prefix: Optional[str] = None,
    delimiter: Optional[str] = None,
    storage=None,
) -> PaginationStats:
    """Run one probe operation against bucket.

    list:      all objects (up to limit) with the default page size
    paginate:  all objects with an explicit page size
    prefix:    objects under prefix
    delimiter: top-level common prefixes
    """
    if operation not in PROBE_OPERATIONS:
        raise ValueError(f"Unknown probe operation: {operation}")

    storage = storage or create_storage_system(config)
    async with storage:
        if operation == "list":
            return await storage.paginate(bucket, page_size or DEFAULT_PAGE_SIZE, limit=limit)
        if operation == "paginate":
            return await storage.paginate(bucket, page_size or config.page_size)
        if operation == "prefix":
            return await storage.paginate(bucket, page_size or DEFAULT_PAGE_SIZE, prefix=prefix)
        return await storage.paginate(bucket, page_size or DEFAULT_PAGE_SIZE,
                                      delimiter=delimiter or DELIMITER)
