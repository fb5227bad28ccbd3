"""
S3-compatible object storage system implementation.
"""

import logging

from systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


class S3CompatibleSystem(ObjectStorageSystem):
    """Object storage reached through an S3-compatible endpoint."""

    def __init__(self, endpoint: str, credentials: dict = None, max_pool_connections: int = 10):
        if credentials is None:
            credentials = {}

        super().__init__(
            endpoint=endpoint,
            credentials=credentials,
            max_pool_connections=max_pool_connections,
        )
        logger.debug(f"Initialized S3-compatible system at {endpoint}")
