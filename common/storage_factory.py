"""
Factory module for creating storage system instances.
"""

import logging

# Suppress boto3/botocore logging before importing any boto3-related modules
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('aiobotocore').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)

from configuration import BenchConfig
from systems.s3 import S3CompatibleSystem

logger = logging.getLogger(__name__)


def create_storage_system(config: BenchConfig) -> S3CompatibleSystem:
    """Create the storage system described by the configuration.

    The connection pool is sized so that every concurrent seeding write has a
    connection, plus headroom for listing calls.

    Args:
        config: Resolved benchmark configuration

    Returns:
        Storage system instance (not yet entered)
    """
    credentials = {
        "access_key_id": config.access_key_id,
        "secret_access_key": config.secret_access_key,
        "region_name": config.region,
    }
    return S3CompatibleSystem(
        endpoint=config.endpoint,
        credentials=credentials,
        max_pool_connections=config.seed_parallelism + 10,
    )
