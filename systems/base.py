"""
Async base class for S3-compatible object storage systems.

Wraps an aioboto3 client with the handful of operations the harness needs:
bucket lifecycle, single-object writes, ListObjectsV2 paging and a bulk
local-tree synchronization.
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Optional, Set

import aioboto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from common.errors import EndpointUnreachableError
from common.worker_pool import WorkerPool
from configuration import DEFAULT_PAGE_SIZE, DELETE_BATCH_SIZE

logger = logging.getLogger(__name__)

MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


@dataclass
class ListPage:
    """One ListObjectsV2 response page."""

    keys: List[str] = field(default_factory=list)
    common_prefixes: List[str] = field(default_factory=list)
    key_count: int = 0
    is_truncated: bool = False
    next_token: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return self.is_truncated and bool(self.next_token)


@dataclass
class PaginationStats:
    """Totals of one logical listing walked page by page."""

    pages: int = 0
    keys: int = 0
    common_prefixes: int = 0
    page_counts: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "pages": self.pages,
            "keys": self.keys,
            "common_prefixes": self.common_prefixes,
        }


@dataclass
class SyncResult:
    """Outcome of a bulk directory synchronization."""

    uploaded: int = 0
    skipped: int = 0
    failed: int = 0


class ObjectStorageSystem:
    """Async S3 client wrapper, used as an async context manager."""

    def __init__(self, endpoint: str, credentials: dict, max_pool_connections: int = 10):
        self.endpoint = endpoint
        self.credentials = credentials
        self.max_pool_connections = max_pool_connections

        self._config = self._create_config()

        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id"),
            aws_secret_access_key=credentials.get("secret_access_key"),
            region_name=credentials.get("region_name"),
        )

        self.client = None

        self._metrics = {
            "list_requests": 0,
            "put_requests": 0,
            "failed_puts": 0,
        }

        logger.debug(
            f"Initialized async storage for {endpoint} "
            f"(max_pool_connections={self._config.max_pool_connections})"
        )

    def _create_config(self) -> Config:
        """Create the botocore client config."""
        return Config(
            max_pool_connections=self.max_pool_connections,
            connect_timeout=5,
            read_timeout=60,
            # Failures surface to the caller; the harness never retries
            retries={
                "max_attempts": 1,
                "mode": "standard",
            },
            # S3-compatible servers are usually addressed by path
            s3={"addressing_style": "path"},
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        self.client = await self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        ).__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client:
            await self.client.__aexit__(exc_type, exc_val, exc_tb)
            self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    # ------------------------------------------------------------------
    # Buckets
    # ------------------------------------------------------------------

    async def verify_connection(self) -> None:
        """Verify the endpoint answers a basic ListBuckets call.

        Raises:
            EndpointUnreachableError: If the call fails for any reason
        """
        client = self._require_client()
        try:
            await client.list_buckets()
        except (ClientError, BotoCoreError, OSError) as e:
            raise EndpointUnreachableError(self.endpoint, str(e)) from e
        logger.info(f"Connected to {self.endpoint}")

    async def list_bucket_names(self, prefix: str = "") -> List[str]:
        client = self._require_client()
        response = await client.list_buckets()
        names = [b["Name"] for b in response.get("Buckets", [])]
        return sorted(n for n in names if n.startswith(prefix))

    async def bucket_exists(self, bucket: str) -> bool:
        client = self._require_client()
        try:
            await client.head_bucket(Bucket=bucket)
            return True
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code not in MISSING_BUCKET_CODES:
                logger.warning(f"HeadBucket {bucket} failed with {code}; treating as missing")
            return False

    async def ensure_bucket(self, bucket: str) -> bool:
        """Create the bucket if it does not exist. Returns True if it was created."""
        if await self.bucket_exists(bucket):
            return False
        logger.info(f"Creating bucket: {bucket}")
        await self._require_client().create_bucket(Bucket=bucket)
        return True

    async def delete_bucket(self, bucket: str) -> int:
        """Delete every object in the bucket, then the bucket. Returns objects deleted."""
        client = self._require_client()
        keys = sorted(await self.list_keys(bucket))
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]
            response = await client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
            )
            errors = response.get("Errors", [])
            if errors:
                logger.error(f"Failed to delete {len(errors)} objects from {bucket}: {errors[0]}")
        await client.delete_bucket(Bucket=bucket)
        return len(keys)

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    async def put_object(self, bucket: str, key: str, body: bytes) -> bool:
        """Write a single object. Failures are logged and reported as False."""
        client = self._require_client()
        self._metrics["put_requests"] += 1
        try:
            await client.put_object(Bucket=bucket, Key=key, Body=body)
            return True
        except (ClientError, BotoCoreError) as e:
            self._metrics["failed_puts"] += 1
            logger.error(f"PutObject {bucket}/{key} failed: {e}")
            return False

    async def sync_directory(self, local_dir: str, bucket: str, parallelism: int) -> SyncResult:
        """Upload every file under local_dir whose relative path is not yet a key in bucket."""
        existing = await self.list_keys(bucket)
        pending = []
        result = SyncResult()

        for root, _dirs, files in os.walk(local_dir):
            for name in files:
                path = os.path.join(root, name)
                key = os.path.relpath(path, local_dir).replace(os.sep, "/")
                if key in existing:
                    result.skipped += 1
                    continue
                st = os.stat(path)
                # Hard links share one body; other files are read individually
                inode = (st.st_dev, st.st_ino) if st.st_nlink > 1 else None
                pending.append((key, path, inode))

        loop = asyncio.get_running_loop()
        shared_bodies = {}

        async def upload(item):
            key, path, inode = item
            body = shared_bodies.get(inode) if inode else None
            if body is None:
                body = await loop.run_in_executor(None, _read_file, path)
                if inode:
                    shared_bodies[inode] = body
            return await self.put_object(bucket, key, body)

        pool = WorkerPool(parallelism, name=f"sync:{bucket}")
        outcomes = await pool.map(upload, sorted(pending))
        result.uploaded = sum(1 for ok in outcomes if ok)
        result.failed = len(pending) - result.uploaded
        return result

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_page(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        max_keys: Optional[int] = None,
        continuation_token: Optional[str] = None,
    ) -> ListPage:
        """Issue one ListObjectsV2 request."""
        client = self._require_client()
        params = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix
        if delimiter:
            params["Delimiter"] = delimiter
        if max_keys:
            params["MaxKeys"] = max_keys
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        self._metrics["list_requests"] += 1
        response = await client.list_objects_v2(**params)

        keys = [obj["Key"] for obj in response.get("Contents", [])]
        common_prefixes = [p["Prefix"] for p in response.get("CommonPrefixes", [])]
        return ListPage(
            keys=keys,
            common_prefixes=common_prefixes,
            key_count=response.get("KeyCount", len(keys) + len(common_prefixes)),
            is_truncated=bool(response.get("IsTruncated", False)),
            next_token=response.get("NextContinuationToken") or None,
        )

    async def iter_pages(
        self,
        bucket: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> AsyncIterator[ListPage]:
        """Follow continuation tokens until the listing reports no more pages.

        Args:
            limit: Stop once this many entries have been returned (None = all)
        """
        token = None
        returned = 0
        while True:
            max_keys = page_size
            if limit is not None:
                max_keys = min(page_size, limit - returned)
                if max_keys <= 0:
                    return

            page = await self.list_page(
                bucket,
                prefix=prefix,
                delimiter=delimiter,
                max_keys=max_keys,
                continuation_token=token,
            )
            returned += page.key_count
            yield page

            if not page.has_more:
                return
            token = page.next_token

    async def paginate(
        self,
        bucket: str,
        page_size: int = DEFAULT_PAGE_SIZE,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> PaginationStats:
        """Walk a whole listing and return page/entry totals."""
        stats = PaginationStats()
        async for page in self.iter_pages(bucket, page_size, prefix, delimiter, limit):
            stats.pages += 1
            stats.keys += len(page.keys)
            stats.common_prefixes += len(page.common_prefixes)
            stats.page_counts.append(page.key_count)
        return stats

    async def list_keys(self, bucket: str, prefix: Optional[str] = None) -> Set[str]:
        keys: Set[str] = set()
        async for page in self.iter_pages(bucket, prefix=prefix):
            keys.update(page.keys)
        return keys

    async def count_objects(self, bucket: str, prefix: Optional[str] = None) -> int:
        """Recursive object count (pages through the whole bucket)."""
        stats = await self.paginate(bucket, prefix=prefix)
        return stats.keys

    def get_metrics(self) -> dict:
        return self._metrics.copy()
