"""
In-memory stand-ins for the S3 client, storage system and timing runner used by the tests.
"""

import json
import os
import sys
from collections import defaultdict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from botocore.exceptions import ClientError, EndpointConnectionError

from runners.base import TimingRunner
from systems.base import ObjectStorageSystem


def _client_error(code, operation):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakeS3Client:
    """Async subset of the S3 API with ListObjectsV2 paging semantics."""

    def __init__(self, fail_keys=None, unreachable=False, undeletable_buckets=None):
        self.buckets = {}
        self.calls = defaultdict(int)
        self.fail_keys = set(fail_keys or ())
        self.undeletable_buckets = set(undeletable_buckets or ())
        self.unreachable = unreachable

    def _objects(self, bucket):
        if bucket not in self.buckets:
            raise _client_error("NoSuchBucket", "ListObjectsV2")
        return self.buckets[bucket]

    def add_objects(self, bucket, keys, body=b"x"):
        objects = self.buckets.setdefault(bucket, {})
        for key in keys:
            objects[key] = body

    async def list_buckets(self):
        self.calls["list_buckets"] += 1
        if self.unreachable:
            raise EndpointConnectionError(endpoint_url="http://fake:9000")
        return {"Buckets": [{"Name": name} for name in sorted(self.buckets)]}

    async def head_bucket(self, Bucket):
        self.calls["head_bucket"] += 1
        if Bucket not in self.buckets:
            raise _client_error("404", "HeadBucket")
        return {}

    async def create_bucket(self, Bucket):
        self.calls["create_bucket"] += 1
        self.buckets.setdefault(Bucket, {})
        return {}

    async def put_object(self, Bucket, Key, Body):
        self.calls["put_object"] += 1
        if Key in self.fail_keys:
            raise _client_error("InternalError", "PutObject")
        self._objects(Bucket)[Key] = bytes(Body)
        return {"ETag": '"fake"'}

    async def list_objects_v2(self, Bucket, Prefix="", Delimiter=None, MaxKeys=1000,
                              ContinuationToken=None):
        self.calls["list_objects_v2"] += 1
        objects = self._objects(Bucket)

        entries = {}
        for key in sorted(objects):
            if not key.startswith(Prefix):
                continue
            rest = key[len(Prefix):]
            if Delimiter and Delimiter in rest:
                common = Prefix + rest[:rest.index(Delimiter) + len(Delimiter)]
                entries[common] = "prefix"
            else:
                entries[key] = "key"

        names = sorted(entries)
        if ContinuationToken:
            names = [n for n in names if n > ContinuationToken]

        page = names[:MaxKeys]
        truncated = len(names) > MaxKeys

        response = {"KeyCount": len(page), "IsTruncated": truncated, "MaxKeys": MaxKeys}
        contents = [{"Key": n, "Size": len(objects[n])} for n in page if entries[n] == "key"]
        prefixes = [{"Prefix": n} for n in page if entries[n] == "prefix"]
        if contents:
            response["Contents"] = contents
        if prefixes:
            response["CommonPrefixes"] = prefixes
        if truncated:
            response["NextContinuationToken"] = page[-1]
        return response

    async def delete_objects(self, Bucket, Delete):
        self.calls["delete_objects"] += 1
        objects = self._objects(Bucket)
        if Bucket in self.undeletable_buckets:
            return {"Errors": [{"Key": e["Key"], "Code": "AccessDenied", "Message": "Access Denied"}
                               for e in Delete["Objects"]]}
        deleted = []
        for entry in Delete["Objects"]:
            objects.pop(entry["Key"], None)
            deleted.append({"Key": entry["Key"]})
        return {"Deleted": deleted}

    async def delete_bucket(self, Bucket):
        self.calls["delete_bucket"] += 1
        if self._objects(Bucket):
            raise _client_error("BucketNotEmpty", "DeleteBucket")
        del self.buckets[Bucket]
        return {}


class FakeStorageSystem(ObjectStorageSystem):
    """ObjectStorageSystem wired to a FakeS3Client instead of a network session."""

    def __init__(self, client=None):
        super().__init__("http://fake:9000", {"access_key_id": "test", "secret_access_key": "test",
                                                "region_name": "us-east-1"})
        self.client = client or FakeS3Client()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None


class FakeTimingRunner(TimingRunner):
    """Records invocations and writes hyperfine-shaped artifacts."""

    tool = None

    def __init__(self, mean=0.05):
        self.calls = []
        self.mean = mean

    def run(self, trials, runs, warmup, json_path, markdown_path, env=None):
        self.calls.append({
            "trials": list(trials),
            "runs": runs,
            "warmup": warmup,
            "json_path": json_path,
            "markdown_path": markdown_path,
            "env": dict(env or {}),
        })
        write_hyperfine_artifacts(json_path, markdown_path, [t.name for t in trials], self.mean)


def write_hyperfine_artifacts(json_path, markdown_path, names, mean=0.05):
    results = []
    for i, name in enumerate(names):
        value = mean * (i + 1)
        results.append({
            "command": name,
            "mean": value,
            "stddev": value / 10,
            "median": value,
            "min": value * 0.9,
            "max": value * 1.1,
            "times": [value] * 3,
        })
    with open(json_path, "w") as f:
        json.dump({"results": results}, f)

    lines = ["| Command | Mean [ms] |", "|:---|---:|"]
    lines += [f"| `{r['command']}` | {r['mean'] * 1000:.1f} |" for r in results]
    with open(markdown_path, "w") as f:
        f.write("\n".join(lines) + "\n")
