"""
Tests for the direct-write and stage-then-sync seeding strategies.
"""

import os
import shutil
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fake_s3 import FakeS3Client, FakeStorageSystem

from common.layout import Layout, generate_keys
from configuration import resolve_config
from seeding import DirectWriteSeeder, StagedSyncSeeder, create_seeder


def make_config(**overrides):
    overrides.setdefault("tiers", [10, 100])
    overrides.setdefault("nested_prefixes", 10)
    overrides.setdefault("seed_parallelism", 4)
    overrides.setdefault("payload_bytes", 16)
    return resolve_config({}, **overrides)


class TestDirectWriteSeeder(unittest.IsolatedAsyncioTestCase):
    """Seeding by individual PutObject calls."""

    def setUp(self):
        self.client = FakeS3Client()
        self.storage = FakeStorageSystem(self.client)
        self.config = make_config()

    async def test_seed_creates_both_layouts_per_tier(self):
        reports = await DirectWriteSeeder(self.config, self.storage).seed()

        self.assertEqual([r.bucket for r in reports], [
            "bench-list-flat-10", "bench-list-nested-10",
            "bench-list-flat-100", "bench-list-nested-100",
        ])
        self.assertEqual(set(self.client.buckets["bench-list-flat-100"]),
                         set(generate_keys(Layout.FLAT, 100, 10)))
        self.assertEqual(set(self.client.buckets["bench-list-nested-100"]),
                         set(generate_keys(Layout.NESTED, 100, 10)))
        self.assertTrue(all(not r.is_short for r in reports))

    async def test_seed_is_idempotent(self):
        """A second seed against fully populated buckets writes nothing."""
        seeder = DirectWriteSeeder(self.config, self.storage)
        await seeder.seed()
        puts = self.storage.get_metrics()["put_requests"]

        reports = await seeder.seed()

        self.assertTrue(all(r.skipped for r in reports))
        self.assertEqual(self.storage.get_metrics()["put_requests"], puts)
        self.assertEqual(len(self.client.buckets["bench-list-nested-100"]), 100)

    async def test_partial_bucket_only_missing_keys_written(self):
        keys = list(generate_keys(Layout.FLAT, 100, 10))
        self.client.add_objects("bench-list-flat-100", keys[:40])

        report = await DirectWriteSeeder(self.config, self.storage).seed_bucket(Layout.FLAT, 100)

        self.assertEqual(report.before, 40)
        self.assertEqual(report.written, 60)
        self.assertEqual(report.after, 100)
        self.assertEqual(self.storage.get_metrics()["put_requests"], 60)

    async def test_failed_writes_leave_bucket_short(self):
        client = FakeS3Client(fail_keys={"obj-000003", "obj-000007"})
        storage = FakeStorageSystem(client)

        with self.assertLogs("seeding.base", level="WARNING") as logs:
            report = await DirectWriteSeeder(self.config, storage).seed_bucket(Layout.FLAT, 10)

        self.assertTrue(report.is_short)
        self.assertEqual(report.after, 8)
        self.assertEqual(report.failed, 2)
        self.assertTrue(any("expected 10" in line for line in logs.output))

    async def test_oversized_bucket_is_left_alone(self):
        self.client.add_objects("bench-list-flat-10", generate_keys(Layout.FLAT, 15, 10))

        report = await DirectWriteSeeder(self.config, self.storage).seed_bucket(Layout.FLAT, 10)

        self.assertTrue(report.skipped)
        self.assertEqual(report.after, 15)


class TestStagedSyncSeeder(unittest.IsolatedAsyncioTestCase):
    """Seeding through a hard-linked staging tree."""

    def setUp(self):
        self.stage_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.stage_root, ignore_errors=True)

    async def test_staged_produces_same_key_set_as_direct(self):
        config = make_config(seed_strategy="staged")
        direct_client = FakeS3Client()
        staged_client = FakeS3Client()

        await DirectWriteSeeder(config, FakeStorageSystem(direct_client)).seed()
        await StagedSyncSeeder(config, FakeStorageSystem(staged_client), stage_root=self.stage_root).seed()

        self.assertEqual(set(direct_client.buckets), set(staged_client.buckets))
        for bucket, objects in direct_client.buckets.items():
            self.assertEqual(set(objects), set(staged_client.buckets[bucket]), bucket)

    async def test_staging_area_removed_after_seed(self):
        seeder = StagedSyncSeeder(make_config(), FakeStorageSystem(), stage_root=self.stage_root)

        await seeder.seed()

        self.assertIsNone(seeder.stage_dir)
        self.assertEqual(os.listdir(self.stage_root), [])

    async def test_stage_hard_links_payload(self):
        seeder = StagedSyncSeeder(make_config(), FakeStorageSystem(), payload=b"abc",
                                  stage_root=self.stage_root)
        seeder._prepare()
        try:
            directory = seeder.stage(Layout.NESTED, 20)
            path = os.path.join(directory, "prefix-003", "obj-000001")
            self.assertTrue(os.path.exists(path))
            self.assertEqual(os.stat(path).st_ino, os.stat(seeder.payload_path).st_ino)
            staged = sum(len(files) for _, _, files in os.walk(directory))
            self.assertEqual(staged, 20)
        finally:
            seeder._cleanup()

    async def test_staged_seed_skips_existing_objects(self):
        client = FakeS3Client()
        client.add_objects("bench-list-nested-10", list(generate_keys(Layout.NESTED, 10, 10))[:4])
        storage = FakeStorageSystem(client)
        seeder = StagedSyncSeeder(make_config(tiers=[10]), storage, stage_root=self.stage_root)

        reports = await seeder.seed()

        nested = [r for r in reports if r.layout == Layout.NESTED][0]
        self.assertEqual(nested.written, 6)
        self.assertEqual(nested.after, 10)


class TestCreateSeeder(unittest.TestCase):

    def test_strategy_selection(self):
        storage = FakeStorageSystem()
        self.assertIsInstance(create_seeder(make_config(), storage), DirectWriteSeeder)
        self.assertIsInstance(create_seeder(make_config(seed_strategy="staged"), storage), StagedSyncSeeder)


if __name__ == '__main__':
    unittest.main()
