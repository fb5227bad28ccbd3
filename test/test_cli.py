"""
Tests for the listbench command-line entry point and its exit codes.
"""

import os
import sys
import unittest
from unittest.mock import AsyncMock, patch

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.errors import EndpointUnreachableError, NoEligibleWorkError, ToolMissingError
from listbench import ListBenchCLI


class TestListBenchCLI(unittest.TestCase):

    def setUp(self):
        self.cli = ListBenchCLI()
        env = patch.dict(os.environ, {}, clear=False)
        env.start()
        self.addCleanup(env.stop)
        for name in ("BENCH_TIERS", "HYPERFINE_RUNS", "SEED_STRATEGY", "BENCH_LISTING_CLIENT"):
            os.environ.pop(name, None)

    def test_no_command_prints_help(self):
        with patch("sys.stdout"):
            self.assertEqual(self.cli.run([]), 2)

    def test_invalid_tier_is_configuration_error(self):
        self.assertEqual(self.cli.run(["full-list", "0"]), 2)

    def test_invalid_environment_is_configuration_error(self):
        os.environ["HYPERFINE_RUNS"] = "zero"
        self.assertEqual(self.cli.run(["cleanup"]), 2)

    def test_unreachable_endpoint_exit_code(self):
        with patch("cli.cleanup.CleanupCommand") as command:
            command.return_value.run = AsyncMock(side_effect=EndpointUnreachableError("http://x:9000"))
            self.assertEqual(self.cli.run(["cleanup"]), 1)

    def test_incomplete_cleanup_exit_code(self):
        with patch("cli.cleanup.CleanupCommand") as command:
            command.return_value.run = AsyncMock(return_value=[])
            command.return_value.failed = ["bench-list-flat-100"]
            self.assertEqual(self.cli.run(["cleanup"]), 1)

            command.return_value.failed = []
            self.assertEqual(self.cli.run(["cleanup", "--keep-results"]), 0)

    def test_missing_tool_exit_code(self):
        with patch("cli.benchmark.BenchmarkCommand") as command:
            command.return_value.run = AsyncMock(side_effect=ToolMissingError(["hyperfine"]))
            self.assertEqual(self.cli.run(["prefix", "100"]), 1)

    def test_no_eligible_buckets_exit_code(self):
        with patch("cli.benchmark.BenchmarkCommand") as command:
            command.return_value.run = AsyncMock(side_effect=NoEligibleWorkError("full-list"))
            self.assertEqual(self.cli.run(["full-list"]), 1)

    def test_benchmark_tiers_and_client_reach_config(self):
        with patch("cli.benchmark.BenchmarkCommand") as command:
            command.return_value.run = AsyncMock(return_value=None)
            self.assertEqual(self.cli.run(["paginated", "5000", "2000", "--listing-client", "native"]), 0)

        config, benchmark_class = command.call_args[0]
        self.assertEqual(config.tiers, (2000, 5000))
        self.assertEqual(config.listing_client, "native")
        self.assertEqual(benchmark_class.__name__, "PaginatedBenchmark")

    def test_seed_returns_zero(self):
        with patch("cli.seed.SeedCommand") as command:
            command.return_value.run = AsyncMock(return_value=[])
            self.assertEqual(self.cli.run(["seed", "100", "--strategy", "staged"]), 0)

        config = command.call_args[0][0]
        self.assertEqual(config.seed_strategy, "staged")
        self.assertEqual(config.tiers, (100,))

    def test_all_propagates_suite_exit_code(self):
        with patch("cli.suite.BenchmarkSuite") as suite:
            suite.return_value.run = AsyncMock(return_value=1)
            self.assertEqual(self.cli.run(["all", "--no-seed", "--tiers", "1000 5000"]), 1)

        config = suite.call_args[0][0]
        self.assertEqual(config.tiers, (1000, 5000))
        self.assertTrue(suite.call_args[1]["skip_seed"])


if __name__ == '__main__':
    unittest.main()
