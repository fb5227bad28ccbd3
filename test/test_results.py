"""
Tests for loading, comparing, archiving and plotting result exports.
"""

import os
import shutil
import sys
import tempfile
import unittest

import pandas as pd

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fake_s3 import write_hyperfine_artifacts

from cli.compare import ResultComparer
from cli.visualiser import BenchmarkVisualizer
from persistence.results import (
    compare_results,
    export_parquet,
    format_comparison,
    load_all_results,
    load_results,
)


class ResultsTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp, ignore_errors=True)
        self.dir_a = os.path.join(self.tmp, "bench-a")
        self.dir_b = os.path.join(self.tmp, "bench-b")
        os.makedirs(self.dir_a)
        os.makedirs(self.dir_b)

    def write(self, directory, label, names, mean):
        write_hyperfine_artifacts(os.path.join(directory, f"{label}.json"),
                                  os.path.join(directory, f"{label}.md"), names, mean)


class TestLoadResults(ResultsTestCase):

    def test_load_results(self):
        self.write(self.dir_a, "full-list", ["flat-100", "nested-100"], 0.1)

        df = load_results(self.dir_a, "full-list")

        self.assertEqual(list(df['command']), ["flat-100", "nested-100"])
        self.assertEqual(list(df['pattern']), ["full-list", "full-list"])
        self.assertAlmostEqual(df['mean'].iloc[1], 0.2)
        self.assertEqual(df['runs'].iloc[0], 3)

    def test_missing_or_corrupt_file_is_empty(self):
        self.assertTrue(load_results(self.dir_a, "prefix").empty)

        with open(os.path.join(self.dir_a, "prefix.json"), "w") as f:
            f.write("{not json")
        with self.assertLogs("persistence.results", level="WARNING"):
            self.assertTrue(load_results(self.dir_a, "prefix").empty)

    def test_load_all_results(self):
        self.write(self.dir_a, "full-list", ["flat-100"], 0.1)
        self.write(self.dir_a, "prefix", ["prefix-filter-100", "delimiter-100"], 0.1)

        df = load_all_results(self.dir_a)

        self.assertEqual(len(df), 3)
        self.assertEqual(set(df['pattern']), {"full-list", "prefix"})


class TestCompareResults(ResultsTestCase):

    def test_delta_by_command_name(self):
        self.write(self.dir_a, "full-list", ["flat-100"], 0.1)
        self.write(self.dir_b, "full-list", ["flat-100"], 0.12)

        comparison = compare_results(self.dir_a, self.dir_b)

        self.assertEqual(len(comparison), 1)
        self.assertAlmostEqual(comparison['delta_pct'].iloc[0], 20.0)
        lines = format_comparison(comparison)
        self.assertIn("full-list/flat-100", lines[0])
        self.assertIn("+20.0%", lines[0])

    def test_command_missing_on_one_side(self):
        self.write(self.dir_a, "full-list", ["flat-100", "nested-100"], 0.1)
        self.write(self.dir_b, "full-list", ["flat-100"], 0.1)

        comparison = compare_results(self.dir_a, self.dir_b)

        row = comparison[comparison['command'] == "nested-100"].iloc[0]
        self.assertTrue(pd.isna(row['delta_pct']))
        self.assertTrue(any("n/a" in line for line in format_comparison(comparison)))

    def test_comparer_writes_csv(self):
        self.write(self.dir_a, "paginated", ["flat-5000 (5p)"], 0.5)
        self.write(self.dir_b, "paginated", ["flat-5000 (5p)"], 0.25)
        output = os.path.join(self.tmp, "comparison.csv")

        comparison = ResultComparer(self.dir_a, self.dir_b).compare(output)

        self.assertAlmostEqual(comparison['delta_pct'].iloc[0], -50.0)
        self.assertEqual(len(pd.read_csv(output)), 1)

    def test_comparer_with_no_results(self):
        self.assertTrue(ResultComparer(self.dir_a, self.dir_b).compare().empty)


class TestArchiveAndPlots(ResultsTestCase):

    def test_export_parquet(self):
        self.write(self.dir_a, "full-list", ["flat-100", "nested-100"], 0.1)

        path = export_parquet(self.dir_a)

        self.assertEqual(len(pd.read_parquet(path)), 2)

    def test_export_parquet_without_results(self):
        self.assertIsNone(export_parquet(self.dir_a))

    def test_visualizer_creates_one_plot_per_pattern(self):
        self.write(self.dir_a, "full-list", ["flat-100", "nested-100"], 0.1)
        self.write(self.dir_a, "prefix", ["prefix-filter-100"], 0.1)
        output_dir = os.path.join(self.tmp, "plots")

        plots = BenchmarkVisualizer(self.dir_a, output_dir).create_all_plots()

        self.assertEqual(sorted(os.path.basename(p) for p in plots), ["full-list.png", "prefix.png"])
        self.assertTrue(all(os.path.exists(p) for p in plots))


if __name__ == '__main__':
    unittest.main()
