"""
Command-line interface for the ListObjects benchmark harness.
"""

import argparse
import json
import logging
import sys

import uvloop

from common.errors import BenchmarkError, ConfigurationError, EndpointUnreachableError
from configuration import (
    DEFAULT_RESULTS_DIR,
    LISTING_CLIENTS,
    SEED_STRATEGIES,
    resolve_config,
)

logger = logging.getLogger("listbench")

DEFAULT_PLOTS_DIR = "plots"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging (only if not already configured)."""
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
        )


class ListBenchCLI:
    """CLI interface for the ListObjects benchmark."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='listbench',
            description='ListObjectsV2 benchmark harness for S3-compatible servers',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Seed + run all benchmarks and write results/report.md
  listbench all

  # Skip seeding (buckets already populated), override tiers
  listbench all --no-seed --tiers "1000 5000"

  # Run a single benchmark for specific tiers
  listbench paginated 5000 10000

  # Compare two runs
  listbench compare target/bench-a target/bench-b

  # Remove buckets only, keep results
  listbench cleanup --keep-results

Environment: S3_ENDPOINT, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, BENCH_TIERS,
BENCH_NESTED_PREFIXES, HYPERFINE_RUNS, HYPERFINE_WARMUP, SEED_PARALLELISM,
SEED_STRATEGY, RESULTS_DIR, PAGE_SIZE, BENCH_LISTING_CLIENT, BENCH_LABEL
            """
        )
        parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        seed_parser = subparsers.add_parser('seed', help='Seed benchmark buckets')
        seed_parser.add_argument('tiers', nargs='*', type=int, help='Tiers to seed (default: BENCH_TIERS)')
        seed_parser.add_argument('--strategy', choices=SEED_STRATEGIES,
                                 help='Seeding strategy (default: SEED_STRATEGY or direct)')

        for name, help_text in (
            ('full-list', 'Benchmark full listing'),
            ('paginated', 'Benchmark paginated listing'),
            ('prefix', 'Benchmark prefix-filtered and delimiter listing'),
        ):
            bench_parser = subparsers.add_parser(name, help=help_text)
            bench_parser.add_argument('tiers', nargs='*', type=int,
                                      help='Tiers to benchmark (default: BENCH_TIERS)')
            bench_parser.add_argument('--listing-client', choices=LISTING_CLIENTS,
                                      help='Client used inside trial commands')

        all_parser = subparsers.add_parser('all', help='Seed, run all benchmarks and write the report')
        all_parser.add_argument('--no-seed', action='store_true', help='Skip seeding')
        all_parser.add_argument('--tiers', type=str, help='Override tiers, e.g. "1000 5000"')
        all_parser.add_argument('--strategy', choices=SEED_STRATEGIES, help='Seeding strategy')
        all_parser.add_argument('--listing-client', choices=LISTING_CLIENTS,
                                help='Client used inside trial commands')

        subparsers.add_parser('report', help='Regenerate report.md from existing results')

        cleanup_parser = subparsers.add_parser('cleanup', help='Remove benchmark buckets and results')
        cleanup_parser.add_argument('--keep-results', action='store_true', help='Remove buckets only')

        compare_parser = subparsers.add_parser('compare', help='Compare two results directories')
        compare_parser.add_argument('dir_a', help='Baseline results directory')
        compare_parser.add_argument('dir_b', help='Candidate results directory')
        compare_parser.add_argument('--output', type=str, help='Write the comparison as CSV')

        visualize_parser = subparsers.add_parser('visualize', help='Plot results')
        visualize_parser.add_argument('--results-dir', type=str,
                                      help=f'Results directory (default: RESULTS_DIR or {DEFAULT_RESULTS_DIR})')
        visualize_parser.add_argument('--output-dir', type=str, default=DEFAULT_PLOTS_DIR,
                                      help=f'Output directory for plots (default: {DEFAULT_PLOTS_DIR})')

        probe_parser = subparsers.add_parser('probe', help='Run one listing operation (used by trials)')
        probe_parser.add_argument('operation', choices=('list', 'paginate', 'prefix', 'delimiter'))
        probe_parser.add_argument('--bucket', required=True)
        probe_parser.add_argument('--page-size', type=int)
        probe_parser.add_argument('--limit', type=int)
        probe_parser.add_argument('--prefix', type=str)
        probe_parser.add_argument('--delimiter', type=str)

        return parser

    def _config(self, args, **overrides):
        tiers = getattr(args, 'tiers', None)
        if tiers:
            overrides['tiers'] = tiers
        return resolve_config(**overrides)

    def run_seed(self, args):
        from cli.seed import SeedCommand

        logger.info("=== Seed Benchmark Buckets ===")
        config = self._config(args, seed_strategy=args.strategy)
        # Short buckets are logged by the seeder and skipped at benchmark time
        uvloop.run(SeedCommand(config).run())
        return 0

    def run_benchmark(self, args):
        from cli.benchmark import BenchmarkCommand
        from benchmarks import FullListBenchmark, PaginatedBenchmark, PrefixBenchmark

        benchmark_class = {
            'full-list': FullListBenchmark,
            'paginated': PaginatedBenchmark,
            'prefix': PrefixBenchmark,
        }[args.command]
        config = self._config(args, listing_client=args.listing_client)
        uvloop.run(BenchmarkCommand(config, benchmark_class).run())
        return 0

    def run_all(self, args):
        from cli.suite import BenchmarkSuite

        config = self._config(args, seed_strategy=args.strategy, listing_client=args.listing_client)
        suite = BenchmarkSuite(config, skip_seed=args.no_seed)
        return uvloop.run(suite.run())

    def run_report(self, args):
        from cli.suite import regenerate_report

        regenerate_report(resolve_config())
        return 0

    def run_cleanup(self, args):
        from cli.cleanup import CleanupCommand

        command = CleanupCommand(resolve_config())
        uvloop.run(command.run(keep_results=args.keep_results))
        return 1 if command.failed else 0

    def run_compare(self, args):
        from cli.compare import ResultComparer

        comparison = ResultComparer(args.dir_a, args.dir_b).compare(args.output)
        return 0 if not comparison.empty else 1

    def run_visualize(self, args):
        from cli.visualiser import BenchmarkVisualizer

        logger.info("=== Visualization Phase ===")
        results_dir = args.results_dir or resolve_config().results_dir
        plots = BenchmarkVisualizer(results_dir, args.output_dir).create_all_plots()
        if not plots:
            logger.error("No plots were created")
            return 1

        logger.info(f"Successfully created {len(plots)} plots in {args.output_dir}")
        for plot in plots:
            logger.info(f"  - {plot}")
        return 0

    def run_probe(self, args):
        from cli.probe import run_probe

        stats = uvloop.run(run_probe(
            resolve_config(),
            args.operation,
            args.bucket,
            page_size=args.page_size,
            limit=args.limit,
            prefix=args.prefix,
            delimiter=args.delimiter,
        ))
        print(json.dumps(stats.to_dict()))
        return 0

    def run(self, args=None):
        """Run the CLI with the given arguments. Returns the exit code."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)
        setup_logging(parsed_args.verbose)

        if not parsed_args.command:
            self.parser.print_help()
            return 2

        handlers = {
            'seed': self.run_seed,
            'full-list': self.run_benchmark,
            'paginated': self.run_benchmark,
            'prefix': self.run_benchmark,
            'all': self.run_all,
            'report': self.run_report,
            'cleanup': self.run_cleanup,
            'compare': self.run_compare,
            'visualize': self.run_visualize,
            'probe': self.run_probe,
        }

        try:
            return handlers[parsed_args.command](parsed_args)
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            return e.exit_code
        except EndpointUnreachableError as e:
            logger.error(f"ERROR: {e}")
            logger.error("Make sure the object store is running. This harness does not manage the server.")
            return e.exit_code
        except BenchmarkError as e:
            logger.error(f"ERROR: {e}")
            return e.exit_code
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=parsed_args.verbose)
            return 1


def main():
    """Main entry point."""
    cli = ListBenchCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
