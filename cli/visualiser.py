"""
Generate plots from a results directory.
"""

import logging
from typing import List

from persistence.results import load_all_results
from visualizations.result_plots import ResultPlotter

logger = logging.getLogger(__name__)


class BenchmarkVisualizer:
    """Loads every pattern's results and plots them."""

    def __init__(self, results_dir: str, output_dir: str):
        self.results_dir = results_dir
        self.output_dir = output_dir
        self.data = load_all_results(results_dir)
        logger.info(f"Loaded {len(self.data)} results from {results_dir}")

    def create_all_plots(self) -> List[str]:
        plotter = ResultPlotter(self.data, self.output_dir)
        return plotter.create_all_plots()
