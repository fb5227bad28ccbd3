"""
Bar charts of mean listing time per trial.
"""

import logging
import os
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from .base import BasePlotter

logger = logging.getLogger(__name__)


class ResultPlotter(BasePlotter):
    """Plots one chart per access pattern from load_all_results() output."""

    def create_pattern_chart(self, pattern: str):
        """Mean time per command with stddev error bars. Returns the PNG path."""
        subset = self.data[self.data['pattern'] == pattern]
        if len(subset) == 0:
            logger.warning(f"No data for pattern {pattern}")
            return None

        names = subset['command'].astype(str).tolist()
        means_ms = subset['mean'].astype(float).to_numpy() * 1000
        stddev_ms = subset['stddev'].fillna(0).astype(float).to_numpy() * 1000
        positions = np.arange(len(names))

        color = self.get_pattern_colors().get(pattern)
        fig, ax = plt.subplots(figsize=(max(6, len(names) * 1.2), 5))
        try:
            ax.bar(positions, means_ms, yerr=stddev_ms, capsize=4, alpha=0.8,
                   color=color, edgecolor='black')
            ax.set_xticks(positions)
            ax.set_xticklabels(names, rotation=30, ha='right')
            ax.set_ylabel('Mean time (ms)')
            ax.set_title(f'ListObjects: {pattern}', fontsize=12, fontweight='bold')
            ax.grid(True, axis='y', alpha=0.3)
            fig.tight_layout()

            os.makedirs(self.output_dir, exist_ok=True)
            path = os.path.join(self.output_dir, f"{pattern}.png")
            fig.savefig(path, dpi=120)
        finally:
            plt.close(fig)

        logger.info(f"Saved plot: {path}")
        return path

    def create_all_plots(self) -> List[str]:
        if not self.has_data():
            logger.warning("No results available to plot")
            return []

        plots = []
        for pattern in self.get_unique_patterns():
            path = self.create_pattern_chart(pattern)
            if path:
                plots.append(path)
        return plots
