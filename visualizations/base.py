"""
Base classes for plot visualization.
"""

import pandas as pd
import logging

logger = logging.getLogger(__name__)


class BasePlotter:
    """Base class for all plotters with common functionality."""

    def __init__(self, data: pd.DataFrame, output_dir: str):
        self.data = data
        self.output_dir = output_dir

    def has_data(self) -> bool:
        return self.data is not None and len(self.data) > 0

    def get_unique_patterns(self):
        """Get pattern labels present in the data, in first-seen order."""
        if not self.has_data():
            return []
        return list(self.data['pattern'].unique())

    def get_pattern_colors(self):
        """Generate color map for patterns."""
        import matplotlib.pyplot as plt
        patterns = self.get_unique_patterns()
        pattern_colors = plt.cm.Set1(range(len(patterns)))
        return dict(zip(patterns, pattern_colors))
