"""
Compare two results directories produced by separate suite runs.
"""

import logging
from typing import Optional

import pandas as pd

from persistence.results import compare_results, format_comparison

logger = logging.getLogger(__name__)


class ResultComparer:

    def __init__(self, dir_a: str, dir_b: str):
        self.dir_a = dir_a
        self.dir_b = dir_b

    def compare(self, output_csv: Optional[str] = None) -> pd.DataFrame:
        comparison = compare_results(self.dir_a, self.dir_b)
        if comparison.empty:
            logger.warning(f"No results found in {self.dir_a} or {self.dir_b}")
            return comparison

        logger.info(f"A: {self.dir_a}")
        logger.info(f"B: {self.dir_b}")
        for line in format_comparison(comparison):
            print(line)

        if output_csv:
            comparison.to_csv(output_csv, index=False)
            logger.info(f"Comparison saved to {output_csv}")
        return comparison
