"""
Loading timing-runner exports into DataFrames for comparison and archiving.
"""

import json
import logging
import os
from typing import Iterable, List, Optional

import pandas as pd

from configuration import PATTERN_LABELS

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ['pattern', 'command', 'mean', 'stddev', 'median', 'min', 'max', 'runs']


def _empty_frame() -> pd.DataFrame:
    return pd.DataFrame(columns=RESULT_COLUMNS)


def load_results(results_dir: str, label: str) -> pd.DataFrame:
    """Load one pattern's JSON export (hyperfine schema).

    Returns an empty frame if the file is missing or unreadable.
    """
    path = os.path.join(results_dir, f"{label}.json")
    if not os.path.exists(path):
        logger.debug(f"No results at {path}")
        return _empty_frame()

    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return _empty_frame()

    rows = []
    for result in payload.get('results', []):
        times = result.get('times') or []
        rows.append({
            'pattern': label,
            'command': result.get('command'),
            'mean': result.get('mean'),
            'stddev': result.get('stddev'),
            'median': result.get('median'),
            'min': result.get('min'),
            'max': result.get('max'),
            'runs': len(times),
        })

    if not rows:
        return _empty_frame()
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def load_all_results(results_dir: str, labels: Iterable[str] = PATTERN_LABELS) -> pd.DataFrame:
    frames: List[pd.DataFrame] = [load_results(results_dir, label) for label in labels]
    frames = [f for f in frames if not f.empty]
    if not frames:
        return _empty_frame()
    return pd.concat(frames, ignore_index=True)


def compare_results(dir_a: str, dir_b: str, labels: Iterable[str] = PATTERN_LABELS) -> pd.DataFrame:
    """Join two result directories by (pattern, command) and compute mean deltas.

    delta_pct is (mean_b - mean_a) / mean_a * 100; NaN where either side is
    missing the command.
    """
    labels = list(labels)
    a = load_all_results(dir_a, labels)[['pattern', 'command', 'mean', 'stddev']]
    b = load_all_results(dir_b, labels)[['pattern', 'command', 'mean', 'stddev']]

    merged = pd.merge(a, b, on=['pattern', 'command'], how='outer', suffixes=('_a', '_b'))
    if merged.empty:
        merged['delta_pct'] = pd.Series(dtype=float)
        return merged

    mean_a = pd.to_numeric(merged['mean_a'], errors='coerce')
    mean_b = pd.to_numeric(merged['mean_b'], errors='coerce')
    merged['delta_pct'] = (mean_b - mean_a) / mean_a * 100
    return merged.reset_index(drop=True)


def format_comparison(comparison: pd.DataFrame) -> List[str]:
    """One line per command: name, both means and the relative delta."""
    lines = []
    for _, row in comparison.iterrows():
        name = f"{row['pattern']}/{row['command']}"
        mean_a = f"{row['mean_a']:.3f}s" if pd.notna(row['mean_a']) else "-"
        mean_b = f"{row['mean_b']:.3f}s" if pd.notna(row['mean_b']) else "-"
        delta = f"{row['delta_pct']:+.1f}%" if pd.notna(row['delta_pct']) else "n/a"
        lines.append(f"{name:<40}  A: {mean_a:>9}  B: {mean_b:>9}  delta: {delta}")
    return lines


def export_parquet(
    results_dir: str,
    filename: str = "results.parquet",
    labels: Iterable[str] = PATTERN_LABELS,
) -> Optional[str]:
    """Archive the given patterns' results into one Parquet file.

    Returns:
        Path to the saved file, or None if there were no results (a previous
        archive is removed)
    """
    path = os.path.join(results_dir, filename)
    df = load_all_results(results_dir, labels)
    if df.empty:
        if os.path.exists(path):
            os.remove(path)
        return None

    df.to_parquet(path, index=False)
    logger.info(f"Saved {len(df)} result rows to {path}")
    return path
