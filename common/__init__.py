"""
Common utilities for the ListObjects benchmark.
"""

from .errors import BenchmarkError
from .layout import Layout, LAYOUTS, bucket_name
from .phase_manager import PhaseManager

__all__ = ['BenchmarkError', 'Layout', 'LAYOUTS', 'bucket_name', 'PhaseManager']
