"""
Statistical timing runners.
"""

from runners.base import TimingRunner, Trial
from runners.hyperfine import HyperfineRunner

__all__ = ['TimingRunner', 'Trial', 'HyperfineRunner']
