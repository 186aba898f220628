"""
Reconstructing module for the pytrackseg library.

This module provides algorithms for rebuilding tracks from detected intervals:
re-selecting samples of any sequence inside the intervals, and merging a sparse
filtered sequence with a dense reference sequence.
"""

from pytrackseg.reconstructing.reconstitute import select_in_intervals, advance_interval
from pytrackseg.reconstructing.combine import hybrid_merge

__all__ = [
    'select_in_intervals',
    'advance_interval',
    'hybrid_merge',
]
