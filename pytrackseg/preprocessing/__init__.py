"""
Trace preprocessing module for pytrackseg.

This module provides the stages that turn a raw trace into moving intervals:
- Temporal: Elapsed seconds and the bad-timestamp fix
- Smoothing: Trailing time-window averaging
- Kinematics: Per-sample speed, elevation rate and bearing
- Filtering: Removal of GPS noise and stationary periods
- Segmentation: Moving intervals and climb classification
"""

# Temporal
from pytrackseg.preprocessing.temporal import add_elapsed_seconds, drop_bad_timestamps

# Smoothing
from pytrackseg.preprocessing.smoothing import window_average, rough_and_fine

# Kinematics
from pytrackseg.preprocessing.kinematics import derive_kinematics, angle_diff

# Filtering
from pytrackseg.preprocessing.filtration import bounds_filter, burst_filter, filter_moving

# Segmentation
from pytrackseg.preprocessing.segmentation import moving_intervals, MovingInterval

__all__ = [
    # Temporal
    'add_elapsed_seconds',
    'drop_bad_timestamps',
    # Smoothing
    'window_average',
    'rough_and_fine',
    # Kinematics
    'derive_kinematics',
    'angle_diff',
    # Filtering
    'bounds_filter',
    'burst_filter',
    'filter_moving',
    # Segmentation
    'moving_intervals',
    'MovingInterval',
]
