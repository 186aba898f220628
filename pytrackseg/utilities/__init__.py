"""
Utilities module for the pytrackseg library.

This module provides geometry helpers, GPX input/output, the threshold
configuration, and visualization tools.
"""

from pytrackseg.utilities.geometry import (
    geodesic_distance,
    midpoint,
    planar_bearing,
    destination,
)
from pytrackseg.utilities.gpx_io import (
    read_gpx,
    to_gpx,
    write_products,
    product_path,
)
from pytrackseg.utilities.config import Thresholds

# Import visualization submodule
from pytrackseg.utilities import visualization

__all__ = [
    # Geometry
    'geodesic_distance',
    'midpoint',
    'planar_bearing',
    'destination',
    # GPX input/output
    'read_gpx',
    'to_gpx',
    'write_products',
    'product_path',
    # Configuration
    'Thresholds',
    # Visualization module
    'visualization',
]
