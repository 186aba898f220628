"""
pytrackseg - Smoothing, noise filtering and movement segmentation of GPS traces.

pytrackseg turns a raw, chronologically ordered GPS trace into cleaned and
segmented sequences: smoothed tracks, a "moving" subset with GPS noise and
stationary periods removed, validated moving intervals classified as climbs or
not, and a hybrid track that stitches the best of them together.

Components
----------
- **preprocessing**: Elapsed time, window averaging, kinematics, noise filtering, interval segmentation
- **reconstructing**: Re-selecting samples inside intervals, hybrid merging
- **utilities**: Geometry, GPX input/output, threshold configuration, visualization
- **pipeline**: All stages composed into named, exportable products

Quick Start
-----------
```python
import pytrackseg as pts

raw = pts.utilities.read_gpx('ride.gpx')

# Whole pipeline
products, intervals = pts.process_trace(raw, pts.Thresholds(filter_method='burst'))
pts.utilities.write_products(products, 'ride.gpx')   # ride.gpx.avg1.gpx, ...

# Or stage by stage
raw = pts.preprocessing.add_elapsed_seconds(raw)
rough = pts.preprocessing.derive_kinematics(pts.preprocessing.window_average(raw, 10))
moving = pts.preprocessing.bounds_filter(rough, min_speed=1, max_speed=80)
intervals = pts.preprocessing.moving_intervals(moving, leap=10, min_duration=15)
climbs = pts.reconstructing.select_in_intervals(raw, intervals, classification='is_climb')
```
"""

from pytrackseg._version import __version__, __version_info__
from pytrackseg import preprocessing, reconstructing, utilities
from pytrackseg.exceptions import (
    PyTrackSegError,
    TraceParseError,
    EmptyTraceError,
    TraceExportError,
)
from pytrackseg.pipeline import process_trace
from pytrackseg.utilities.config import Thresholds

__all__ = [
    '__version__',
    '__version_info__',
    'preprocessing',
    'reconstructing',
    'utilities',
    'process_trace',
    'Thresholds',
    'PyTrackSegError',
    'TraceParseError',
    'EmptyTraceError',
    'TraceExportError',
]
