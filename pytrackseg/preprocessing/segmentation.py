"""
Moving-interval segmentation module for pytrackseg.

This module groups a filtered (moving-only) sequence into intervals of
continuous movement. Wherever the filter removed samples, or the receiver lost
its fix, the filtered sequence shows a time gap; gaps of at least ``leap``
seconds separate intervals. Each candidate interval is validated against
duration and distance thresholds and classified as a climb or not.
"""

import logging
from typing import NamedTuple, Optional, Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.preprocessing.kinematics import angle_diff
from pytrackseg.utilities.frames import require_columns, to_pandas_preserve
from pytrackseg.utilities.geometry import geodesic_distance, planar_bearing

logger = logging.getLogger(__name__)


class MovingInterval(NamedTuple):
    """One validated interval of movement; one row of the ``moving_intervals`` frame."""

    start_time: float
    end_time: float
    duration: float
    distance: float
    start_index: int
    end_index: int
    min_ele_index: int
    max_ele_index: int
    start_ele: float
    end_ele: float
    min_ele: float
    max_ele: float
    is_climb: bool
    bounding_bearing: float
    net_bearing: float


INTERVAL_COLUMNS = list(MovingInterval._fields)


def _build_interval(lats, lons, eles, seconds, start, end, lo, hi,
                    min_duration, drop_duration, min_detectable_distance,
                    min_climb_elevation, min_climb_distance,
                    check_climb_bearing, max_climb_bearing_deviation) -> Optional[MovingInterval]:
    """Validate samples[start..end] as an interval; None if it is not kept."""
    duration = float(seconds[end] - seconds[start])
    distance = geodesic_distance(lats[start], lons[start], lats[end], lons[end])

    if not duration > min_duration:
        return None
    # Short and barely moving: a stationary blip that slipped through the filter
    if duration < drop_duration and distance < min_detectable_distance:
        return None

    net_bearing = planar_bearing(lons[end] - lons[start], lats[end] - lats[start])
    bounding_bearing = planar_bearing(lons[hi] - lons[lo], lats[hi] - lats[lo])

    gain = eles[end] - eles[start]
    is_climb = bool(gain > min_climb_elevation and distance > min_climb_distance)
    if is_climb and check_climb_bearing:
        # Zig-zag elevation noise climbs "sideways" relative to the direction of travel
        is_climb = angle_diff(bounding_bearing, net_bearing) <= max_climb_bearing_deviation

    return MovingInterval(
        start_time=float(seconds[start]),
        end_time=float(seconds[end]),
        duration=duration,
        distance=float(distance),
        start_index=start,
        end_index=end,
        min_ele_index=lo,
        max_ele_index=hi,
        start_ele=float(eles[start]),
        end_ele=float(eles[end]),
        min_ele=float(eles[lo]),
        max_ele=float(eles[hi]),
        is_climb=bool(is_climb),
        bounding_bearing=float(bounding_bearing),
        net_bearing=float(net_bearing),
    )


def moving_intervals(
    df: Union[pd.DataFrame, pl.DataFrame],
    leap: float = 10.0,
    min_duration: float = 15.0,
    drop_duration: float = 60.0,
    min_detectable_distance: float = 50.0,
    min_climb_elevation: float = 20.0,
    min_climb_distance: float = 200.0,
    check_climb_bearing: bool = True,
    max_climb_bearing_deviation: float = 90.0,
    lat_col: str = "lat",
    lon_col: str = "lon",
    ele_col: str = "ele",
    second_col: str = "second"
) -> pd.DataFrame:
    """
    Split a filtered sequence into validated, classified moving intervals.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Time-ordered filtered samples (e.g. the output of ``filter_moving``).
    leap : float, default=10.0
        A time gap of at least ``leap`` seconds between consecutive samples
        ends the current interval.
    min_duration : float, default=15.0
        Intervals must last strictly longer than this (s).
    drop_duration : float, default=60.0
        Intervals shorter than this (s) ...
    min_detectable_distance : float, default=50.0
        ... that also span less than this distance (m) are dropped.
    min_climb_elevation : float, default=20.0
        Net elevation gain (end minus start) a climb must exceed (m).
    min_climb_distance : float, default=200.0
        Start-to-end distance a climb must exceed (m).
    check_climb_bearing : bool, default=True
        Also require the bearing from the lowest to the highest sample to be
        within ``max_climb_bearing_deviation`` of the start-to-end bearing.
    max_climb_bearing_deviation : float, default=90.0
        Angular tolerance of that check, in degrees.
    lat_col, lon_col, ele_col, second_col : str
        Column names.

    Returns
    -------
    pd.DataFrame
        One row per kept interval with the columns of ``MovingInterval``.
        ``start_index``, ``end_index``, ``min_ele_index`` and ``max_ele_index``
        are row positions in ``df``. Intervals are disjoint and time-ordered.
        Always a pandas DataFrame, whatever the input type.

    Notes
    -----
    **Algorithm:**
    One pass over the samples tracks the first sample of the current candidate
    interval and the lowest and highest samples seen since it. At each gap of
    at least ``leap`` seconds, and at the end of the sequence, the candidate
    running from its first sample to the sample before the gap is closed:

    1. ``duration`` = end second - start second,
       ``distance`` = geodesic distance from start to end sample
    2. kept iff ``duration > min_duration``, unless
       ``duration < drop_duration`` and ``distance < min_detectable_distance``
    3. a kept interval is a climb iff ``end_ele - start_ele > min_climb_elevation``
       and ``distance > min_climb_distance`` (and the bearing check passes)

    The next candidate starts at the sample after the gap, with fresh extrema.
    """
    pdf, _ = to_pandas_preserve(df)
    require_columns(pdf, [lat_col, lon_col, second_col], "moving_intervals")

    n = len(pdf)
    if n == 0:
        return pd.DataFrame(columns=INTERVAL_COLUMNS)

    lats = pdf[lat_col].to_numpy(dtype=float)
    lons = pdf[lon_col].to_numpy(dtype=float)
    seconds = pdf[second_col].to_numpy(dtype=float)
    eles = pdf[ele_col].to_numpy(dtype=float) if ele_col in pdf.columns else np.full(n, np.nan)

    thresholds = dict(
        min_duration=min_duration,
        drop_duration=drop_duration,
        min_detectable_distance=min_detectable_distance,
        min_climb_elevation=min_climb_elevation,
        min_climb_distance=min_climb_distance,
        check_climb_bearing=check_climb_bearing,
        max_climb_bearing_deviation=max_climb_bearing_deviation,
    )

    intervals = []
    candidates = 0
    start = lo = hi = 0
    for i in range(1, n + 1):
        if i < n and seconds[i] - seconds[i - 1] < leap:
            if eles[i] < eles[lo]:
                lo = i
            if eles[i] > eles[hi]:
                hi = i
            continue

        # Boundary: gap of at least `leap`, or end of the sequence
        candidates += 1
        interval = _build_interval(lats, lons, eles, seconds, start, i - 1, lo, hi, **thresholds)
        if interval is not None:
            intervals.append(interval)
        start = lo = hi = i

    logger.debug("Kept %d of %d candidate intervals (%d climbs)",
                 len(intervals), candidates, sum(iv.is_climb for iv in intervals))
    return pd.DataFrame(intervals, columns=INTERVAL_COLUMNS)
