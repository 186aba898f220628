"""
Kinematic derivation module for pytrackseg.

For every sample except the first this module derives, from the sample and its
predecessor: distance travelled, speed, elevation change and rate, planar
bearing, bearing change and bearing rate. Zero-duration steps (two samples with
the same timestamp) are resolved to zero speed and zero rates, they never raise.
"""

from typing import Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve
from pytrackseg.utilities.geometry import geodesic_distance, planar_bearing

KINEMATIC_COLUMNS = (
    "distance",
    "speed",
    "ele_delta",
    "ele_rate",
    "bearing",
    "bearing_delta",
    "bearing_rate",
)


def _rate(delta: np.ndarray, dt: np.ndarray) -> np.ndarray:
    """delta / dt, with 0 where dt == 0 (NaN deltas stay NaN elsewhere)."""
    out = np.zeros_like(delta, dtype=float)
    np.divide(delta, dt, out=out, where=dt != 0)
    return out


def angle_diff(a, b):
    """
    Circular distance between two angles in degrees, always within [0, 180].

    Works element-wise on numpy arrays.

    Examples
    --------
    >>> angle_diff(170, -170)
    20.0
    """
    d = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)) % 360.0
    d = np.minimum(d, 360.0 - d)
    if np.ndim(d) == 0:
        return float(d)
    return d


def derive_kinematics(
    df: Union[pd.DataFrame, pl.DataFrame],
    lat_col: str = "lat",
    lon_col: str = "lon",
    ele_col: str = "ele",
    second_col: str = "second"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Attach per-sample kinematics derived from the previous sample.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Time-ordered samples with elapsed seconds (raw or window-averaged).
    lat_col, lon_col, ele_col, second_col : str
        Column names. Without an elevation column the elevation fields are NaN.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        A copy of the input (same type) with the columns:

        - ``distance``: geodesic distance from the previous sample (m)
        - ``speed``: distance / time step (m/s), 0 for a zero time step
        - ``ele_delta``: elevation change (m)
        - ``ele_rate``: ele_delta / time step (m/s), 0 for a zero time step
        - ``bearing``: planar bearing of the step (degrees, [-180, 180])
        - ``bearing_delta``: bearing minus the previous sample's bearing
        - ``bearing_rate``: bearing_delta / time step, 0 for a zero time step

        The first row has no predecessor, so all its derived fields are NaN;
        ``bearing_delta`` and ``bearing_rate`` are NaN for the second row too
        because the first bearing is undefined.

    Notes
    -----
    ``bearing_delta`` is a plain difference, not a circular one. Use
    ``angle_diff`` when comparing directions.
    """
    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [lat_col, lon_col, second_col], "derive_kinematics")

    n = len(pdf)
    derived = {name: np.full(n, np.nan) for name in KINEMATIC_COLUMNS}

    if n >= 2:
        lats = pdf[lat_col].to_numpy(dtype=float)
        lons = pdf[lon_col].to_numpy(dtype=float)
        seconds = pdf[second_col].to_numpy(dtype=float)
        if ele_col in pdf.columns:
            eles = pdf[ele_col].to_numpy(dtype=float)
        else:
            eles = np.full(n, np.nan)

        dt = np.diff(seconds)
        distance = geodesic_distance(lats[:-1], lons[:-1], lats[1:], lons[1:])
        ele_delta = np.diff(eles)

        derived["distance"][1:] = distance
        derived["speed"][1:] = _rate(distance, dt)
        derived["ele_delta"][1:] = ele_delta
        derived["ele_rate"][1:] = _rate(ele_delta, dt)

        bearing = derived["bearing"]
        bearing[1:] = planar_bearing(np.diff(lons), np.diff(lats))
        bearing_delta = np.diff(bearing)
        derived["bearing_delta"][1:] = bearing_delta
        derived["bearing_rate"][1:] = _rate(bearing_delta, dt)
        # No bearing before the first step, so no rate for the second row
        derived["bearing_rate"][1] = np.nan

    for name in KINEMATIC_COLUMNS:
        pdf[name] = derived[name]
    return from_pandas_preserve(pdf, was_polars)
