"""
Noise and stationary filtering module for pytrackseg.

GPS receivers keep reporting slightly different positions while standing still,
and occasionally report a wild jump. Both show up as implausible speeds once
kinematics are derived. This module keeps only the samples that look like real
movement. Two policies are available:

- **bounds**: keep a sample iff its speed lies strictly between the bounds
  (and, optionally, its step from the previous sample is short enough)
- **burst**: bounds, plus removal of short runs of accepted samples, which
  suppresses spurious "moving" bursts caused by jitter while stationary

Both return a subsequence of the input in the original order.
"""

from typing import List, Optional, Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve


def _bounds_mask(pdf: pd.DataFrame,
                 min_speed: float,
                 max_speed: float,
                 max_step: Optional[float],
                 speed_col: str,
                 distance_col: str) -> np.ndarray:
    # NaN speed (first sample) compares False and is never kept
    speed = pdf[speed_col].to_numpy(dtype=float)
    mask = (speed > min_speed) & (speed < max_speed)
    if max_step is not None:
        require_columns(pdf, [distance_col], "max_step filter")
        mask &= pdf[distance_col].to_numpy(dtype=float) < max_step
    return mask


def bounds_filter(
    df: Union[pd.DataFrame, pl.DataFrame],
    min_speed: float = 1.0,
    max_speed: float = 80.0,
    max_step: Optional[float] = None,
    speed_col: str = "speed",
    distance_col: str = "distance"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Keep samples whose speed lies strictly within (min_speed, max_speed).

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Samples with kinematics (see ``derive_kinematics``).
    min_speed : float, default=1.0
        Exclusive lower bound in m/s. Samples at or below it are stationary.
    max_speed : float, default=80.0
        Exclusive upper bound in m/s. Samples at or above it are GPS jumps.
    max_step : float, optional
        Exclusive upper bound on the distance from the previous sample (m).
    speed_col, distance_col : str
        Column names.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        The retained samples, same type as input, original order, index reset.
    """
    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [speed_col], "bounds_filter")
    mask = _bounds_mask(pdf, min_speed, max_speed, max_step, speed_col, distance_col)
    return from_pandas_preserve(pdf.loc[mask].reset_index(drop=True), was_polars)


def _retract_short_run(keep: np.ndarray, run: List[int], min_run_length: int) -> None:
    if run and len(run) < min_run_length:
        keep[run] = False


def burst_filter(
    df: Union[pd.DataFrame, pl.DataFrame],
    min_speed: float = 1.0,
    max_speed: float = 80.0,
    max_gap: float = 10.0,
    min_run_length: int = 5,
    max_step: Optional[float] = None,
    speed_col: str = "speed",
    distance_col: str = "distance",
    second_col: str = "second"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Bounds filter that also drops short bursts of accepted samples.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Samples with kinematics and elapsed seconds.
    min_speed, max_speed, max_step :
        As in ``bounds_filter``.
    max_gap : float, default=10.0
        A sample more than ``max_gap`` seconds after the previous accepted
        sample of the current run starts a new run.
    min_run_length : int, default=5
        Runs with fewer samples are removed from the output entirely.
    speed_col, distance_col, second_col : str
        Column names.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        The retained samples, same type as input, original order, index reset.

    Notes
    -----
    A run is a maximal sequence of samples that satisfy the bounds with no
    time gap above ``max_gap`` between them. A run ends at the first sample
    that violates the bounds, at a gap, or at the end of the trace. When a run
    ends shorter than ``min_run_length`` every sample of it is retracted, so a
    single speed spike surrounded by stationary samples leaves nothing behind.

    Examples
    --------
    >>> moving = burst_filter(derive_kinematics(rough), min_speed=1, max_speed=80,
    ...                       max_gap=10, min_run_length=5)
    """
    if min_run_length < 1:
        raise ValueError("min_run_length must be >= 1")

    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [speed_col, second_col], "burst_filter")

    in_bounds = _bounds_mask(pdf, min_speed, max_speed, max_step, speed_col, distance_col)
    seconds = pdf[second_col].to_numpy(dtype=float)

    keep = np.zeros(len(pdf), dtype=bool)
    run: List[int] = []
    for i in range(len(pdf)):
        if not in_bounds[i]:
            _retract_short_run(keep, run, min_run_length)
            run = []
            continue
        if run and seconds[i] - seconds[run[-1]] > max_gap:
            _retract_short_run(keep, run, min_run_length)
            run = []
        run.append(i)
        keep[i] = True
    _retract_short_run(keep, run, min_run_length)

    return from_pandas_preserve(pdf.loc[keep].reset_index(drop=True), was_polars)


def filter_moving(
    df: Union[pd.DataFrame, pl.DataFrame],
    method: str = "bounds",
    min_speed: float = 1.0,
    max_speed: float = 80.0,
    max_step: Optional[float] = None,
    max_gap: float = 10.0,
    min_run_length: int = 5,
    **columns
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Apply the noise/stationary filter selected by ``method``.

    ``method`` is ``"bounds"`` or ``"burst"``; ``max_gap`` and
    ``min_run_length`` only matter for ``"burst"``. Column-name keyword
    arguments are forwarded to the chosen filter.
    """
    if method == "bounds":
        return bounds_filter(df, min_speed=min_speed, max_speed=max_speed,
                             max_step=max_step, **columns)
    if method == "burst":
        return burst_filter(df, min_speed=min_speed, max_speed=max_speed,
                            max_gap=max_gap, min_run_length=min_run_length,
                            max_step=max_step, **columns)
    raise ValueError(f"unknown filter method {method!r}; expected 'bounds' or 'burst'")
