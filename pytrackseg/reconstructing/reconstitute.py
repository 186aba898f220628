"""
Range reconstitution module for pytrackseg.

Intervals are detected on a heavily processed sequence (smoothed and filtered),
but the samples worth keeping are often those of another sequence, typically the
raw trace. This module re-selects, from any time-ordered sequence, the samples
whose elapsed time falls inside the validated intervals.
"""

from typing import Optional, Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve


def advance_interval(ends: np.ndarray, position: int, second: float) -> int:
    """
    Move the interval cursor past every interval that ends before ``second``.

    Parameters
    ----------
    ends : np.ndarray
        Interval end times, ascending.
    position : int
        Current cursor position.
    second : float
        Elapsed time of the sample being placed.

    Returns
    -------
    int
        The new cursor position, ``>= position``. Equal to ``len(ends)`` once
        every interval ends before ``second``.
    """
    while position < len(ends) and second > ends[position]:
        position += 1
    return position


def select_in_intervals(
    df: Union[pd.DataFrame, pl.DataFrame],
    intervals: Union[pd.DataFrame, pl.DataFrame],
    classification: Optional[str] = None,
    second_col: str = "second",
    start_col: str = "start_time",
    end_col: str = "end_time"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Keep the samples of ``df`` that fall inside one of ``intervals``.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Any time-ordered sample sequence with elapsed seconds. It does not have
        to be the sequence the intervals were computed from.
    intervals : pd.DataFrame or pl.DataFrame
        Disjoint, time-ordered intervals (see ``moving_intervals``).
    classification : str, optional
        Name of a boolean interval column, e.g. ``"is_climb"``. When given, only
        intervals where it is true admit samples.
    second_col : str, default='second'
        Elapsed-seconds column of ``df``.
    start_col, end_col : str
        Interval bound columns.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        Selected samples, same type as ``df``, original order, index reset.

    Notes
    -----
    Samples and intervals are walked together with a single forward cursor
    into the intervals (merge style), so the cost is O(samples + intervals).
    A sample is kept iff ``start <= second <= end`` for the interval under the
    cursor (bounds inclusive) and that interval passes ``classification``.
    Once the cursor runs past the last interval the remaining samples are
    dropped. With no intervals the result is empty.

    Examples
    --------
    >>> intervals = moving_intervals(moving)
    >>> moving_raw = select_in_intervals(raw, intervals)
    >>> climbs_raw = select_in_intervals(raw, intervals, classification='is_climb')
    """
    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [second_col], "select_in_intervals")
    ivs, _ = to_pandas_preserve(intervals)

    if len(ivs) == 0 or len(pdf) == 0:
        return from_pandas_preserve(pdf.iloc[0:0].reset_index(drop=True), was_polars)

    required = [start_col, end_col] + ([classification] if classification else [])
    require_columns(ivs, required, "select_in_intervals")

    starts = ivs[start_col].to_numpy(dtype=float)
    ends = ivs[end_col].to_numpy(dtype=float)
    if classification:
        admits = ivs[classification].to_numpy(dtype=bool)
    else:
        admits = np.ones(len(ivs), dtype=bool)

    seconds = pdf[second_col].to_numpy(dtype=float)
    keep = np.zeros(len(pdf), dtype=bool)

    position = 0
    for i, second in enumerate(seconds):
        position = advance_interval(ends, position, second)
        if position == len(ends):
            break
        keep[i] = admits[position] and starts[position] <= second <= ends[position]

    return from_pandas_preserve(pdf.loc[keep].reset_index(drop=True), was_polars)
