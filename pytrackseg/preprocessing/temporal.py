"""
Temporal normalisation module for pytrackseg.

Every later stage works on elapsed seconds instead of absolute timestamps. This
module attaches that column and provides the "fix" filter that removes samples
with non-advancing timestamps or repeated coordinates, a common artefact of
action-camera GPS loggers.
"""

import warnings
from typing import Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.exceptions import EmptyTraceError
from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve

_EPOCH = pd.Timestamp(0, tz="UTC")


def _to_utc(series: pd.Series) -> pd.Series:
    # Numeric time columns are taken as epoch seconds, everything else is parsed.
    if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
        return pd.to_datetime(series, unit="s", utc=True)
    return pd.to_datetime(series, utc=True)


def add_elapsed_seconds(
    df: Union[pd.DataFrame, pl.DataFrame],
    time_col: str = "time",
    second_col: str = "second",
    require_points: bool = False
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Attach elapsed epoch seconds to every sample.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Raw samples in chronological order.
    time_col : str, default='time'
        Absolute timestamp column. Datetime-like values (naive values are taken
        as UTC) or numeric epoch seconds.
    second_col : str, default='second'
        Name of the column to create.
    require_points : bool, default=False
        Raise EmptyTraceError instead of returning an empty frame.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        A copy of the input (same type) with ``second_col`` added as float
        seconds since 1970-01-01T00:00:00Z. No row is removed or reordered.

    Raises
    ------
    EmptyTraceError
        If ``require_points`` is set and the input has no rows.
    ValueError
        If ``time_col`` is missing.

    Notes
    -----
    The input is assumed to be time-ordered. Out-of-order timestamps are not
    corrected; a warning is issued so the caller can decide what to do.
    """
    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [time_col], "add_elapsed_seconds")

    if len(pdf) == 0:
        if require_points:
            raise EmptyTraceError("trace contains no samples")
        pdf[second_col] = pd.Series(dtype=float)
        return from_pandas_preserve(pdf, was_polars)

    times = _to_utc(pdf[time_col])
    seconds = (times - _EPOCH).dt.total_seconds().to_numpy(dtype=float)
    pdf[second_col] = seconds

    if np.any(np.diff(seconds) < 0):
        warnings.warn("Timestamps decrease somewhere in the trace; results assume chronological order.")

    return from_pandas_preserve(pdf, was_polars)


def drop_bad_timestamps(
    df: Union[pd.DataFrame, pl.DataFrame],
    lat_col: str = "lat",
    lon_col: str = "lon",
    time_col: str = "time"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Remove samples whose time does not advance or whose position repeats.

    A sample is kept only if its timestamp is strictly later than the previous
    input sample's and its coordinates differ from the previous input sample's.
    Each sample is compared with its immediate predecessor in the input, not
    with the last kept sample.

    The first sample has no predecessor and is always kept. GoPro fixers that
    compare the first sample with itself drop it instead.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Raw samples.
    lat_col, lon_col, time_col : str
        Column names.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        Filtered copy, same type as the input, index reset.

    Examples
    --------
    >>> fixed = drop_bad_timestamps(read_gpx('gopro.gpx'))
    """
    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [lat_col, lon_col, time_col], "drop_bad_timestamps")

    if len(pdf) == 0:
        return from_pandas_preserve(pdf, was_polars)

    times = _to_utc(pdf[time_col])
    advances = (times.diff() > pd.Timedelta(0)).to_numpy()
    moved = ((pdf[lat_col].diff() != 0) | (pdf[lon_col].diff() != 0)).to_numpy()

    keep = advances & moved
    keep[0] = True

    out = pdf.loc[keep].reset_index(drop=True)
    return from_pandas_preserve(out, was_polars)
