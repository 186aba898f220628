"""
Sliding time-window smoothing module for pytrackseg.

This module replaces each sample by the average of the samples inside a trailing
time window ending at that sample. The averaged points are synthetic: their
position is the geographic midpoint of the window, their elevation and elapsed
time the arithmetic means. The output has the same column shape as a raw
trace, so it can be fed to the kinematic and filtering stages or exported.

Two resolutions are typically run on the same raw input:
1. **rough** window (a few seconds): light denoising, keeps temporal detail
2. **fine** window (a minute or more): heavy smoothing for broad shape
"""

from typing import Tuple, Union

import numpy as np
import pandas as pd
import polars as pl
from tqdm import tqdm

from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve
from pytrackseg.utilities.geometry import midpoint


def _average(lats, lons, eles, seconds, start, stop):
    """Average of samples[start:stop] as (lat, lon, ele, second, window_size)."""
    lat, lon = midpoint(lats[start:stop], lons[start:stop])
    ele = float(np.mean(eles[start:stop])) if eles is not None else np.nan
    second = float(np.mean(seconds[start:stop]))
    return lat, lon, ele, second, stop - start


def window_average(
    df: Union[pd.DataFrame, pl.DataFrame],
    window_size: float,
    lat_col: str = "lat",
    lon_col: str = "lon",
    ele_col: str = "ele",
    time_col: str = "time",
    second_col: str = "second",
    verbose: bool = False
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Smooth a trace with a trailing time window.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Time-ordered samples with elapsed seconds (see ``add_elapsed_seconds``).
    window_size : float
        Window length in seconds. A sample is evicted from the window once the
        newest sample is more than ``window_size`` seconds younger.
    lat_col, lon_col, ele_col, time_col, second_col : str
        Column names. The elevation column is optional.
    verbose : bool, default=False
        Show a tqdm progress bar.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        Averaged samples (same type as input) with columns ``lat_col``,
        ``lon_col``, ``ele_col``, ``second_col``, ``time_col`` (UTC, rebuilt
        from the averaged seconds) and ``window_size`` (number of samples
        averaged).

    Notes
    -----
    **Algorithm:**
    The window is a queue of consecutive input samples. For every new sample:

    1. Evict samples from the front while their age exceeds ``window_size``.
       Each time an eviction leaves an odd number of samples in the queue,
       emit the average of the queue as it is at that moment. This records the
       window just before it shrinks further and keeps the output dense where
       the input is sparse.
    2. Push the new sample and emit the average of the queue.

    Every input sample therefore produces at least one output sample and the
    output is ordered by time.

    **Edge Cases:**
    - Empty input gives an empty output.
    - ``window_size=0`` keeps only samples sharing the newest timestamp, so a
      trace with strictly increasing times is returned unchanged.
    - A window covering the whole trace never evicts; the last output is the
      average of the entire trace.

    **Performance:**
    Because the queue is always a contiguous slice of the input it is tracked
    with a head index, and each emission averages a numpy slice.

    Examples
    --------
    >>> raw = add_elapsed_seconds(read_gpx('ride.gpx'))
    >>> rough = window_average(raw, window_size=10)
    >>> fine = window_average(raw, window_size=60)
    """
    if window_size < 0:
        raise ValueError("window_size must be >= 0")

    pdf, was_polars = to_pandas_preserve(df)
    require_columns(pdf, [lat_col, lon_col, second_col], "window_average")

    lats = pdf[lat_col].to_numpy(dtype=float)
    lons = pdf[lon_col].to_numpy(dtype=float)
    eles = pdf[ele_col].to_numpy(dtype=float) if ele_col in pdf.columns else None
    seconds = pdf[second_col].to_numpy(dtype=float)
    n = len(pdf)

    rows = []
    head = 0
    indices = tqdm(range(n), desc=f"window {window_size:g}s") if verbose else range(n)
    for i in indices:
        # The queue holds samples[head:i] before the push of sample i
        while head < i and seconds[i] - seconds[head] > window_size:
            head += 1
            if (i - head) % 2 == 1:
                rows.append(_average(lats, lons, eles, seconds, head, i))
        rows.append(_average(lats, lons, eles, seconds, head, i + 1))

    out = pd.DataFrame(rows, columns=[lat_col, lon_col, ele_col, second_col, "window_size"])
    out = out.astype({lat_col: float, lon_col: float, ele_col: float, second_col: float, "window_size": int})
    out[time_col] = pd.to_datetime(out[second_col], unit="s", utc=True)
    return from_pandas_preserve(out, was_polars)


def rough_and_fine(
    df: Union[pd.DataFrame, pl.DataFrame],
    rough_window: float,
    fine_window: float,
    **kwargs
) -> Tuple[Union[pd.DataFrame, pl.DataFrame], Union[pd.DataFrame, pl.DataFrame]]:
    """
    Run the rough and the fine window pass on the same input.

    The passes are independent: the fine pass reads ``df``, not the rough
    output. Extra keyword arguments are forwarded to ``window_average``.

    Returns
    -------
    tuple
        (rough, fine) averaged sequences.
    """
    rough = window_average(df, rough_window, **kwargs)
    fine = window_average(df, fine_window, **kwargs)
    return rough, fine
