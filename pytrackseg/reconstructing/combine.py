"""
Hybrid merge module for pytrackseg.

A highly filtered sequence (e.g. raw samples restricted to climbing intervals)
is accurate where it exists but has long holes. A broadly smoothed sequence
covers the whole movement at lower fidelity. This module follows the first
sequence and fills its holes from the second, producing one continuous,
time-ordered track.
"""

from typing import Union

import numpy as np
import pandas as pd
import polars as pl

from pytrackseg.utilities.frames import from_pandas_preserve, require_columns, to_pandas_preserve


def _advance_through(seconds: np.ndarray, position: int, limit: float) -> int:
    """Cursor past every element <= limit."""
    while position < len(seconds) and seconds[position] <= limit:
        position += 1
    return position


def _advance_before(seconds: np.ndarray, position: int, limit: float) -> int:
    """Cursor past every element < limit."""
    while position < len(seconds) and seconds[position] < limit:
        position += 1
    return position


def hybrid_merge(
    primary: Union[pd.DataFrame, pl.DataFrame],
    secondary: Union[pd.DataFrame, pl.DataFrame],
    leap: float = 10.0,
    second_col: str = "second"
) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Follow ``primary`` and fill its time gaps with samples from ``secondary``.

    Parameters
    ----------
    primary : pd.DataFrame or pl.DataFrame
        Time-ordered sequence whose samples are all kept, in order.
    secondary : pd.DataFrame or pl.DataFrame
        Time-ordered sequence used to fill the gaps.
    leap : float, default=10.0
        Consecutive primary samples more than ``leap`` seconds apart form a gap.
    second_col : str, default='second'
        Elapsed-seconds column of both sequences.

    Returns
    -------
    pd.DataFrame or pl.DataFrame
        Merged sequence, same type as ``primary``, index reset. Its columns are
        the union of both inputs' columns; values missing from one side are
        NaN.

    Notes
    -----
    **Algorithm:**
    A cursor into ``secondary`` only ever moves forward. For every primary gap
    (a, b) with ``b - a > leap``, the cursor first skips secondary samples at
    or before ``a``, then the secondary samples strictly inside (a, b) are
    inserted between the two primary samples. After the last primary sample
    every secondary sample later than it is appended.

    - Secondary samples before the first primary sample are not used.
    - Once ``secondary`` is exhausted no further gap is filled.
    - An empty ``primary`` returns all of ``secondary``.
    - Merging a sequence with itself returns it unchanged.

    Examples
    --------
    >>> hybrid = hybrid_merge(climbs_raw, moving_fine, leap=10)
    """
    p, was_polars = to_pandas_preserve(primary)
    s, _ = to_pandas_preserve(secondary)
    if len(p):
        require_columns(p, [second_col], "hybrid_merge (primary)")
    if len(s):
        require_columns(s, [second_col], "hybrid_merge (secondary)")

    p_seconds = p[second_col].to_numpy(dtype=float) if len(p) else np.empty(0)
    s_seconds = s[second_col].to_numpy(dtype=float) if len(s) else np.empty(0)

    pieces = []
    run_start = 0
    cursor = 0
    for i in range(1, len(p)):
        if p_seconds[i] - p_seconds[i - 1] <= leap:
            continue
        cursor = _advance_through(s_seconds, cursor, p_seconds[i - 1])
        fill_end = _advance_before(s_seconds, cursor, p_seconds[i])
        if fill_end > cursor:
            pieces.append(p.iloc[run_start:i])
            pieces.append(s.iloc[cursor:fill_end])
            run_start = i
            cursor = fill_end

    pieces.append(p.iloc[run_start:])
    if len(p):
        cursor = _advance_through(s_seconds, cursor, p_seconds[-1])
    pieces.append(s.iloc[cursor:])

    pieces = [piece for piece in pieces if len(piece)]
    if not pieces:
        return from_pandas_preserve(p.iloc[0:0].reset_index(drop=True), was_polars)
    out = pd.concat(pieces, ignore_index=True)
    return from_pandas_preserve(out, was_polars)
