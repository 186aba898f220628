"""
DataFrame helpers shared by the pytrackseg stages.

Every public stage accepts either a pandas or a polars DataFrame and returns the
same type it was given. Internally all stages work on pandas, so these helpers
convert on the way in and back on the way out, and validate the columns a
stage needs before it touches the data.
"""

from typing import Iterable, Tuple, Union

import pandas as pd
import polars as pl


def to_pandas_preserve(df: Union[pd.DataFrame, pl.DataFrame]) -> Tuple[pd.DataFrame, bool]:
    """
    Convert input DataFrame to pandas and track original type.

    The pandas frame returned is always a fresh copy with a clean RangeIndex,
    so stages can add columns without touching the caller's data.

    Returns: (pandas_df, was_polars_flag)
    """
    if isinstance(df, pl.DataFrame):
        return df.to_pandas(), True
    if not isinstance(df, pd.DataFrame):
        raise ValueError("df must be either a pandas DataFrame or a polars DataFrame.")
    return df.reset_index(drop=True), False


def from_pandas_preserve(pdf: pd.DataFrame, was_polars: bool) -> Union[pd.DataFrame, pl.DataFrame]:
    """
    Convert pandas DataFrame back to original type if needed.

    If was_polars=True, converts back to polars. Otherwise returns pandas.
    """
    return pl.from_pandas(pdf) if was_polars else pdf


def require_columns(pdf: pd.DataFrame, columns: Iterable[str], stage: str) -> None:
    """Raise ValueError naming every column ``stage`` needs but ``pdf`` lacks."""
    missing = [col for col in columns if col not in pdf.columns]
    if missing:
        raise ValueError(f"{stage}: column(s) {missing} not found in DataFrame.")
