import numpy as np
import pandas as pd
import polars as pl
import pytest

from pytrackseg.preprocessing.smoothing import rough_and_fine, window_average
from pytrackseg.preprocessing.temporal import add_elapsed_seconds
from pytrackseg.utilities.geometry import midpoint


def _frame(seconds, eles=None):
    n = len(seconds)
    return pd.DataFrame({
        "lat": 46.5 + 0.001 * np.arange(n),
        "lon": 7.5 + 0.002 * np.arange(n),
        "ele": np.arange(n, dtype=float) * 10 if eles is None else eles,
        "second": np.asarray(seconds, dtype=float),
    })


def test_zero_window_is_identity(stop_go_stop):
    raw = add_elapsed_seconds(stop_go_stop)
    out = window_average(raw, 0)
    assert len(out) == len(raw)
    assert np.array_equal(out["lat"].to_numpy(), raw["lat"].to_numpy())
    assert np.array_equal(out["lon"].to_numpy(), raw["lon"].to_numpy())
    assert np.array_equal(out["second"].to_numpy(), raw["second"].to_numpy())
    assert (out["window_size"] == 1).all()


def test_window_covering_trace_never_evicts():
    df = _frame([0, 1, 2, 3, 4])
    # "collapses to one average" read as: no eviction, so rows are running averages ending at the global one
    out = window_average(df, 100)
    assert len(out) == len(df)
    assert out["window_size"].tolist() == [1, 2, 3, 4, 5]
    last = out.iloc[-1]
    lat, lon = midpoint(df["lat"].to_numpy(), df["lon"].to_numpy())
    assert last["lat"] == pytest.approx(lat)
    assert last["lon"] == pytest.approx(lon)
    assert last["ele"] == pytest.approx(df["ele"].mean())
    assert last["second"] == pytest.approx(2.0)


def test_eviction_to_odd_length_emits_extra_point():
    df = _frame([0, 1, 2, 3, 10])
    out = window_average(df, 2.5)
    # t=3 evicts t=0 (queue length 2, no extra point);
    # t=10 evicts three samples, passing through length 1 once
    assert out["second"].tolist() == pytest.approx([0.0, 0.5, 1.0, 2.0, 3.0, 10.0])
    assert out["window_size"].tolist() == [1, 2, 3, 3, 1, 1]
    assert out["ele"].tolist() == pytest.approx([0.0, 5.0, 10.0, 20.0, 30.0, 40.0])


def test_output_is_time_ordered(stop_go_stop):
    raw = add_elapsed_seconds(stop_go_stop)
    out = window_average(raw, 7)
    assert len(out) >= len(raw)
    assert np.all(np.diff(out["second"].to_numpy()) >= 0)


def test_time_column_rebuilt_from_seconds():
    out = window_average(_frame([0, 1]), 10)
    assert str(out["time"].dt.tz) == "UTC"
    assert out["time"].iloc[1] == pd.Timestamp(0.5, unit="s", tz="UTC")


def test_empty_input():
    out = window_average(_frame([]), 10)
    assert len(out) == 0
    assert {"lat", "lon", "ele", "second", "time"} <= set(out.columns)


def test_negative_window_rejected():
    with pytest.raises(ValueError):
        window_average(_frame([0]), -1)


def test_missing_elevation_gives_nan():
    out = window_average(_frame([0, 1]).drop(columns=["ele"]), 10)
    assert out["ele"].isna().all()


def test_rough_and_fine_read_the_same_input():
    df = _frame([0, 1, 2, 3, 4, 5, 6])
    rough, fine = rough_and_fine(df, 1, 100)
    assert rough.equals(window_average(df, 1))
    assert fine.equals(window_average(df, 100))


def test_polars_input():
    out = window_average(pl.from_pandas(_frame([0, 1, 2])), 1)
    assert isinstance(out, pl.DataFrame)
    assert out.height >= 3
