import numpy as np
import pandas as pd
import polars as pl
import pytest

from pytrackseg.exceptions import EmptyTraceError
from pytrackseg.pipeline import process_trace
from pytrackseg.preprocessing.filtration import bounds_filter
from pytrackseg.preprocessing.kinematics import derive_kinematics
from pytrackseg.preprocessing.segmentation import moving_intervals
from pytrackseg.preprocessing.temporal import add_elapsed_seconds
from pytrackseg.reconstructing.reconstitute import select_in_intervals
from pytrackseg.utilities.config import Thresholds


def test_stop_go_stop_stage_by_stage(stop_go_stop):
    raw = add_elapsed_seconds(stop_go_stop)
    moving = bounds_filter(derive_kinematics(raw), min_speed=1, max_speed=80)
    intervals = moving_intervals(moving, leap=10, min_duration=15)

    assert len(intervals) == 1
    interval = intervals.iloc[0]
    assert interval["start_time"] == raw["second"].iloc[31]
    assert interval["end_time"] == raw["second"].iloc[69]
    assert interval["duration"] == pytest.approx(38.0)

    selected = select_in_intervals(raw, intervals)
    expected = raw.iloc[31:70].reset_index(drop=True)
    pd.testing.assert_frame_equal(selected, expected)


def test_process_trace_products(stop_go_stop):
    products, intervals = process_trace(stop_go_stop)
    assert list(products) == ["avg1", "avg2", "mov1", "mov2", "mov3", "climb", "hybrid"]
    assert len(intervals) == 1
    assert not intervals["is_climb"].iloc[0]

    start, end = intervals["start_time"].iloc[0], intervals["end_time"].iloc[0]
    for name in ("mov2", "mov3"):
        seconds = products[name]["second"]
        assert len(seconds) > 0
        assert ((seconds >= start) & (seconds <= end)).all()

    # no climbs: the hybrid track is the fine moving track
    assert len(products["climb"]) == 0
    assert len(products["hybrid"]) == len(products["mov3"])
    # the original trace is left alone
    assert "second" not in stop_go_stop.columns


def test_process_trace_finds_climb(climb_trace):
    products, intervals = process_trace(climb_trace)
    assert intervals["is_climb"].any()
    climb = products["climb"]
    assert len(climb) > 100
    hybrid_seconds = set(products["hybrid"]["second"])
    assert set(climb["second"]) <= hybrid_seconds
    assert np.all(np.diff(products["hybrid"]["second"].to_numpy()) >= 0)


def test_fix_adds_fixed_product(stop_go_stop):
    products, _ = process_trace(stop_go_stop, fix=True)
    assert list(products)[0] == "fixed"
    # stationary samples repeat coordinates and are dropped
    assert len(products["fixed"]) == 1 + 39
    assert len(products["mov2"]) > 0


def test_burst_method_and_custom_thresholds(stop_go_stop):
    thresholds = Thresholds(filter_method="burst", min_run_length=50)
    products, intervals = process_trace(stop_go_stop, thresholds)
    # the moving run is far shorter than 50 samples
    assert len(products["mov1"]) == 0
    assert len(intervals) == 0
    assert all(len(products[name]) == 0 for name in ("mov2", "mov3", "climb", "hybrid"))


def test_empty_trace(make_trace):
    products, intervals = process_trace(make_trace([]))
    assert len(intervals) == 0
    assert all(len(df) == 0 for df in products.values())
    with pytest.raises(EmptyTraceError):
        process_trace(make_trace([]), allow_empty=False)


def test_invalid_thresholds_rejected(stop_go_stop):
    with pytest.raises(ValueError):
        process_trace(stop_go_stop, Thresholds(min_speed=10, max_speed=5))


def test_polars_trace(stop_go_stop):
    products, intervals = process_trace(pl.from_pandas(stop_go_stop))
    assert isinstance(products["mov2"], pl.DataFrame)
    assert len(intervals) == 1


def test_repeated_timestamp_gives_zero_speed(make_trace):
    trace = make_trace([0.0, 5.0], seconds=[0.0, 0.0])
    moving = derive_kinematics(add_elapsed_seconds(trace))
    assert moving["speed"].iloc[1] == 0.0
    assert moving["distance"].iloc[1] == pytest.approx(5.0, abs=1e-6)
