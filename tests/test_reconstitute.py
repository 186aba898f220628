import numpy as np
import pandas as pd
import polars as pl
import pytest

from pytrackseg.preprocessing.segmentation import INTERVAL_COLUMNS
from pytrackseg.reconstructing.reconstitute import advance_interval, select_in_intervals


def _samples(seconds):
    return pd.DataFrame({"second": np.asarray(seconds, dtype=float), "value": np.arange(len(seconds))})


def _intervals(bounds):
    return pd.DataFrame({
        "start_time": [float(b[0]) for b in bounds],
        "end_time": [float(b[1]) for b in bounds],
        "is_climb": [bool(b[2]) for b in bounds],
    })


def test_advance_interval_moves_forward_only():
    ends = np.array([10.0, 20.0, 30.0])
    assert advance_interval(ends, 0, 5.0) == 0
    assert advance_interval(ends, 0, 10.0) == 0
    assert advance_interval(ends, 0, 10.5) == 1
    assert advance_interval(ends, 1, 25.0) == 2
    assert advance_interval(ends, 2, 31.0) == 3
    assert advance_interval(ends, 2, 5.0) == 2


def test_keeps_samples_inside_inclusive_bounds():
    out = select_in_intervals(_samples(range(51)), _intervals([(10, 20, True), (30, 40, False)]))
    assert out["second"].tolist() == [float(s) for s in list(range(10, 21)) + list(range(30, 41))]


def test_every_kept_sample_lies_in_an_interval():
    samples = _samples(np.arange(0, 60, 0.7))
    ivs = _intervals([(3.2, 9.9, False), (15, 15.5, False), (40, 58, True)])
    out = select_in_intervals(samples, ivs)
    for second in out["second"]:
        assert ((ivs["start_time"] <= second) & (second <= ivs["end_time"])).any()
    # and nothing inside an interval was lost
    inside = samples["second"].apply(lambda s: ((ivs["start_time"] <= s) & (s <= ivs["end_time"])).any())
    assert len(out) == int(inside.sum())


def test_classification_restricts_to_flagged_intervals():
    out = select_in_intervals(_samples(range(51)), _intervals([(10, 20, True), (30, 40, False)]),
                              classification="is_climb")
    assert out["second"].tolist() == [float(s) for s in range(10, 21)]


def test_samples_after_last_interval_dropped():
    out = select_in_intervals(_samples([5, 6, 7, 100, 200]), _intervals([(0, 6, False)]))
    assert out["second"].tolist() == [5.0, 6.0]


def test_empty_intervals_give_empty_output():
    samples = _samples(range(1000))
    assert len(select_in_intervals(samples, _intervals([]))) == 0
    assert len(select_in_intervals(samples, pd.DataFrame(columns=INTERVAL_COLUMNS))) == 0


def test_unknown_classification_rejected():
    with pytest.raises(ValueError):
        select_in_intervals(_samples([1]), _intervals([(0, 2, True)]), classification="is_descent")


def test_other_columns_are_carried_through():
    out = select_in_intervals(_samples([1, 2, 3]), _intervals([(2, 3, False)]))
    assert out["value"].tolist() == [1, 2]
    assert out.index.tolist() == [0, 1]


def test_polars_samples_and_intervals():
    out = select_in_intervals(pl.from_pandas(_samples(range(10))), pl.from_pandas(_intervals([(2, 4, True)])))
    assert isinstance(out, pl.DataFrame)
    assert out["second"].to_list() == [2.0, 3.0, 4.0]
