import dataclasses

import pytest

from pytrackseg.utilities.config import Thresholds


def test_defaults_are_valid():
    t = Thresholds().validate()
    assert t.min_speed < t.max_speed
    assert t.filter_method == "bounds"


def test_thresholds_are_immutable():
    t = Thresholds()
    with pytest.raises(dataclasses.FrozenInstanceError):
        t.leap = 20


def test_replace_returns_validated_copy():
    t = Thresholds()
    t2 = t.replace(leap=30.0, filter_method="burst")
    assert t2.leap == 30.0
    assert t2.filter_method == "burst"
    assert t.leap == 10.0


@pytest.mark.parametrize("changes", [
    {"min_speed": 5.0, "max_speed": 5.0},
    {"rough_window": -1.0},
    {"filter_method": "kalman"},
    {"min_run_length": 0},
    {"max_step": 0.0},
    {"leap": 0.0},
    {"max_climb_bearing_deviation": 200.0},
])
def test_invalid_values_rejected(changes):
    with pytest.raises(ValueError):
        Thresholds(**changes).validate()


def test_as_dict_lists_every_field():
    assert set(Thresholds().as_dict()) == {f.name for f in dataclasses.fields(Thresholds)}
