"""Threshold configuration for the pytrackseg pipeline."""

from dataclasses import asdict, dataclass, replace
from typing import Optional

FILTER_METHODS = ("bounds", "burst")


@dataclass(frozen=True)
class Thresholds:
    """
    Immutable set of numeric thresholds consumed by the pipeline stages.

    Units: windows, gaps and durations in seconds; speeds in m/s; distances
    and elevations in meters; angles in degrees; run lengths in points.

    Attributes
    ----------
    rough_window : float, default=10
        Trailing window of the light smoothing pass.
    fine_window : float, default=60
        Trailing window of the heavy smoothing pass.
    min_speed, max_speed : float, default=1.0, 80.0
        Exclusive speed bounds of a moving sample.
    max_step : float or None, default=None
        Optional exclusive upper bound on the distance from the previous sample.
    max_gap : float, default=10
        Largest time gap allowed inside one run of the burst filter.
    min_run_length : int, default=5
        Runs of accepted samples shorter than this are retracted by the burst filter.
    filter_method : {"bounds", "burst"}, default="bounds"
        Noise/stationary filter policy.
    leap : float, default=10
        Time gap that separates two moving intervals, and the gap the hybrid
        merge fills from the secondary sequence.
    min_duration : float, default=15
        An interval must last longer than this to be kept.
    drop_duration, min_detectable_distance : float, default=60, 50
        An interval shorter than ``drop_duration`` that also covers less than
        ``min_detectable_distance`` is dropped as a stationary blip.
    min_climb_elevation, min_climb_distance : float, default=20, 200
        Net elevation gain and distance an interval needs to count as a climb.
    check_climb_bearing : bool, default=True
        Also require the low-to-high elevation direction to agree with the
        start-to-end direction of the interval.
    max_climb_bearing_deviation : float, default=90
        Largest circular difference between those two directions.
    """

    rough_window: float = 10.0
    fine_window: float = 60.0
    min_speed: float = 1.0
    max_speed: float = 80.0
    max_step: Optional[float] = None
    max_gap: float = 10.0
    min_run_length: int = 5
    filter_method: str = "bounds"
    leap: float = 10.0
    min_duration: float = 15.0
    drop_duration: float = 60.0
    min_detectable_distance: float = 50.0
    min_climb_elevation: float = 20.0
    min_climb_distance: float = 200.0
    check_climb_bearing: bool = True
    max_climb_bearing_deviation: float = 90.0

    def validate(self) -> "Thresholds":
        """Raise ValueError on inconsistent values, return self otherwise."""
        if self.rough_window < 0 or self.fine_window < 0:
            raise ValueError("window sizes must be >= 0")
        if self.min_speed >= self.max_speed:
            raise ValueError("min_speed must be smaller than max_speed")
        if self.max_step is not None and self.max_step <= 0:
            raise ValueError("max_step must be positive")
        if self.filter_method not in FILTER_METHODS:
            raise ValueError(f"filter_method must be one of {FILTER_METHODS}, got {self.filter_method!r}")
        if self.min_run_length < 1:
            raise ValueError("min_run_length must be >= 1")
        if self.leap <= 0 or self.max_gap <= 0:
            raise ValueError("leap and max_gap must be positive")
        if not 0 <= self.max_climb_bearing_deviation <= 180:
            raise ValueError("max_climb_bearing_deviation must be within [0, 180]")
        return self

    def replace(self, **changes) -> "Thresholds":
        """Return a validated copy with ``changes`` applied."""
        return replace(self, **changes).validate()

    def as_dict(self) -> dict:
        return asdict(self)
