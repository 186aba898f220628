"""
End-to-end processing of one GPS trace.

``process_trace`` runs every stage in dependency order and returns each named
intermediate sequence so that it can be exported:

1. elapsed seconds on the raw trace (optionally after the bad-time fix)
2. rough and fine window averages of the raw trace, with kinematics
3. noise/stationary filter on the rough average
4. moving intervals of the filtered sequence
5. raw, fine and climb-only samples re-selected inside the intervals
6. climb samples merged with the fine moving samples
"""

import logging
from typing import Dict, Optional, Tuple, Union

import pandas as pd
import polars as pl
from tqdm import tqdm

from pytrackseg.exceptions import EmptyTraceError
from pytrackseg.preprocessing.filtration import filter_moving
from pytrackseg.preprocessing.kinematics import derive_kinematics
from pytrackseg.preprocessing.segmentation import moving_intervals
from pytrackseg.preprocessing.smoothing import window_average
from pytrackseg.preprocessing.temporal import add_elapsed_seconds, drop_bad_timestamps
from pytrackseg.reconstructing.combine import hybrid_merge
from pytrackseg.reconstructing.reconstitute import select_in_intervals
from pytrackseg.utilities.config import Thresholds

logger = logging.getLogger(__name__)

Frame = Union[pd.DataFrame, pl.DataFrame]

PRODUCT_NAMES = ("fixed", "avg1", "avg2", "mov1", "mov2", "mov3", "climb", "hybrid")


def process_trace(
    df: Frame,
    thresholds: Optional[Thresholds] = None,
    fix: bool = False,
    allow_empty: bool = True,
    verbose: bool = False
) -> Tuple[Dict[str, Frame], pd.DataFrame]:
    """
    Smooth, filter and segment a raw trace.

    Parameters
    ----------
    df : pd.DataFrame or pl.DataFrame
        Raw samples with ``lat``, ``lon``, ``ele`` and ``time`` columns, in
        chronological order (see ``read_gpx``).
    thresholds : Thresholds, optional
        Stage thresholds. ``Thresholds()`` defaults when omitted.
    fix : bool, default=False
        Drop samples with non-advancing time or repeated coordinates first,
        and expose the result as the ``fixed`` product.
    allow_empty : bool, default=True
        If False, an empty trace raises EmptyTraceError instead of producing
        empty products.
    verbose : bool, default=False
        Show tqdm progress bars for the stages and the window passes.

    Returns
    -------
    products : dict of str to DataFrame
        Named sequences, in pipeline order:

        - ``fixed``: raw trace after the bad-time fix (only with ``fix=True``)
        - ``avg1``: rough window average with kinematics
        - ``avg2``: fine window average with kinematics
        - ``mov1``: ``avg1`` after the noise/stationary filter
        - ``mov2``: raw samples inside moving intervals
        - ``mov3``: ``avg2`` samples inside moving intervals
        - ``climb``: raw samples inside climbing intervals
        - ``hybrid``: ``climb`` with its gaps filled from ``mov3``
    intervals : pd.DataFrame
        The moving intervals detected on ``mov1``.

    Raises
    ------
    EmptyTraceError
        If the trace is empty and ``allow_empty`` is False.

    Examples
    --------
    >>> products, intervals = process_trace(read_gpx('ride.gpx'),
    ...                                     Thresholds(filter_method='burst'))
    >>> write_products(products, 'ride.gpx')
    """
    t = (thresholds or Thresholds()).validate()
    products: Dict[str, Frame] = {}

    steps = tqdm(total=6, desc="pipeline") if verbose else None

    def _step(message, *args):
        logger.debug(message, *args)
        if steps is not None:
            steps.update(1)

    raw = df
    if fix:
        raw = drop_bad_timestamps(raw)
        products["fixed"] = raw
        logger.info("Bad-time fix kept %d of %d samples", len(raw), len(df))

    raw = add_elapsed_seconds(raw, require_points=not allow_empty)
    _step("Normalised %d samples", len(raw))

    avg1 = derive_kinematics(window_average(raw, t.rough_window, verbose=verbose))
    avg2 = derive_kinematics(window_average(raw, t.fine_window, verbose=verbose))
    products["avg1"] = avg1
    products["avg2"] = avg2
    _step("Window averages: %d rough, %d fine", len(avg1), len(avg2))

    mov1 = filter_moving(
        avg1,
        method=t.filter_method,
        min_speed=t.min_speed,
        max_speed=t.max_speed,
        max_step=t.max_step,
        max_gap=t.max_gap,
        min_run_length=t.min_run_length,
    )
    products["mov1"] = mov1
    _step("%s filter kept %d of %d samples", t.filter_method, len(mov1), len(avg1))

    intervals = moving_intervals(
        mov1,
        leap=t.leap,
        min_duration=t.min_duration,
        drop_duration=t.drop_duration,
        min_detectable_distance=t.min_detectable_distance,
        min_climb_elevation=t.min_climb_elevation,
        min_climb_distance=t.min_climb_distance,
        check_climb_bearing=t.check_climb_bearing,
        max_climb_bearing_deviation=t.max_climb_bearing_deviation,
    )
    _step("Found %d moving intervals", len(intervals))

    products["mov2"] = select_in_intervals(raw, intervals)
    products["mov3"] = select_in_intervals(avg2, intervals)
    products["climb"] = select_in_intervals(raw, intervals, classification="is_climb")
    _step("Re-selected %d raw, %d fine, %d climb samples",
          len(products["mov2"]), len(products["mov3"]), len(products["climb"]))

    products["hybrid"] = hybrid_merge(products["climb"], products["mov3"], leap=t.leap)
    _step("Hybrid track has %d samples", len(products["hybrid"]))

    if steps is not None:
        steps.close()

    logger.info("Processed %d samples into %d intervals (%d climbs)",
                len(raw), len(intervals), int(intervals["is_climb"].sum()) if len(intervals) else 0)
    return products, intervals
