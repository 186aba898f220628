import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from pytrackseg.utilities.geometry import destination

BASE_LAT = 46.5
BASE_LON = 7.5
T0 = pd.Timestamp("2024-05-01T08:00:00Z")

# Valid GPX, but Latin-1 encoded: the track name is not UTF-8
LATIN1_GPX = (
    '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
    '<gpx version="1.1" creator="test"><trk><name>Col de lé</name><trkseg>'
    '<trkpt lat="46.5" lon="7.5"><time>2024-05-01T08:00:00Z</time></trkpt>'
    '</trkseg></trk></gpx>'
)


def build_trace(offsets_m, seconds=None, eles=None, azimuth=0.0):
    """Raw trace whose i-th sample lies offsets_m[i] meters from the base along azimuth."""
    n = len(offsets_m)
    if seconds is None:
        seconds = np.arange(n, dtype=float)
    if eles is None:
        eles = np.full(n, 500.0)
    lats, lons = [], []
    for d in offsets_m:
        if d == 0:
            lats.append(BASE_LAT)
            lons.append(BASE_LON)
        else:
            lat, lon = destination(BASE_LAT, BASE_LON, azimuth, float(d))
            lats.append(lat)
            lons.append(lon)
    return pd.DataFrame({
        "lat": lats,
        "lon": lons,
        "ele": np.asarray(eles, dtype=float),
        "time": T0 + pd.to_timedelta(np.asarray(seconds, dtype=float), unit="s"),
    })


def stop_go_stop_offsets():
    # 1 Hz, stationary 0-30, 2 m/s from 31 to 69, stationary again 70-99
    return [2.0 * (min(i, 69) - 30) if i > 30 else 0.0 for i in range(100)]


@pytest.fixture
def make_trace():
    return build_trace


@pytest.fixture
def stop_go_stop():
    return build_trace(stop_go_stop_offsets())


@pytest.fixture
def climb_trace():
    # 150 s heading north at 3 m/s while gaining 0.5 m/s, bracketed by stops
    offsets = [3.0 * min(max(i - 20, 0), 150) for i in range(200)]
    eles = [400.0 + 0.5 * min(max(i - 20, 0), 150) for i in range(200)]
    return build_trace(offsets, eles=eles)
