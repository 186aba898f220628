"""
Geometry collaborators for pytrackseg.

Three primitives are used by the pipeline stages:

- ``geodesic_distance``: true distance on the WGS84 ellipsoid (pyproj Geod)
- ``midpoint``: geographic centre of a set of coordinates
- ``planar_bearing``: direction angle of a coordinate delta in the lat/lon plane

All of them accept scalars or numpy arrays so the stages can stay vectorised.
"""

from typing import Tuple, Union

import numpy as np
from pyproj import Geod

ArrayLike = Union[float, np.ndarray]

# Single Geod instance for WGS84 ellipsoid calculations (reused for efficiency)
_GEOD = Geod(ellps="WGS84")


def geodesic_distance(lat1: ArrayLike, lon1: ArrayLike,
                      lat2: ArrayLike, lon2: ArrayLike) -> ArrayLike:
    """
    Geodesic distance in meters between (lat1, lon1) and (lat2, lon2).

    Parameters
    ----------
    lat1, lon1 : float or np.ndarray
        Coordinates of the first point(s) in WGS84 decimal degrees.
    lat2, lon2 : float or np.ndarray
        Coordinates of the second point(s). Arrays must have the same shape
        as the first point arrays.

    Returns
    -------
    float or np.ndarray
        Distance(s) in meters. Scalars in, float out; arrays in, array out.

    Examples
    --------
    >>> geodesic_distance(56.95, 24.10, 56.96, 24.10)  # ~1113 m due north
    """
    # pyproj.Geod.inv expects lon, lat order and returns (az12, az21, dist)
    _, _, dist = _GEOD.inv(lon1, lat1, lon2, lat2)
    if np.ndim(dist) == 0:
        return float(dist)
    return np.asarray(dist, dtype=float)


def destination(lat: float, lon: float, azimuth: float, distance_m: float) -> Tuple[float, float]:
    """Point reached from (lat, lon) after ``distance_m`` meters along ``azimuth`` degrees."""
    lon2, lat2, _ = _GEOD.fwd(lon, lat, azimuth, distance_m)
    return float(lat2), float(lon2)


def midpoint(lats: np.ndarray, lons: np.ndarray) -> Tuple[float, float]:
    """
    Geographic midpoint of a set of coordinates.

    Each coordinate is converted to a unit vector on the sphere, the vectors are
    averaged and the mean vector is converted back to latitude/longitude. Unlike
    a plain average of degrees this is correct across the antimeridian.

    A single coordinate is returned unchanged (no trigonometric round trip).

    Parameters
    ----------
    lats, lons : np.ndarray
        Latitudes and longitudes in decimal degrees, same length, at least one.

    Returns
    -------
    tuple of float
        (lat, lon) of the midpoint in decimal degrees.
    """
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    if lats.size == 0:
        raise ValueError("midpoint of an empty coordinate set is undefined")
    if lats.size == 1:
        return float(lats[0]), float(lons[0])

    phi = np.radians(lats)
    lam = np.radians(lons)
    x = float(np.mean(np.cos(phi) * np.cos(lam)))
    y = float(np.mean(np.cos(phi) * np.sin(lam)))
    z = float(np.mean(np.sin(phi)))

    lon_c = np.arctan2(y, x)
    hyp = np.sqrt(x * x + y * y)
    lat_c = np.arctan2(z, hyp)
    return float(np.degrees(lat_c)), float(np.degrees(lon_c))


def planar_bearing(dx: ArrayLike, dy: ArrayLike) -> ArrayLike:
    """
    Angle in degrees of the vector (dx, dy), in [-180, 180].

    ``dx`` is the longitude delta and ``dy`` the latitude delta, so 0° points
    east and 90° points north. This is a plane angle, not a compass azimuth;
    it is only used to compare directions with each other.
    """
    angle = np.degrees(np.arctan2(dy, dx))
    if np.ndim(angle) == 0:
        return float(angle)
    return angle
