"""
Great-circle distances on a spherical Earth.

Both helpers use the haversine formula with a mean Earth radius of 6371 km.
The haversine term is clipped to [0, 1] before taking the arcsine so that
floating point drift near antipodal points never leaves the domain.
"""

import math

import numpy as np

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two points in km."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat, dlng = math.radians(lat2 - lat1), math.radians(lng2 - lng1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


def haversine_km_many(
    lat: float,
    lng: float,
    lats: np.ndarray,
    lngs: np.ndarray,
) -> np.ndarray:
    """
    Distances in km from one point to many.

    Parameters
    ----------
    lat, lng:
        Reference point in degrees.
    lats, lngs:
        1D arrays of the same length, in degrees.

    Returns
    -------
    np.ndarray
        Array of distances with the shape of ``lats``.
    """
    lats_r = np.radians(np.asarray(lats, dtype=np.float64))
    lngs_r = np.radians(np.asarray(lngs, dtype=np.float64))
    lat_r, lng_r = math.radians(lat), math.radians(lng)

    a = (
        np.sin((lats_r - lat_r) / 2.0) ** 2
        + math.cos(lat_r) * np.cos(lats_r) * np.sin((lngs_r - lng_r) / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2.0 * np.arcsin(np.sqrt(a))
