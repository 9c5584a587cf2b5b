"""
modules/geo/distance.py
------------------------
Great-circle distances on a spherical earth (Haversine formula).

  haversine_km()   — one segment, kilometres
  distance()       — one segment, in a DistanceUnit
  path_length()    — sum of consecutive segments, in a DistanceUnit
  radius_meters()  — geofence radius converted for map overlays

Segments are summed in the order given; no reordering.
"""

from __future__ import annotations

import math
from typing import Sequence

from schemas.tour import DistanceUnit

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EARTH_RADIUS_KM = 6371.0088   # mean earth radius
_KM_PER_MILE = 1.609344
_METERS_PER_MILE = 1609.34     # overlay conversion used by the map UI

Coordinate = tuple[float, float]


# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * r * math.asin(math.sqrt(a))


def km_to(km: float, unit: DistanceUnit) -> float:
    """Convert kilometres into ``unit``."""
    if unit is DistanceUnit.MILES:
        return km / _KM_PER_MILE
    return km


def distance(a: Coordinate, b: Coordinate, unit: DistanceUnit = DistanceUnit.KM) -> float:
    """Great-circle distance between two (lat, lng) pairs in ``unit``."""
    if a[0] == b[0] and a[1] == b[1]:
        return 0.0
    return km_to(haversine_km(a[0], a[1], b[0], b[1]), unit)


def path_length(points: Sequence[Coordinate], unit: DistanceUnit = DistanceUnit.KM) -> float:
    """
    Length of the polyline through ``points`` in ``unit``.

    Fewer than two points have no segments, so the length is exactly 0.
    """
    if len(points) < 2:
        return 0.0
    return sum(distance(points[i], points[i + 1], unit) for i in range(len(points) - 1))


def radius_meters(radius: float, unit: DistanceUnit) -> float:
    """Geofence radius in metres for drawing the overlay circle."""
    if unit is DistanceUnit.MILES:
        return radius * _METERS_PER_MILE
    return radius * 1000.0
