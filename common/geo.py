from __future__ import annotations

import math
from typing import Tuple


# Mean Earth radius (m)
_EARTH_R_M = 6371008.8


# -------------------------
# Great-circle distance
# -------------------------
def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine great-circle distance (meters) on a mean-radius sphere."""
    p1 = math.radians(lat1)
    p2 = math.radians(lat2)
    dphi = p2 - p1
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2.0) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2.0) ** 2
    return 2 * _EARTH_R_M * math.asin(math.sqrt(a))


def midpoint(top: float, bottom: float, left: float, right: float) -> Tuple[float, float]:
    """
    Arithmetic center (lat, lon) of a lat/long rectangle.

    NOTE: plain average of the edges, not the geodesic midpoint; boxes crossing
    the antimeridian are not special-cased.
    """
    return (top + bottom) / 2.0, (left + right) / 2.0
