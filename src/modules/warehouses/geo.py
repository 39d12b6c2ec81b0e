"""Great-circle distance between WGS84 coordinates.

Inputs are degrees; latitude must lie in [-90, 90] and longitude in
[-180, 180].  Range checks belong to the input layer (DRF serializers and
the order DTOs); this function does not enforce them.  A NaN coordinate
yields a NaN distance, so callers holding unvalidated data must guard.
"""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in kilometres between two points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Clamp: rounding can push ``a`` a hair above 1 for antipodal points.
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return EARTH_RADIUS_KM * c
