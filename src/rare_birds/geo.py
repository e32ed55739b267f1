"""Great-circle distance and viewport query radius."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rare_birds.schemas import Bounds

EARTH_RADIUS_KM = 6371.0

# The sightings API rejects a search radius above 25 km.
MAX_RADIUS_KM = 25.0
DEFAULT_RADIUS_KM = MAX_RADIUS_KM


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two points given in degrees."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # atan2 form keeps antipodal points stable when rounding pushes a past 1
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_KM * c


def viewport_radius_km(bounds: Bounds | None) -> float:
    """
    Query radius covering the visible map, capped at ``MAX_RADIUS_KM``.

    Half of the larger of the east-west and north-south extents, both measured
    from the north-east corner. Falls back to ``DEFAULT_RADIUS_KM`` when the
    map hasn't reported its bounds yet.
    """
    if bounds is None:
        return DEFAULT_RADIUS_KM

    ne, sw = bounds.ne, bounds.sw
    east_west = distance_km(ne.lat, ne.lng, ne.lat, sw.lng)
    north_south = distance_km(ne.lat, ne.lng, sw.lat, ne.lng)
    return min(max(east_west, north_south) / 2, MAX_RADIUS_KM)
